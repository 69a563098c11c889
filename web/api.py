"""FastAPI web application for the debate coach."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.coach_manager import CoachManager
from web.endpoints.models import router as models_router
from web.endpoints.session import router as session_router, ws_router as session_ws_router
from web.endpoints.system import router as system_router

logger: logging.Logger = logging.getLogger(__name__)

# Global coach manager, created on first use
coach_manager: CoachManager | None = None


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifespan - startup and shutdown."""
    from web.endpoints.session import setup_coach_manager

    manager = setup_coach_manager()
    logger.info(
        f"Coach ready: level={manager.coach.level}, topic={manager.coach.topic}, "
        f"rounds={manager.coach.max_rounds}"
    )

    yield

    # Shutdown: drop any outstanding generation call and pending speech
    await manager.coach.reset()
    logger.info("Coach session closed")


def get_allowed_origins() -> list[str] | None:
    """Get CORS origins from environment or use development defaults."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        origins = [origin.strip() for origin in env_origins.split(",")]
        return origins
    return None


# FastAPI app
app: FastAPI = FastAPI(
    title="Debatcoach AI",
    description="Argumentation training with AI-generated counter-arguments and feedback",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware setup
allowed_origins: list[str] | None = get_allowed_origins()

if allowed_origins:

    logger.info(f"Setting CORS allowed origins: {allowed_origins}")

    # Production: Use specific origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:

    logger.info("No ALLOWED_ORIGINS set, using development CORS settings")

    # Development: Allow any localhost/127.0.0.1
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(system_router)
app.include_router(models_router)
app.include_router(session_router)
app.include_router(session_ws_router)
