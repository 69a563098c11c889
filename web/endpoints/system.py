"""System health and perspective endpoints."""

import logging

from fastapi import APIRouter

from coach_engine import PERSPECTIVES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"isAlive": True}


@router.get("/perspectives")
async def get_perspectives():
    """Get the rotation of perspectives used for counter-arguments."""
    return {
        "perspectives": [
            {
                "key": perspective.key,
                "label": perspective.label,
                "focus": perspective.focus,
            }
            for perspective in PERSPECTIVES
        ]
    }
