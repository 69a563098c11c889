"""Model and provider status endpoints."""

import logging
import os
from typing import Any

from fastapi import HTTPException, APIRouter

from models.providers import ProviderFactory, OllamaProvider
from web.endpoints.session import setup_coach_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/models")
async def get_models():
    """Get configured generation models and what each provider offers."""
    try:
        coach_manager = setup_coach_manager()
        generation = coach_manager.config.generation
        models_by_provider = await coach_manager.model_manager.get_available_models()

        return {
            "configured": {
                "grounded": generation.grounded.model_dump(),
                "reasoning": generation.reasoning.model_dump(),
            },
            "models_by_provider": models_by_provider,
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/providers")
async def get_providers():
    """Get available model providers and their status."""
    coach_manager = setup_coach_manager()
    system_config = coach_manager.config.system
    providers = []

    for provider_name in ProviderFactory.get_available_providers():
        provider_info: dict[str, Any] = {
            "name": provider_name,
            "status": "available",
        }

        if provider_name == "openrouter":
            api_key_configured = bool(
                system_config.openrouter.api_key or os.getenv("OPENROUTER_API_KEY")
            )
            provider_info["api_key_configured"] = api_key_configured
            provider_info["web_search"] = True
            if not api_key_configured:
                provider_info["status"] = "requires_api_key"
        elif provider_name == "ollama":
            try:
                provider = ProviderFactory.create_provider(provider_name, system_config)
                running = isinstance(provider, OllamaProvider) and await provider.is_running()
            except Exception as e:
                logger.debug(f"Ollama provider check failed: {e}")
                running = False
            provider_info["status"] = "available" if running else "offline"
            provider_info["ollama_running"] = running
            provider_info["web_search"] = False

        providers.append(provider_info)

    return {"providers": providers}
