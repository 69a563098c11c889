"""Adapter between the coach and the configured language models."""

from typing import Protocol
import logging
import time

from config.settings import AppConfig, ModelConfig
from models.manager import ModelManager

from .exceptions import GenerationFailure
from .types import GenerationMode

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that can turn an instruction text into a reply."""

    async def generate(
        self, prompt: str, mode: GenerationMode, grounding_enabled: bool = False
    ) -> str: ...


class GenerationService:
    """Generation service backed by the model manager.

    ``GenerationMode.GROUNDED`` maps to the ``generation.grounded`` model and
    ``GenerationMode.REASONING`` to ``generation.reasoning``. Every failure,
    including an empty reply, surfaces as ``GenerationFailure``.
    """

    def __init__(self, config: AppConfig, model_manager: ModelManager):
        self.config = config
        self.model_manager = model_manager

    def _model_for(self, mode: GenerationMode) -> tuple[str, ModelConfig]:
        model_id = "grounded" if mode == GenerationMode.GROUNDED else "reasoning"
        model_config: ModelConfig = getattr(self.config.generation, model_id)
        if not self.model_manager.is_registered(model_id):
            self.model_manager.register_model(model_id, model_config)
        return model_id, model_config

    async def generate(
        self, prompt: str, mode: GenerationMode, grounding_enabled: bool = False
    ) -> str:
        """Send prompt as a single user message and return the stripped reply."""
        start_time = time.time()
        try:
            model_id, model_config = self._model_for(mode)
            web_search = grounding_enabled and self.model_manager.supports_web_search(
                model_id
            )
            if grounding_enabled and not web_search:
                logger.debug(
                    f"Grounding requested but {model_config.provider} cannot search; generating without it"
                )

            logger.info(
                f"Generating {mode.value} reply with {model_config.name} via {model_config.provider}"
            )
            async with self.model_manager.model_session(model_id):
                response = await self.model_manager.generate_response(
                    model_id,
                    [{"role": "user", "content": prompt}],
                    web_search=web_search,
                )
        except Exception as e:
            generation_time = time.time() - start_time
            logger.error(
                f"{mode.value} generation failed after {generation_time:.2f}s: {type(e).__name__}: {e}"
            )
            raise GenerationFailure(mode, f"{type(e).__name__}: {e}") from e

        text = response.strip()
        if not text:
            logger.error(f"{mode.value} generation returned an empty reply")
            raise GenerationFailure(mode, "empty reply")

        logger.info(
            f"Generated {len(text)} chars in {time.time() - start_time:.2f}s ({mode.value})"
        )
        return text
