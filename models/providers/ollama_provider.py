from typing import TYPE_CHECKING, Any
from openai import AsyncOpenAI
from .base_model_provider import BaseModelProvider
from .exceptions import ProviderError
import httpx
import logging

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletion
    from config.settings import SystemConfig, ModelConfig

logger = logging.getLogger(__name__)


class OllamaProvider(BaseModelProvider):
    """Ollama model provider implementation."""

    def __init__(self, system_config: "SystemConfig", client: AsyncOpenAI | None = None):
        super().__init__(system_config)
        self._client = client or AsyncOpenAI(
            base_url=f"{system_config.ollama_base_url}/v1",
            api_key="ollama",  # Ollama doesn't require real API key
            timeout=system_config.ollama.timeout,
        )
        self._ollama_base_url = system_config.ollama_base_url

    @property
    def provider_name(self) -> str:
        return "ollama"

    async def is_running(self) -> bool:
        """Fast health check to see if Ollama server is running."""
        try:
            async with httpx.AsyncClient(timeout=1.0) as client:
                response = await client.get(f"{self._ollama_base_url}/api/tags")
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.debug(f"Ollama health check failed: {e}")
            return False

    async def get_available_models(self) -> list[str]:
        """Get list of available models from Ollama."""
        if not await self.is_running():
            logger.error("Failed to get Ollama models: Connection error.")
            return []

        try:
            models = await self._client.models.list()
            return [model.id for model in models.data]
        except Exception as e:
            logger.error(f"Failed to get Ollama models: {e}")
            return []

    async def generate_response(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides
    ) -> str:
        """Generate a response using Ollama."""
        if overrides.get("web_search"):
            logger.debug(
                f"Ollama model {model_config.name} has no web search, generating without grounding"
            )

        params: dict[str, Any] = {
            "model": model_config.name,
            "messages": messages,
            "max_tokens": overrides.get("max_tokens", model_config.max_tokens),
            "temperature": overrides.get("temperature", model_config.temperature),
        }

        # Add Ollama-specific parameters to extra_body
        ollama_config = self.system_config.ollama
        extra_body = {}
        if ollama_config.keep_alive is not None:
            extra_body["keep_alive"] = ollama_config.keep_alive
        if ollama_config.repeat_penalty is not None:
            extra_body["repeat_penalty"] = ollama_config.repeat_penalty
        if ollama_config.num_gpu_layers is not None:
            extra_body["num_gpu"] = ollama_config.num_gpu_layers
        if ollama_config.num_thread is not None:
            extra_body["num_thread"] = ollama_config.num_thread

        if extra_body:
            params["extra_body"] = extra_body

        try:
            response: "ChatCompletion" = await self._client.chat.completions.create(**params)
        except Exception as e:
            logger.error(f"Ollama generation failed for {model_config.name}: {e}")
            raise ProviderError(self.provider_name, str(e)) from e

        content = response.choices[0].message.content or ""
        logger.debug(
            f"Generated {len(content)} chars from Ollama model {model_config.name}"
        )
        return content.strip()

    def validate_model_config(self, model_config: "ModelConfig") -> bool:
        """Validate Ollama model configuration."""
        return model_config.provider == "ollama"
