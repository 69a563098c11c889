import os
import asyncio
import time
from typing import TYPE_CHECKING, Any, ClassVar
import logging
import httpx

from .base_model_provider import BaseModelProvider
from .exceptions import ProviderError, ProviderRateLimitError

if TYPE_CHECKING:
    from config.settings import SystemConfig, ModelConfig

logger = logging.getLogger(__name__)


class OpenRouterProvider(BaseModelProvider):
    """OpenRouter model provider implementation."""

    # Class-level rate limiting to prevent 429 errors
    _last_request_time: ClassVar[float | None] = None
    _request_lock: ClassVar[asyncio.Lock] = asyncio.Lock()
    _min_request_interval: ClassVar[float] = 1.0

    def __init__(
        self,
        system_config: "SystemConfig",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(system_config)
        self._transport = transport

        # Get API key from config or environment
        self._api_key = system_config.openrouter.api_key or os.getenv("OPENROUTER_API_KEY")
        if not self._api_key:
            logger.warning(
                "No OpenRouter API key found. Set OPENROUTER_API_KEY or configure in system settings."
            )

    @property
    def provider_name(self) -> str:
        return "openrouter"

    def supports_web_search(self) -> bool:
        return True

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self.system_config.openrouter.site_url:
            headers["HTTP-Referer"] = self.system_config.openrouter.site_url
        if self.system_config.openrouter.app_name:
            headers["X-Title"] = self.system_config.openrouter.app_name
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.system_config.openrouter.base_url,
            headers=self._headers(),
            timeout=self.system_config.openrouter.timeout,
            transport=self._transport,
        )

    async def _rate_limit_request(self) -> None:
        """Ensure minimum time between requests to avoid 429 errors."""
        async with self._request_lock:
            current_time = time.time()

            if self._last_request_time is not None:
                time_since_last = current_time - self._last_request_time
                if time_since_last < self._min_request_interval:
                    sleep_time = self._min_request_interval - time_since_last
                    logger.debug(
                        f"Rate limiting: waiting {sleep_time:.2f}s before next OpenRouter request"
                    )
                    await asyncio.sleep(sleep_time)

            OpenRouterProvider._last_request_time = time.time()

    async def get_available_models(self) -> list[str]:
        """Get list of model ids served by OpenRouter."""
        if not self._api_key:
            logger.warning("OpenRouter API key missing - no models available")
            return []

        try:
            async with self._client() as client:
                response = await client.get("/models")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to get OpenRouter models: {e}")
            return []

        return [model["id"] for model in data.get("data", []) if "id" in model]

    def _build_payload(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": model_config.name,
            "messages": messages,
            "max_tokens": overrides.get("max_tokens", model_config.max_tokens),
            "temperature": overrides.get("temperature", model_config.temperature),
            "reasoning": {"exclude": True},
        }
        if overrides.get("web_search"):
            payload["plugins"] = [
                {
                    "id": "web",
                    "max_results": self.system_config.openrouter.web_search_max_results,
                }
            ]
        return payload

    async def generate_response(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides
    ) -> str:
        """Generate a response using OpenRouter."""
        if not self._api_key:
            raise ProviderError(self.provider_name, "client not initialized - check API key")

        payload = self._build_payload(model_config, messages, **overrides)

        # Apply rate limiting before API request
        await self._rate_limit_request()

        try:
            async with self._client() as client:
                http_response = await client.post("/chat/completions", json=payload)
                if http_response.status_code == 429:
                    retry_after = http_response.headers.get("Retry-After")
                    raise ProviderRateLimitError(
                        self.provider_name,
                        float(retry_after) if retry_after and retry_after.isdigit() else None,
                    )
                http_response.raise_for_status()
                response_data = http_response.json()
        except ProviderRateLimitError:
            logger.warning(f"OpenRouter rate limited request for {model_config.name}")
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"OpenRouter generation failed for {model_config.name}: {e}")
            raise ProviderError(self.provider_name, str(e)) from e

        if "error" in response_data:
            error = response_data["error"]
            message = error.get("message", error) if isinstance(error, dict) else error
            raise ProviderError(self.provider_name, str(message))

        choices = response_data.get("choices") or []
        if not choices:
            raise ProviderError(self.provider_name, f"no choices returned by {model_config.name}")

        content = choices[0]["message"].get("content") or ""

        if not content.strip():
            logger.warning(
                f"OpenRouter model {model_config.name} returned empty content. "
                f"Response data: {response_data}"
            )
        else:
            logger.debug(
                f"Generated {len(content)} chars from OpenRouter model {model_config.name}"
            )

        return content.strip()

    def validate_model_config(self, model_config: "ModelConfig") -> bool:
        """Validate OpenRouter model configuration."""
        return model_config.provider == "openrouter"
