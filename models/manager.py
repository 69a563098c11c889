"""Model manager with multi-provider support."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TypeAlias

from config.settings import ModelConfig, SystemConfig

from .providers.base_model_provider import BaseModelProvider
from .providers.providers import ProviderFactory

MessageDict: TypeAlias = dict[str, str]
MessageList: TypeAlias = list[MessageDict]
ModelCatalog: TypeAlias = dict[str, list[str]]

logger = logging.getLogger(__name__)


class ModelManager:
    """Manages model inference via multiple providers."""

    def __init__(self, system_config: SystemConfig):
        self._system_config = system_config
        self._model_configs: dict[str, ModelConfig] = {}
        self._providers: dict[str, BaseModelProvider] = {}

    def _get_provider(self, provider_name: str) -> BaseModelProvider:
        """Return (and cache) the provider instance identified by name."""
        if provider_name not in self._providers:
            self._providers[provider_name] = ProviderFactory.create_provider(
                provider_name, self._system_config
            )
        return self._providers[provider_name]

    def use_provider(self, provider: BaseModelProvider) -> None:
        """Install a ready-made provider instance under its own name."""
        self._providers[provider.provider_name] = provider

    def register_model(self, model_id: str, config: ModelConfig) -> None:
        """Register a model configuration for quick lookup."""
        try:
            provider = self._get_provider(config.provider)
            if not provider.validate_model_config(config):
                msg = f"Invalid model config for provider {config.provider}"
                raise ValueError(msg)
        except ValueError as exc:
            logger.error("Failed to register model %s: %s", model_id, exc)
            raise

        self._model_configs[model_id] = config
        logger.info("Registered model %s: %s (%s)", model_id, config.name, config.provider)

    def is_registered(self, model_id: str) -> bool:
        return model_id in self._model_configs

    def supports_web_search(self, model_id: str) -> bool:
        """Whether the provider behind model_id can ground on live search."""
        if model_id not in self._model_configs:
            raise ValueError(f"Model {model_id} not registered")
        return self._get_provider(self._model_configs[model_id].provider).supports_web_search()

    async def generate_response(
        self, model_id: str, messages: MessageList, **overrides: object
    ) -> str:
        """Generate a response from the specified model."""
        if model_id not in self._model_configs:
            raise ValueError(f"Model {model_id} not registered")

        config = self._model_configs[model_id]
        provider = self._get_provider(config.provider)

        response = await provider.generate_response(config, messages, **overrides)
        logger.debug(
            "Generated %s chars from %s (%s)", len(response), model_id, config.provider
        )
        return response

    @asynccontextmanager
    async def model_session(self, model_id: str) -> AsyncIterator["ModelManager"]:
        """Create a session context for model operations."""
        if model_id not in self._model_configs:
            raise ValueError(f"Model {model_id} not registered")

        logger.debug("Starting session for model %s", model_id)
        try:
            yield self
        finally:
            logger.debug("Ending session for model %s", model_id)

    async def get_available_models(self) -> ModelCatalog:
        """Get list of available models from all providers."""
        all_models: ModelCatalog = {}

        for provider_name in ProviderFactory.get_available_providers():
            try:
                provider = self._get_provider(provider_name)
                models = await provider.get_available_models()
                all_models[provider_name] = models
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to get models from %s: %s", provider_name, exc)
                all_models[provider_name] = []

        return all_models
