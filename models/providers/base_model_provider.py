from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import SystemConfig, ModelConfig


class BaseModelProvider(ABC):
    """Abstract base class for model providers."""

    def __init__(self, system_config: "SystemConfig"):
        self.system_config = system_config

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider."""
        pass

    @abstractmethod
    async def get_available_models(self) -> list[str]:
        """Get list of available models from this provider."""
        pass

    @abstractmethod
    async def generate_response(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides
    ) -> str:
        """Generate a response using this provider.

        Args:
            model_config: Configuration for the model to use
            messages: List of chat messages
            **overrides: ``max_tokens`` / ``temperature`` overrides and
                ``web_search`` to request grounding on current events

        Returns:
            The stripped response text
        """
        pass

    @abstractmethod
    def validate_model_config(self, model_config: "ModelConfig") -> bool:
        """Validate that a model configuration is compatible with this provider."""
        pass

    def supports_web_search(self) -> bool:
        """Check if this provider can ground responses on live search results."""
        return False
