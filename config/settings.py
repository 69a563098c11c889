"""Configuration settings and data models."""

from typing import Literal
from pydantic import BaseModel, Field, field_validator
import yaml
from pathlib import Path


class ModelConfig(BaseModel):
    """Configuration for a generation model."""

    name: str = Field(..., description="Model name (e.g., 'qwen2.5:7b' for Ollama, 'google/gemini-2.5-flash' for OpenRouter)")
    provider: str = Field(default="ollama", description="Model provider (ollama, openrouter)")
    max_tokens: int = Field(default=400, description="Maximum tokens per response")
    temperature: float = Field(default=0.7, description="Model temperature")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        valid_providers = {"ollama", "openrouter"}
        if v not in valid_providers:
            raise ValueError(f"Provider must be one of: {valid_providers}")
        return v


class CoachConfig(BaseModel):
    """Debate training session configuration."""

    level: str = Field(default="havo/vwo", description="School level of the learner")
    topic: str = Field(
        default="actualiteit", description="Subject area the proposition should come from"
    )
    max_rounds: int = Field(default=4, description="Number of counter-argument rounds")
    generate_opening_counter_argument: bool = Field(
        default=False,
        description="Ask the model for the first counter-argument instead of using the built-in one",
    )

    @field_validator("max_rounds")
    @classmethod
    def validate_max_rounds(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_rounds must be at least 1")
        return v


class GenerationConfig(BaseModel):
    """Models used for the two generation modes."""

    grounded: ModelConfig = Field(
        ..., description="Current-events model used to generate propositions"
    )
    reasoning: ModelConfig = Field(
        ..., description="Reasoning model used for feedback and counter-arguments"
    )


class SpeechConfig(BaseModel):
    """Speech input/output settings."""

    enabled: bool = Field(default=False, description="Read new coach messages aloud")
    locale: str = Field(default="nl-NL", description="Locale for recognition and synthesis")
    playback_delay: float = Field(
        default=0.5, description="Seconds to wait before speaking a new coach message"
    )
    rate: float = Field(default=0.9, description="Speech rate")
    pitch: float = Field(default=1.0, description="Speech pitch")
    volume: float = Field(default=0.8, description="Speech volume (0.0-1.0)")

    @field_validator("playback_delay")
    @classmethod
    def validate_playback_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("playback_delay cannot be negative")
        return v


class OllamaConfig(BaseModel):
    """Ollama-specific configuration for hardware optimization."""

    num_gpu_layers: int | None = Field(
        default=None, description="Number of layers to offload to GPU (-1 for all, 0 for CPU-only)"
    )
    num_thread: int | None = Field(
        default=None, description="Number of CPU threads for processing"
    )
    keep_alive: str | None = Field(
        default="5m", description="How long to keep models loaded (e.g., '5m', '1h', '0' for immediate unload)"
    )
    repeat_penalty: float | None = Field(
        default=1.1, description="Penalty for repetition in responses"
    )
    timeout: float = Field(
        default=120.0, description="Request timeout in seconds (covers model loading)"
    )


class OpenRouterConfig(BaseModel):
    """OpenRouter-specific configuration."""

    api_key: str | None = Field(
        default=None, description="OpenRouter API key (can also be set via OPENROUTER_API_KEY env var)"
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    site_url: str | None = Field(
        default=None, description="Your site URL for OpenRouter referrer tracking"
    )
    app_name: str | None = Field(
        default="Debatcoach AI", description="App name for OpenRouter tracking"
    )
    web_search_max_results: int = Field(
        default=3, description="Search results injected when grounding is enabled"
    )
    timeout: int = Field(
        default=60, description="API request timeout in seconds"
    )


class SystemConfig(BaseModel):
    """System-wide configuration."""

    ollama_base_url: str = Field(
        default="http://localhost:11434", description="Ollama API URL"
    )
    ollama: OllamaConfig = Field(
        default_factory=OllamaConfig, description="Ollama-specific settings"
    )
    openrouter: OpenRouterConfig = Field(
        default_factory=OpenRouterConfig, description="OpenRouter-specific settings"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")


class AppConfig(BaseModel):
    """Complete application configuration."""

    coach: CoachConfig
    generation: GenerationConfig
    speech: SpeechConfig = Field(default_factory=SpeechConfig)
    system: SystemConfig

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file."""
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        import json

        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        # Validate required sections
        required_sections = ["coach", "generation", "system"]
        missing_sections = [
            section for section in required_sections if section not in data
        ]
        if missing_sections:
            raise ValueError(f"Missing required config sections: {missing_sections}")

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(exclude_unset=True),
                f,
                default_flow_style=False,
                indent=2,
                allow_unicode=True,
            )


def get_default_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from coach_config.json, creating it if needed."""
    config_path = config_path or Path("coach_config.json")
    if not config_path.exists():
        # Auto-create from coach_config.example.json if it exists
        example_path = config_path.with_name("coach_config.example.json")
        if example_path.exists():
            import shutil
            shutil.copy2(example_path, config_path)
        else:
            template_config = get_template_config()
            import json
            with open(config_path, "w", encoding="utf-8") as f:
                json.dump(template_config.model_dump(exclude_unset=True), f, indent=2)
    return AppConfig.load_from_file(config_path)


def get_template_config() -> AppConfig:
    """Get template configuration for config file generation."""
    return AppConfig(
        coach=CoachConfig(
            level="havo/vwo",
            topic="actualiteit",
            max_rounds=4,
            generate_opening_counter_argument=False,
        ),
        generation=GenerationConfig(
            grounded=ModelConfig(
                name="google/gemini-2.5-flash",
                provider="openrouter",
                max_tokens=120,
                temperature=0.8,
            ),
            reasoning=ModelConfig(
                name="qwen2.5:7b",
                provider="ollama",
                max_tokens=400,
                temperature=0.7,
            ),
        ),
        speech=SpeechConfig(
            enabled=False,
            locale="nl-NL",
            playback_delay=0.5,
            rate=0.9,
            pitch=1.0,
            volume=0.8,
        ),
        system=SystemConfig(
            ollama_base_url="http://localhost:11434",
            ollama=OllamaConfig(
                num_gpu_layers=-1,  # Use all GPU layers by default
                num_thread=None,
                keep_alive="5m",
                repeat_penalty=1.1,
            ),
            openrouter=OpenRouterConfig(
                api_key=None,  # Set your OpenRouter API key here or use OPENROUTER_API_KEY env var
                base_url="https://openrouter.ai/api/v1",
                site_url=None,
                app_name="Debatcoach AI",
                web_search_max_results=3,
                timeout=60,
            ),
            log_level="INFO",
        ),
    )
