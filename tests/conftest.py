"""Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides:
- Shared configuration fixtures
- Canned model replies for the coach
- Pytest configuration hooks
"""

import pytest

from config.settings import AppConfig, get_template_config


# =============================================================================
# SHARED FIXTURES - Available to all test modules
# =============================================================================


@pytest.fixture
def app_config() -> AppConfig:
    """Template configuration with instant speech playback."""
    config = get_template_config()
    config.speech.playback_delay = 0.0
    return config


@pytest.fixture
def short_config(app_config: AppConfig) -> AppConfig:
    """Configuration for a two-round session."""
    app_config.coach.max_rounds = 2
    return app_config


@pytest.fixture
def proposition_reply() -> str:
    """Raw proposition reply as a model typically formats it."""
    return 'Stelling: "Scholen moeten huiswerk afschaffen"'


@pytest.fixture
def round_reply() -> str:
    """Well-formed round reply with all four labels."""
    return (
        "GOED:\n"
        "- gebruikt een bron\n"
        "VERBETERING:\n"
        "- mist een tegenvoorbeeld\n"
        "VOORBEELD:\n"
        '"noem een recent cijfer"\n'
        "TEGENARGUMENT:\n"
        "Wat als de kosten te hoog zijn?"
    )


@pytest.fixture
def final_reply() -> str:
    """Well-formed final reply with a reflection question."""
    return (
        "GOED: Je bleef rustig en onderbouwde je punten.\n"
        "VERBETERING: Gebruik meer concrete voorbeelden.\n"
        "VOORBEELD: Uit onderzoek blijkt dat...\n"
        "REFLECTIE: Welk tegenargument verraste je het meest?"
    )


# =============================================================================
# PYTEST CONFIGURATION HOOKS
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
