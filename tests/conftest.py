"""Pytest fixtures and configuration for Subscout tests.

Provides common fixtures for configuration and sample messages.
"""

import os
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from subscout.config import reset_config
from subscout.config_schema import AppConfig, ExtractionConfig
from subscout.core.logging import configure_logging
from subscout.extractor.models import Header, InputMessage


@pytest.fixture(scope="session", autouse=True)
def configure_test_logging() -> None:
    """Route structlog through stdlib logging before any logger is first used."""
    configure_logging(log_level="DEBUG", json_output=False)


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset the config singleton before each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def temp_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_config_yaml() -> str:
    """Return a minimal valid config.yaml content."""
    return """
schema_version: 1

brands:
  names: ["Netflix", "spotify", "netflix"]

extraction:
  billing_cycle_days: 30
  max_workers: 1
"""


@pytest.fixture
def sample_config_dict() -> dict[str, Any]:
    """Return a minimal valid config as a dictionary."""
    return {
        "schema_version": 1,
        "brands": {"names": ["netflix", "spotify"]},
        "extraction": {"billing_cycle_days": 30},
    }


@pytest.fixture
def sample_config(sample_config_dict: dict[str, Any]) -> AppConfig:
    """Return a minimal valid AppConfig instance."""
    return AppConfig(**sample_config_dict)


@pytest.fixture
def config_file(temp_config_dir: Path, sample_config_yaml: str) -> Path:
    """Create a temporary config file with valid content."""
    config_path = temp_config_dir / "config.yaml"
    config_path.write_text(sample_config_yaml)
    return config_path


@pytest.fixture
def set_config_env(config_file: Path) -> Generator[None, None, None]:
    """Set the SUBSCOUT_CONFIG_PATH environment variable."""
    old_value = os.environ.get("SUBSCOUT_CONFIG_PATH")
    os.environ["SUBSCOUT_CONFIG_PATH"] = str(config_file)
    yield
    if old_value is None:
        del os.environ["SUBSCOUT_CONFIG_PATH"]
    else:
        os.environ["SUBSCOUT_CONFIG_PATH"] = old_value


@pytest.fixture
def extraction_config() -> ExtractionConfig:
    """Return the default extraction settings."""
    return ExtractionConfig()


@pytest.fixture
def make_message() -> Callable[..., InputMessage]:
    """Return a factory building an InputMessage, optionally with a From header."""

    def _make(message_id: str, text: str, sender: str | None = None) -> InputMessage:
        headers = (Header(name="From", value=sender),) if sender else ()
        return InputMessage(id=message_id, text=text, headers=headers)

    return _make
