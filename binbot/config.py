"""Configuration loading and management."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from binbot.constants import DEFAULT_LOG_DIR, DEFAULT_MODEL, SUPPORTED_MODELS


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """binbot configuration.

    Loads from .env and the process environment.
    """

    # API Keys
    anthropic_api_key: Optional[str] = None

    # Model settings
    default_model: str = DEFAULT_MODEL

    # Session settings
    speech_enabled: bool = False
    seed_containers: bool = True
    log_dir: Path = Path(DEFAULT_LOG_DIR)

    @classmethod
    def load(cls, working_dir: Optional[Path] = None) -> "Config":
        """Load configuration from environment.

        Args:
            working_dir: Directory that a relative log dir is resolved against

        Returns:
            Config instance
        """
        # Load .env file
        load_dotenv()

        base = working_dir or Path.cwd()
        log_dir = Path(os.getenv("BINBOT_LOG_DIR", DEFAULT_LOG_DIR))
        if not log_dir.is_absolute():
            log_dir = base / log_dir

        return cls(
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY"),
            default_model=os.getenv("BINBOT_MODEL", DEFAULT_MODEL),
            speech_enabled=_env_flag("BINBOT_SPEECH", False),
            seed_containers=_env_flag("BINBOT_SEED", True),
            log_dir=log_dir,
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.anthropic_api_key:
            errors.append("No API key found. Set ANTHROPIC_API_KEY")

        if self.default_model not in SUPPORTED_MODELS:
            errors.append(
                f"Unsupported model: {self.default_model}. "
                f"Supported: {', '.join(SUPPORTED_MODELS.keys())}"
            )

        return errors

    def to_dict(self) -> dict:
        """Convert config to dictionary (for logging/display)."""
        return {
            "default_model": self.default_model,
            "speech_enabled": self.speech_enabled,
            "seed_containers": self.seed_containers,
            "log_dir": str(self.log_dir),
            "has_anthropic_key": bool(self.anthropic_api_key),
        }
