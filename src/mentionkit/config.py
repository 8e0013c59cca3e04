"""Composer configuration.

Configuration can be built in code, or loaded from a JSON file whose path is
given explicitly or through the ``MENTIONKIT_CONFIG`` environment variable
(a ``.env`` file in the working directory is honoured).
"""

import json
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from mentionkit.domain.types import TriggerKind
from mentionkit.logger import get_logger, setup_logger

logger = get_logger("config")

CONFIG_ENV_VAR = "MENTIONKIT_CONFIG"


class TriggerConfig(BaseModel):
    """A character that opens a suggestion query."""

    model_config = ConfigDict(frozen=True)

    char: str = Field(..., min_length=1, max_length=1, description="Trigger character")
    kind: TriggerKind = Field(..., description="Kind of suggestion the trigger opens")
    command: str = Field(..., description="Command invoked when the query commits")

    @field_validator("char")
    @classmethod
    def _not_word_character(cls, value: str) -> str:
        if value.isalnum() or value == "_" or value.isspace():
            raise ValueError(f"Trigger character must be punctuation, got {value!r}")
        return value


def _default_triggers() -> list[TriggerConfig]:
    return [
        TriggerConfig(char="@", kind=TriggerKind.MENTION, command="insertMentionLink"),
        TriggerConfig(char="#", kind=TriggerKind.TAG, command="insertTagLink"),
    ]


class ComposerConfig(BaseModel):
    """Behaviour switches for the composer core."""

    model_config = ConfigDict(frozen=True)

    triggers: list[TriggerConfig] = Field(default_factory=_default_triggers)
    supported_characters: str = Field(
        r"[\w-]", description="Regex character class allowed inside a query"
    )
    ignore_escape: bool = Field(False, description="Keep the popup open when escape is pressed")
    exit_delimiters: str = Field(" \t\n.,;:!?", description="Characters that end a query naturally")
    append_text: str = Field(" ", description="Text inserted after an annotation on explicit selection")
    trailing_text_limit: int = Field(500, gt=0, description="Max characters scanned by patterns")
    character_limit: Optional[int] = Field(None, gt=0, description="Soft character limit")
    error_history_limit: int = Field(50, ge=0, description="Extension errors kept for inspection")

    @model_validator(mode="after")
    def _unique_trigger_chars(self) -> "ComposerConfig":
        chars = [trigger.char for trigger in self.triggers]
        duplicates = sorted({char for char in chars if chars.count(char) > 1})
        if duplicates:
            raise ValueError(f"Duplicate trigger characters: {duplicates}")
        return self

    def trigger_for(self, char: str) -> Optional[TriggerConfig]:
        """Return the trigger configured for ``char``, if any."""
        for trigger in self.triggers:
            if trigger.char == char:
                return trigger
        return None

    def trigger_for_kind(self, kind: TriggerKind) -> Optional[TriggerConfig]:
        for trigger in self.triggers:
            if trigger.kind == kind:
                return trigger
        return None


def load_composer_config(config_path: Optional[str | Path] = None) -> ComposerConfig:
    """
    Load composer configuration from a JSON file.

    Args:
        config_path: Path to the JSON file. If None, ``MENTIONKIT_CONFIG`` is
            consulted; if that is unset too, defaults are returned.

    Returns:
        ComposerConfig: Parsed configuration object

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If the configuration structure is invalid
    """
    load_dotenv()

    if config_path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            logger.debug("No composer configuration file given, using defaults")
            return ComposerConfig()
        config_path = env_path

    config_path = Path(config_path)
    if not config_path.exists():
        error_msg = f"Composer configuration file not found: {config_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Loading composer configuration from: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in configuration file {config_path}: {e}")
        raise

    try:
        config = ComposerConfig(**data)
    except ValidationError as e:
        logger.error(f"Invalid configuration structure in {config_path}: {e}")
        raise

    logger.info(f"Loaded composer configuration with {len(config.triggers)} trigger(s)")
    return config


def configure_from_env() -> None:
    """Configure loguru sinks from ``MENTIONKIT_LOG_*`` environment variables."""
    load_dotenv()
    setup_logger(
        log_file=os.getenv("MENTIONKIT_LOG_FILE") or None,
        log_level=os.getenv("MENTIONKIT_LOG_LEVEL", "INFO").upper(),
        console_output=os.getenv("MENTIONKIT_LOG_CONSOLE", "false").lower() == "true",
    )
