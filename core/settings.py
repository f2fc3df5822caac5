"""Application settings management.

Settings are read from:
- JSON file storage (~/.config/resonance-engine/config.json)
- Environment variable overrides

Priority order: Environment variables > JSON config > Defaults
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Set

from core.constants import (
    DEFAULT_DURATION_SECONDS,
    DEFAULT_PLATFORM,
    DEFAULT_STRUCTURE_ID,
)

logger = logging.getLogger(__name__)

# Config schema version
CONFIG_VERSION = "1.0"

# Environment variable names
ENV_CONFIG_PATH = "RESONANCE_CONFIG"
ENV_DEFAULT_DURATION = "RESONANCE_DEFAULT_DURATION"
ENV_DEFAULT_STRUCTURE = "RESONANCE_DEFAULT_STRUCTURE"
ENV_DEFAULT_PLATFORM = "RESONANCE_DEFAULT_PLATFORM"
ENV_CLEAR_OUTCOME_ON_UNLOCK = "RESONANCE_CLEAR_OUTCOME_ON_UNLOCK"
ENV_LOG_LEVEL = "RESONANCE_LOG_LEVEL"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_config_dir() -> Path:
    """Get platform-appropriate config directory (XDG-compliant)."""
    if os.name == "nt":  # Windows
        base = Path(os.environ.get("APPDATA", Path.home()))
        return base / "resonance-engine"
    else:  # macOS/Linux
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
        return base / "resonance-engine"


def _get_config_path() -> Path:
    """Get config file path, respecting RESONANCE_CONFIG env var."""
    if custom_path := os.environ.get(ENV_CONFIG_PATH):
        return Path(custom_path)
    return _get_config_dir() / "config.json"


def _parse_bool(value: str) -> bool:
    """Parse an environment flag.

    Raises:
        ValueError: If the value is not a recognized boolean
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean: {value}")


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Phase-1 defaults
    default_duration: int = DEFAULT_DURATION_SECONDS
    default_structure_id: str = DEFAULT_STRUCTURE_ID
    default_platform: str = DEFAULT_PLATFORM
    default_has_dialogue: bool = False

    # Project lifecycle
    clear_outcome_on_unlock: bool = False  # Keep the outcome log when unlocking

    # Logging
    log_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR


def get_default_settings() -> Settings:
    """Create a Settings instance with all defaults."""
    return Settings()


# Track which settings are from environment variables
_env_overridden: Set[str] = set()


def get_env_overridden_settings() -> Set[str]:
    """Get the set of settings names that are overridden by environment variables.

    Returns:
        Set of setting field names that were loaded from env vars
    """
    return _env_overridden.copy()


def is_from_environment(setting_name: str) -> bool:
    """Check if a specific setting was loaded from an environment variable.

    Args:
        setting_name: Name of the setting field (e.g., "default_platform")

    Returns:
        True if the setting value came from an environment variable
    """
    return setting_name in _env_overridden


def _apply_env_overrides(settings: Settings) -> Settings:
    """Apply environment variable overrides to settings.

    Args:
        settings: Settings instance to modify

    Returns:
        Modified settings (same instance)
    """
    global _env_overridden
    _env_overridden = set()

    # RESONANCE_DEFAULT_DURATION
    if duration := os.environ.get(ENV_DEFAULT_DURATION):
        try:
            settings.default_duration = int(duration)
            _env_overridden.add("default_duration")
        except ValueError:
            logger.warning(f"Invalid {ENV_DEFAULT_DURATION}: {duration}")

    # RESONANCE_DEFAULT_STRUCTURE
    if structure := os.environ.get(ENV_DEFAULT_STRUCTURE):
        settings.default_structure_id = structure
        _env_overridden.add("default_structure_id")

    # RESONANCE_DEFAULT_PLATFORM
    if platform := os.environ.get(ENV_DEFAULT_PLATFORM):
        settings.default_platform = platform
        _env_overridden.add("default_platform")

    # RESONANCE_CLEAR_OUTCOME_ON_UNLOCK
    if clear := os.environ.get(ENV_CLEAR_OUTCOME_ON_UNLOCK):
        try:
            settings.clear_outcome_on_unlock = _parse_bool(clear)
            _env_overridden.add("clear_outcome_on_unlock")
        except ValueError:
            logger.warning(f"Invalid {ENV_CLEAR_OUTCOME_ON_UNLOCK}: {clear}")

    # RESONANCE_LOG_LEVEL
    if level := os.environ.get(ENV_LOG_LEVEL):
        if level.upper() in LOG_LEVELS:
            settings.log_level = level.upper()
            _env_overridden.add("log_level")
        else:
            logger.warning(f"Invalid {ENV_LOG_LEVEL}: {level}")

    return settings


def _load_from_json(config_path: Path, settings: Settings) -> Settings:
    """Load settings from JSON config file.

    Args:
        config_path: Path to the JSON config file
        settings: Settings instance to modify

    Returns:
        Modified settings (same instance)
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load config from {config_path}: {e}")
        return settings

    # Timeline section
    if timeline := data.get("timeline"):
        if "default_duration" in timeline:
            settings.default_duration = int(timeline["default_duration"])
        if val := timeline.get("default_structure_id"):
            settings.default_structure_id = val
        if val := timeline.get("default_platform"):
            settings.default_platform = val
        if "default_has_dialogue" in timeline:
            settings.default_has_dialogue = bool(timeline["default_has_dialogue"])

    # Project section
    if project := data.get("project"):
        if "clear_outcome_on_unlock" in project:
            settings.clear_outcome_on_unlock = bool(project["clear_outcome_on_unlock"])

    # Logging section
    if logging_section := data.get("logging"):
        if val := logging_section.get("level"):
            if val.upper() in LOG_LEVELS:
                settings.log_level = val.upper()
            else:
                logger.warning(f"Invalid log level in config: {val}")

    return settings


def _settings_to_json(settings: Settings) -> dict:
    """Convert settings to JSON-serializable dict.

    Args:
        settings: Settings instance

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "version": CONFIG_VERSION,
        "timeline": {
            "default_duration": settings.default_duration,
            "default_structure_id": settings.default_structure_id,
            "default_platform": settings.default_platform,
            "default_has_dialogue": settings.default_has_dialogue,
        },
        "project": {
            "clear_outcome_on_unlock": settings.clear_outcome_on_unlock,
        },
        "logging": {
            "level": settings.log_level,
        },
    }


def load_settings() -> Settings:
    """Load settings with priority: env vars > JSON config > defaults.

    Returns:
        Settings instance populated from available sources
    """
    settings = Settings()

    # 1. Load from JSON file if it exists
    config_path = _get_config_path()
    if config_path.exists():
        settings = _load_from_json(config_path, settings)

    # 2. Apply environment variable overrides (highest priority)
    settings = _apply_env_overrides(settings)

    logger.debug(f"Settings loaded (env overrides: {_env_overridden})")
    return settings


def save_settings(settings: Settings) -> bool:
    """Save settings to JSON file.

    Args:
        settings: Settings instance to save

    Returns:
        True if save succeeded
    """
    config_path = _get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = _settings_to_json(settings)

        # Atomic write: write to temp file then rename
        temp_path = config_path.with_suffix(".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(temp_path, config_path)

        logger.info(f"Settings saved to {config_path}")
        return True

    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
        return False
