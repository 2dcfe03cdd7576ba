"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.docketcache/config.yaml).

Cache capacity and default TTL are fixed constants of the cache and are
deliberately not read from here; only operational knobs (logging, sweep
interval, console lookup delay) are configurable.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Dict

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".docketcache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "DOCKETCACHE_"

DEFAULT_LOG_LEVEL_NAME = "INFO"
DEFAULT_CLEANUP_INTERVAL_SECONDS = 60.0
DEFAULT_LOOKUP_DELAY_SECONDS = 0.25

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False

def _flatten(data: Dict[str, Any], parent: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ('cache.cleanup_interval_seconds')."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{parent}.{key}" if parent else str(key)
        if isinstance(value, dict):
            flat.update(_flatten(value, dotted))
        else:
            flat[dotted] = value
    return flat

def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None, force: bool = False) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file (DEFAULT_CONFIG_FILE if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
        force: Reload even if configuration was already loaded.
    """
    global _config, _loaded
    if _loaded and not force:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. Load from YAML file (Lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. Load from .env file (Medium priority)
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        # override=False: real environment variables take precedence
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above the current directory.")

    # 3. Environment Variables (Highest priority) are handled in get_config

    _loaded = True
    logger.debug("Configuration loading process completed.")

def _coerce(value: str) -> Any:
    """Converts common string forms from the environment to Python values."""
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        return float(value) if '.' in value else int(value)
    except (ValueError, TypeError):
        return value

def _env_key(key: str) -> str:
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"

def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dotted key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (DOCKETCACHE_ + upper-cased key, dots as underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key (e.g., 'logging.level')
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = _env_key(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default

def set_config(key: str, value: Any) -> None:
    """Sets a configuration value for the rest of the process.

    Args:
        key: Configuration key (e.g., 'logging.level')
        value: Value to set
    """
    _config[key] = value
    os.environ[_env_key(key)] = str(value)
    logger.debug(f"Config set: {key}={value}")

def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_log_level() -> int:
    """Gets the configured log level as a logging constant."""
    level_name = str(get_config('logging.level', DEFAULT_LOG_LEVEL_NAME)).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{level_name}'. Falling back to {DEFAULT_LOG_LEVEL_NAME}.")
        return logging.INFO
    return level

def get_cleanup_interval_seconds() -> float:
    """Gets the delay between periodic cache sweeps."""
    value = get_config('cache.cleanup_interval_seconds', DEFAULT_CLEANUP_INTERVAL_SECONDS)
    try:
        interval = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid cache.cleanup_interval_seconds '{value}'. Using {DEFAULT_CLEANUP_INTERVAL_SECONDS}.")
        return DEFAULT_CLEANUP_INTERVAL_SECONDS
    if interval <= 0:
        logger.warning(f"cache.cleanup_interval_seconds must be positive, got {interval}. Using {DEFAULT_CLEANUP_INTERVAL_SECONDS}.")
        return DEFAULT_CLEANUP_INTERVAL_SECONDS
    return interval

def get_lookup_delay_seconds() -> float:
    """Gets the artificial latency of the console's simulated lookups."""
    value = get_config('console.lookup_delay_seconds', DEFAULT_LOOKUP_DELAY_SECONDS)
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        logger.warning(f"Invalid console.lookup_delay_seconds '{value}'. Using {DEFAULT_LOOKUP_DELAY_SECONDS}.")
        return DEFAULT_LOOKUP_DELAY_SECONDS

def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")

def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
