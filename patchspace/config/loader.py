# patchspace/config/loader.py
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from loguru import logger

from .schema import AppConfig
from .paths import get_user_config_file

_cached_config: Optional[AppConfig] = None

def load_config() -> AppConfig:
    """Loads the application configuration, falling back to defaults on any problem."""
    global _cached_config
    if _cached_config:
        return _cached_config

    config_path = get_user_config_file()
    loaded_data = {}

    if config_path.exists():
        logger.info(f"Loading user configuration from: {config_path}")
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load user config file {config_path}: {e}")
            try:
                backup_path = config_path.with_suffix(".json.corrupted")
                backup_path.unlink(missing_ok=True)
                config_path.rename(backup_path)
                logger.info(f"Backed up corrupted config to: {backup_path}")
            except OSError as backup_err:
                logger.error(f"Failed to backup corrupted config: {backup_err}")
            loaded_data = {}
    else:
        logger.info("User config file not found. Using default settings.")

    if not isinstance(loaded_data, dict):
        logger.error(f"Config file {config_path} does not contain a JSON object. Using default settings.")
        loaded_data = {}

    try:
        _cached_config = AppConfig(**loaded_data)
        logger.info("Configuration loaded successfully.")
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        logger.warning("Falling back to default configuration.")
        _cached_config = AppConfig()
    return _cached_config

def save_config(config: AppConfig) -> None:
    """Saves the configuration atomically (temp file in the same dir + os.replace)."""
    config_path = get_user_config_file()
    logger.info(f"Saving configuration to: {config_path}")
    temp_file_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=config_path.parent,
            prefix=f".{config_path.name}_tmp",
            suffix=".json",
            delete=False # Keep the file after closing for os.replace
        ) as temp_f:
            temp_file_path = Path(temp_f.name)
            temp_f.write(config.model_dump_json(indent=4))
            temp_f.flush()
            os.fsync(temp_f.fileno())

        os.replace(temp_file_path, config_path)
        temp_file_path = None
        logger.info("Configuration saved successfully.")
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
    finally:
        if temp_file_path and temp_file_path.exists():
            logger.warning(f"Cleaning up leftover temporary config file: {temp_file_path}")
            try: temp_file_path.unlink()
            except OSError as unlink_err: logger.error(f"Failed to remove temporary config file {temp_file_path}: {unlink_err}")

def get_config() -> AppConfig:
    """Returns the cached configuration object, loading if necessary."""
    if _cached_config is None:
        return load_config()
    return _cached_config

def reset_config_cache() -> None:
    """Forgets the cached configuration so the next get_config() reloads from disk."""
    global _cached_config
    _cached_config = None
