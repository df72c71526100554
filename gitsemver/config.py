#!/usr/bin/env python3

import os
import json
import tomllib
from pathlib import Path

import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("gitsemver")

CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. GITSEMVER_CONFIG environment variable
    2. ~/.gitsemver/ directory
    """
    if 'GITSEMVER_CONFIG' in os.environ:
        path = Path(os.environ['GITSEMVER_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.gitsemver'
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists():
            return path

    # Default location when no file exists yet
    return config_dir / 'config.json'


def get_default_config():
    """Get default configuration."""
    return {
        "sync": {
            "initial_tag": "0.0.0",
            "initial_tag_message": "gitsemver auto-created initial tag",
        },
        "manifest": {
            "type": "node",
            "post_stamp_command": "",
        },
        "publish": {
            "command": "",
        },
        "log": {
            "hash_width": 9,
            "default_count": 0,  # 0 = fill the terminal height
        },
        "logging": {
            "level": "INFO",
            "format": "%(message)s",
        },
    }


def _read_config_file(config_path):
    suffix = config_path.suffix.lower()
    if suffix == '.toml':
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    if suffix in ('.yaml', '.yml'):
        import yaml
        with open(config_path, 'r') as f:
            return yaml.safe_load(f) or {}
    with open(config_path, 'r') as f:
        return json.load(f)


def load_config():
    """Load configuration from file."""
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                config = merge_configs(config, file_config)
            else:
                logger.warning(f"Ignoring config {config_path}: top level is not a mapping")
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)
    configure_logging(config)

    return config


def configure_logging(config):
    """Apply the [logging] section to the gitsemver logger."""
    section = config.get("logging", {})
    level = logging.getLevelName(str(section.get("level", "INFO")).upper())
    if isinstance(level, int):
        logger.setLevel(level)
    fmt = section.get("format")
    if fmt:
        for handler in logging.getLogger().handlers:
            handler.setFormatter(logging.Formatter(fmt))


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def _coerce_env_value(value):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    if value.lower() in ('false', 'no', 'off'):
        return False
    if value.isdigit():
        return int(value)
    return value


def apply_env_overrides(config):
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern GITSEMVER_SECTION_KEY, where
    multi-word keys keep their underscores:
    GITSEMVER_SYNC_INITIAL_TAG=1.0.0 sets config["sync"]["initial_tag"].
    """
    env_prefix = "GITSEMVER_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "GITSEMVER_CONFIG":
            continue

        remainder = env_key[len(env_prefix):].lower()
        section, _, key = remainder.partition('_')
        if not key or not isinstance(config.get(section), dict):
            continue
        if key not in config[section]:
            logger.debug(f"Ignoring unknown setting {env_key}")
            continue

        # Keep string settings as strings ("1.0.0", "0")
        if isinstance(config[section][key], str):
            config[section][key] = value
        else:
            config[section][key] = _coerce_env_value(value)

    return config
