from __future__ import annotations

"""
Configuration Domain Management.

Handles the default run configuration and its optional persistent JSON
copy in the user data directory. Values loaded from disk are untrusted
and must go through the validator before use.
"""

import json
import logging
import os
from typing import Any, Dict

from rdu.domain.models import DEFAULT_MAX_DEPTH, DEFAULT_THRESHOLD, default_jobs
from rdu.infra.fs import ensure_parent_dir, get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_ENV_VAR = "RDU_CONFIG"
CONFIG_FILE_NAME = "config.json"

CONFIG_KEYS = ("paths", "max_depth", "threshold", "human_readable", "jobs")


def get_config_path() -> str:
    """
    Resolve the persistent configuration file location.

    The RDU_CONFIG environment variable takes precedence over the user
    data directory.

    Returns:
        str: Absolute path to config.json.
    """
    override = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if override:
        return os.path.abspath(os.path.expanduser(override))
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


def get_default_config() -> Dict[str, Any]:
    """
    Generate the default run configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        "paths": ["."],
        "max_depth": DEFAULT_MAX_DEPTH,
        "threshold": DEFAULT_THRESHOLD,
        "human_readable": False,
        "jobs": default_jobs(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the persistent configuration merged over the defaults.

    Unknown keys are dropped. A missing file yields the defaults; an
    unreadable or corrupted one is logged and also yields the defaults.

    Returns:
        Dict[str, Any]: The merged (not yet validated) configuration.
    """
    config = get_default_config()
    path = get_config_path()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load config from {path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file at {path}. Using defaults.")
        return config

    for key in CONFIG_KEYS:
        if key in data:
            config[key] = data[key]
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the known configuration keys to disk.

    Args:
        config: Configuration dictionary to save.
    """
    path = get_config_path()
    payload = {k: config[k] for k in CONFIG_KEYS if k in config}
    try:
        ensure_parent_dir(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save config to {path}: {e}")
