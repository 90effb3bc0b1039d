"""Runtime configuration for macpaperd - centralized configuration management."""

import copy
import json
import os
from pathlib import Path
from typing import Any

from macpaperd.utils.logging import logger

CONFIG_ENV_VAR = "MACPAPERD_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/macpaperd/config.json"

DEFAULTS = {
    "paths": {
        "live_store": "~/Library/Application Support/Dock/desktoppicture.db",
        "build_store": "/tmp/macpaperd.db",
        "backup_dir": "~/Library/Application Support/Dock/backups",
    },
    "process": {
        "killall": "/usr/bin/killall",
        "consumer": "Dock",
    },
    "timeouts": {
        "restart": 10,
    },
}


def config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)).expanduser()


def load_runtime_config(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load runtime configuration from the config file and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (MACPAPERD_<SECTION>_<KEY>)
    2. JSON config file ($MACPAPERD_CONFIG or ~/.config/macpaperd/config.json)
    3. Built-in defaults

    Values in ``paths`` have ``~`` expanded.

    Args:
        path: Config file to read instead of the default location

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(path).expanduser() if path is not None else config_path()
    try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                user = json.load(f)

            if isinstance(user, dict):
                for section in cfg:
                    if section in user and isinstance(user[section], dict):
                        for key, value in user[section].items():
                            if key in cfg[section] and isinstance(value, type(cfg[section][key])):
                                cfg[section][key] = value
                            else:
                                logger.warning("Ignoring config entry {}.{}", section, key)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Could not load config file from {}: {}", path, e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"MACPAPERD_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    if isinstance(cfg[section][key], int):
                        cfg[section][key] = int(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning("Invalid value for environment variable {}: '{}' - {}", env_var, value, e)
                    logger.info("Using default value: {}", cfg[section][key])

    for key, value in cfg["paths"].items():
        cfg["paths"][key] = str(Path(value).expanduser())

    return cfg
