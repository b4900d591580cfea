"""
Configuration and logging for flowtest.

Configuration lives in a JSON rc file (``~/.flowtestrc`` by default) that
is merged on top of the built-in defaults.
"""
import copy
import json
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .exit_codes import ConfigError

# Initialize Rich Console
console = Console(stderr=True)

# Configure logging to use RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=console, rich_tracebacks=True)]
)

logger = logging.getLogger("rich")

CONFIG_ENV_VAR = "FLOWTEST_CONFIG"
DEFAULT_REPOSITORY_URL = "https://github.com/legdba/flowtest.git"


def get_default_config():
    """Return the built-in configuration."""
    return {
        "general": {
            "repository_url": DEFAULT_REPOSITORY_URL,
            "workspace": "flowtest",
            "trunk": "master",
            "remote": "origin",
        },
        "git": {
            "author_name": "flowtest",
            "author_email": "flowtest@example.com",
            "script_name": "flowtest.py",
        },
        "logging": {
            "level": "INFO",
            "format": "%(message)s",
        },
    }


def get_config_path():
    """
    Resolve the rc file location.

    The FLOWTEST_CONFIG environment variable wins over ~/.flowtestrc.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(os.path.expanduser("~")) / ".flowtestrc"


def _merge(base, overrides):
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config():
    """
    Load the configuration, merging the rc file and environment overrides
    over the defaults.

    Returns:
        dict: The merged configuration.
    """
    config = get_default_config()
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read configuration file {config_path}: {e}")
        if not isinstance(user_config, dict):
            raise ConfigError(f"Configuration file {config_path} must contain a JSON object")
        _merge(config, user_config)
        logger.debug(f"Loaded configuration from {config_path}")

    if os.environ.get("FLOWTEST_REPO"):
        config["general"]["repository_url"] = os.environ["FLOWTEST_REPO"]
    if os.environ.get("FLOWTEST_WORKSPACE"):
        config["general"]["workspace"] = os.environ["FLOWTEST_WORKSPACE"]

    return config


def save_config(config, path=None):
    """
    Write a configuration dictionary to the rc file.

    Args:
        config (dict): Configuration to write.
        path (str, optional): Destination, defaults to the resolved rc path.

    Returns:
        Path: The file that was written.
    """
    config_path = Path(path) if path else get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    return config_path


def generate_config_example():
    """Example rc file content, as a dictionary."""
    example = copy.deepcopy(get_default_config())
    example["general"]["repository_url"] = "git@github.com:your_username/flowtest.git"
    example["git"]["author_name"] = "Your Name"
    example["git"]["author_email"] = "you@example.com"
    return example


def configure_logging(config, verbose=False):
    """Apply the configured log level; verbose forces DEBUG."""
    if verbose:
        logger.setLevel(logging.DEBUG)
        return
    level_name = str(config.get("logging", {}).get("level", "INFO")).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
