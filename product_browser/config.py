"""
Configuration settings for the Product Browser
"""

import copy
import json
import os
from typing import Any, Dict, Optional

import dotenv

from product_browser.errors import ConfigError
from product_browser.models.table_state import PAGE_SIZE_CHOICES


DEFAULT_CONFIG = {
    "sqlite": {
        "db_path": "data/products.db",
    },
    "dataset": {
        "rows": 10000,
        "seed": 42,
    },
    "api": {
        # simulated round-trip per page for the on-demand view
        "latency_ms": 150,
    },
    "ui": {
        "per_page": 25,
        "default_view": "paginated",
        "filter_debounce_ms": 300,
    },
    "on_demand": {
        "page_size": 50,
        "prefetch_pages": 1,
        "buffer_pages": 2,
    },
    "logging": {
        "level": "INFO",
        "log_path": "logs/product_browser.log",
    },
}

VIEWS = ("paginated", "on-demand", "long")

CONFIG_FILE = os.environ.get(
    "PRODUCT_BROWSER_CONFIG",
    os.path.expanduser("~/.product_browser_config.json"),
)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file or environment variables (a .env file in
    the working directory is read first and never overrides the real environment)
    """
    dotenv.load_dotenv()
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_file = config_file or CONFIG_FILE

    # Check for config file
    if os.path.exists(config_file):
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Error loading config file {config_file}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_file} must contain a JSON object")
        _deep_merge(config, file_config)

    # Override with environment variables
    if os.environ.get("PRODUCT_BROWSER_DB_PATH"):
        config["sqlite"]["db_path"] = os.environ["PRODUCT_BROWSER_DB_PATH"]

    if os.environ.get("PRODUCT_BROWSER_LATENCY_MS"):
        try:
            config["api"]["latency_ms"] = int(os.environ["PRODUCT_BROWSER_LATENCY_MS"])
        except ValueError as e:
            raise ConfigError(f"PRODUCT_BROWSER_LATENCY_MS must be an integer: {e}") from e

    if os.environ.get("PRODUCT_BROWSER_LOG_LEVEL"):
        config["logging"]["level"] = os.environ["PRODUCT_BROWSER_LOG_LEVEL"]

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Raise ConfigError when a setting is out of range."""
    on_demand = config["on_demand"]
    if on_demand["page_size"] <= 0:
        raise ConfigError("on_demand.page_size must be > 0")
    if on_demand["prefetch_pages"] < 0:
        raise ConfigError("on_demand.prefetch_pages must be >= 0")
    if on_demand["buffer_pages"] < on_demand["prefetch_pages"]:
        raise ConfigError("on_demand.buffer_pages must be >= on_demand.prefetch_pages")
    if config["ui"]["per_page"] not in PAGE_SIZE_CHOICES:
        raise ConfigError(f"ui.per_page must be one of {PAGE_SIZE_CHOICES}")
    if config["ui"]["default_view"] not in VIEWS:
        raise ConfigError(f"ui.default_view must be one of {VIEWS}")
    if config["api"]["latency_ms"] < 0:
        raise ConfigError("api.latency_ms must be >= 0")
    if config["dataset"]["rows"] < 0:
        raise ConfigError("dataset.rows must be >= 0")


def save_config(config: Dict[str, Any], config_file: Optional[str] = None) -> bool:
    """
    Save configuration to file
    """
    try:
        with open(config_file or CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except OSError:
        return False
