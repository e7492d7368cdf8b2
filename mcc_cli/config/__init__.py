"""Configuration utilities for MCC."""

from .settings_manager import (
    get_setting,
    set_settings,
    load_config_data,
    get_bucket_setting,
    set_bucket_setting,
    BUCKET_KEY,
)

__all__ = [
    "get_setting",
    "set_settings",
    "load_config_data",
    "get_bucket_setting",
    "set_bucket_setting",
    "BUCKET_KEY",
]
