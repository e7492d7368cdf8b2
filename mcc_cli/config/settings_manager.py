"""Centralized settings management for MCC.

Settings Schema:
    {
        "gcs_bucket": str,   # Bucket used by `mcc share` / `mcc fetch` (e.g. "gs://team-sessions")
    }
"""

import json
from typing import Any, Dict, Optional
import logging

from mcc_cli.core.config_paths import ConfigPaths

LOGGER = logging.getLogger(__name__)

BUCKET_KEY = "gcs_bucket"


def load_config_data() -> Dict[str, Any]:
    """Loads configuration data from config.json."""
    config_file = ConfigPaths.get_config_file()
    if not config_file.exists():
        return {}
    try:
        content = config_file.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        data = json.loads(content)
    except (json.JSONDecodeError, IOError) as e:
        LOGGER.warning(
            f"Failed to load config file: {e}. Using empty configuration.",
            exc_info=True,
        )
        return {}
    if not isinstance(data, dict):
        LOGGER.warning("Config file %s is not a JSON object, ignoring it", config_file)
        return {}
    return data


def _save_config_data(data: Dict[str, Any]) -> None:
    """Saves the configuration data to config.json."""
    config_file = ConfigPaths.get_config_file()
    # Ensure the directory exists
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(data, indent=2), encoding="utf-8")


def get_setting(key: str, default: Any = None) -> Any:
    """Retrieve a setting from the config file."""
    data = load_config_data()
    return data.get(key, default)


def set_settings(updates: Dict[str, Any]) -> None:
    """Load existing settings, apply updates, and save back."""
    data = load_config_data()
    data.update(updates)
    _save_config_data(data)


def get_bucket_setting() -> Optional[str]:
    """Return the configured bucket, or None when sharing is not set up.

    Returns:
        Bucket string as saved (may or may not carry the gs:// prefix).
    """
    bucket = get_setting(BUCKET_KEY, "")
    if not isinstance(bucket, str) or not bucket.strip():
        return None
    return bucket.strip()


def set_bucket_setting(bucket: str) -> None:
    """Persist the bucket used for sharing sessions.

    Args:
        bucket: Bucket name or gs:// URI. An empty string disables sharing.
    """
    set_settings({BUCKET_KEY: bucket.strip()})
