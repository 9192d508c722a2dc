"""Access to application settings from engine code."""

from __future__ import annotations

from typing import Any

from flask import current_app, has_app_context

from .constants import DEFAULT_SETTINGS


def get_setting(key: str) -> Any:
    """Read a setting from the active app config, else its built-in default."""
    if has_app_context():
        value = current_app.config.get(key)
        if value is not None:
            return value
    return DEFAULT_SETTINGS[key]
