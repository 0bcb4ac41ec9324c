"""Completion settings with JSON loading.

Settings files use camelCase keys::

    {"completionQueryItems": 50, "showToolTips": true,
     "keybindings": {"menuCancel": ["escape", "ctrl+g"]}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

BellStyle = Literal["audible", "none"]

_JSON_FIELDS: dict[str, str] = {
    "completionQueryItems": "completion_query_items",
    "showToolTips": "show_tooltips",
    "bellStyle": "bell_style",
    "pathSeparator": "path_separator",
    "keybindings": "keybindings",
}


@dataclass
class CompletionSettings:
    """Options controlling completion behaviour."""

    # Ask before listing at least this many candidates.
    completion_query_items: int = 100
    show_tooltips: bool = False
    bell_style: BellStyle = "audible"
    # Appended to container candidates.
    path_separator: str = "\\"
    keybindings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CompletionSettings:
        """Build settings from a camelCase dict, skipping None and unknown keys."""
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _JSON_FIELDS.get(key)
            if name is None or value is None:
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, name) for key, name in _JSON_FIELDS.items()}


# --- Deep merge ---


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base settings.

    For nested dicts, merge recursively. For primitives and arrays,
    override value wins completely.
    """
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def _load_from_file(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError):
        logger.debug("Ignoring unreadable settings file %s", path, exc_info=True)
        return {}
    if not isinstance(data, dict):
        logger.debug("Ignoring settings file %s: top level is not an object", path)
        return {}
    return data


def load_settings(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    defaults: dict[str, Any] | None = None,
) -> CompletionSettings:
    """Load settings from *path* (if given).

    The file is layered over *defaults*, and *overrides* over both.
    """
    data = _load_from_file(Path(path)) if path is not None else {}
    if defaults:
        data = deep_merge_settings(defaults, data)
    if overrides:
        data = deep_merge_settings(data, overrides)
    return CompletionSettings.from_dict(data)
