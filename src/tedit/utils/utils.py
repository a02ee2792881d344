# tedit/utils/utils.py
"""
tedit.utils.utils.py
====================

Configuration helpers for the tedit editor.

Key functionalities include:
- Embedded defaults: `DEFAULT_CONFIG` is the complete configuration the editor
  runs with when no user file exists.
- Layered loading: `load_config()` deep-merges `~/.config/tedit/config.toml`
  (parsed with `toml`) over the defaults. A missing or unparsable user file
  never stops the editor from starting.
- Validation: `editor_settings()` reads the ``[editor]`` section and replaces
  unusable values with their defaults, logging a warning for each.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml

logger = logging.getLogger("tedit")

VERSION = "0.0.1"

DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "tab_stop": 8,
        "quit_times": 2,
        "status_timeout": 5.0,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save_file": "ctrl+s",
        "find": "ctrl+f",
    },
    "colors": {
        "comment": "cyan",
        "block_comment": "cyan",
        "keyword1": "yellow",
        "keyword2": "green",
        "string": "magenta",
        "number": "red",
        "search_match": "blue",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "",
    },
    "syntax": {},
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns the per-user configuration directory (`~/.config/tedit`)."""
    return Path.home() / ".config" / "tedit"


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the embedded defaults and merges the user's config.toml over them.

    Args:
        config_path: File to read instead of `~/.config/tedit/config.toml`.
    """
    final_config = copy.deepcopy(DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = config_path or get_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _validated(value: Any, default: Any, name: str, kind: type, minimum: float) -> Any:
    # bool is an int subclass; `true` is not a tab stop.
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (kind is int and value != int(value))
        or value < minimum
    ):
        logger.warning(f"Invalid editor.{name} {value!r}; using {default}")
        return default
    return kind(value)


def editor_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Returns validated ``tab_stop``, ``quit_times`` and ``status_timeout``."""
    defaults = DEFAULT_CONFIG["editor"]
    section = config.get("editor", {}) or {}

    def pick(name: str, kind: type, minimum: float) -> Any:
        return _validated(section.get(name, defaults[name]), defaults[name], name, kind, minimum)

    return {
        "tab_stop": pick("tab_stop", int, 1),
        "quit_times": pick("quit_times", int, 0),
        "status_timeout": pick("status_timeout", float, 0),
    }
