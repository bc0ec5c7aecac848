"""Static configuration for chatpick.

All user-editable settings (transcript source, names, default filters,
toggle timing, export and logging) live in a single JSON file for quick edits
without touching Python.
"""

import json
import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# The config path can be overridden from the environment or a .env file.
CONFIG_PATH = os.getenv("CHATPICK_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if not path or os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Transcript source used when no path is passed on the command line.
# - TRANSCRIPT_FORMAT: "json" or "poe_html"
_transcript = _CONFIG.get("transcript", {})
TRANSCRIPT_PATH = _resolve_path(_transcript.get("path", ""))
TRANSCRIPT_FORMAT = _transcript.get("format", "json")

# Speaker name overrides used by exports; empty means "use the default".
_names = _CONFIG.get("names", {})
BOT_NAME = _names.get("bot_name", "")
USER_NAME = _names.get("user_name", "")

# Initial values for the three filter inputs and the AI-only switch.
_filters = _CONFIG.get("filters", {})
FILTER_INCLUDE1 = _filters.get("include1", "")
FILTER_EXCLUDE = _filters.get("exclude", "")
FILTER_INCLUDE2 = _filters.get("include2", "")
AI_ONLY = bool(_filters.get("ai_only", False))

# How often the host is re-read after a programmatic toggle, and for how long.
_toggle = _CONFIG.get("toggle", {})
TOGGLE_SETTLE_MS = int(_toggle.get("settle_ms", 50))
TOGGLE_SETTLE_WINDOWS = int(_toggle.get("settle_windows", 10))

# Indicator grid re-layout is debounced while the terminal is resized.
_indicators = _CONFIG.get("indicators", {})
RESIZE_DEBOUNCE_MS = int(_indicators.get("resize_debounce_ms", 100))

_export = _CONFIG.get("export", {})
EXPORT_DIR = _resolve_path(_export.get("directory", "exports"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
