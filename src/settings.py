"""Static configuration for the comment linkifier.

All user-editable settings (site identity, output, logging) live in a single
JSON file for quick edits without touching Python. A few values can be
overridden from the environment or a local .env file.
"""

import json
import os

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# LINKIFY_CONFIG points at an alternative config file, e.g. per deployment.
CONFIG_PATH = os.getenv("LINKIFY_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Site identity decides which links become previews and which are stripped.
_site = _CONFIG.get("site", {})
SITE_DOMAIN = os.getenv("LINKIFY_SITE_DOMAIN") or _site.get("domain", "sirened.com")
# Base URL is only used to make preview links absolute in formatted output.
SITE_BASE_URL = _site.get("base_url", "")

# Default output format for the CLI: plain, markdown, html or json.
_output = _CONFIG.get("output", {})
OUTPUT_FORMAT = _output.get("format", "plain")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
