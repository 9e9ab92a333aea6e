import os
from pathlib import Path

from dotenv import load_dotenv

# Load params from .env file
load_dotenv()

# Logging
LOG_LEVEL = os.getenv("DIAGGATE_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("DIAGGATE_LOG_FORMAT", "json")

# Nested <param> entries are keyed with this prefix before message lookup
PARAM_PREFIX = "%"

# Bundled message catalog
DEFAULT_CATALOG_PATH = str(Path(__file__).resolve().parent / "catalog" / "messages.yaml")

UNRESOLVED_PLACEHOLDER_MODES = {"literal", "empty"}


def get_catalog_path() -> str:
    """
    Catalog file or directory used by `load_default_catalog`.
    Falls back to the bundled catalog.
    """
    value = str(os.getenv("DIAGGATE_CATALOG_PATH", "") or "").strip()
    return value or DEFAULT_CATALOG_PATH


def get_unresolved_placeholder_mode() -> str:
    """
    How placeholders without a matching parameter are rendered.
    Supported modes:
    - literal (placeholder is kept verbatim, default)
    - empty (placeholder is removed)
    """
    value = str(os.getenv("DIAGGATE_UNRESOLVED_PLACEHOLDERS", "literal")).strip().lower()
    if value not in UNRESOLVED_PLACEHOLDER_MODES:
        return "literal"
    return value
