"""Constants and runtime settings for fontgate."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from fontgate.errors import ConfigError

# Google Fonts Developer API (https://developers.google.com/fonts/docs/developer_api)
DEFAULT_CATALOG_URL = "https://www.googleapis.com/webfonts/v1/webfonts"

# HTTP surface
DEFAULT_PORT = 8080
FONTS_PATH = "/fonts"
FONT_QUERY_PARAM = "font"

# Sample image geometry
CANVAS_SIZE = (200, 50)
BACKGROUND = (255, 255, 255)
FOREGROUND = (0, 0, 0)
FONT_SIZE_PT = 24
RENDER_DPI = 72
TEXT_ORIGIN = (10, 25)  # (x, baseline y)

# Outbound requests
DEFAULT_FETCH_TIMEOUT = 30.0

DEFAULT_ENV_FILE = ".env"
API_KEY_VAR = "GOOGLE_FONTS_API_KEY"


@dataclass(frozen=True)
class Settings:
    """Process settings resolved from the environment file."""

    api_key: str
    host: str = ""
    port: int = DEFAULT_PORT
    catalog_url: str = DEFAULT_CATALOG_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT


def _env_number(name: str, default, cast):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        msg = f"{name} must be a number, got {raw!r}"
        raise ConfigError(msg) from None


def load_settings(env_file: str | os.PathLike = DEFAULT_ENV_FILE) -> Settings:
    """Load ``env_file`` into the environment and build :class:`Settings`.

    Raises ConfigError when the file cannot be read or the API key is
    missing. Variables already present in the environment take precedence.
    """
    path = Path(env_file)
    if not path.is_file():
        msg = f"Error loading env file: {path}"
        raise ConfigError(msg)
    try:
        load_dotenv(path)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Error loading env file {path}: {e}"
        raise ConfigError(msg) from e

    api_key = os.environ.get(API_KEY_VAR, "").strip()
    if not api_key:
        msg = f"{API_KEY_VAR} is not set in {path} or the environment"
        raise ConfigError(msg)

    return Settings(
        api_key=api_key,
        host=os.environ.get("FONTGATE_HOST", ""),
        port=_env_number("FONTGATE_PORT", DEFAULT_PORT, int),
        catalog_url=os.environ.get("FONTGATE_CATALOG_URL", "").strip() or DEFAULT_CATALOG_URL,
        fetch_timeout=_env_number("FONTGATE_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT, float),
    )
