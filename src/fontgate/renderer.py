"""Font parsing and sample-image rendering.

fontTools checks that the downloaded bytes are an sfnt font with a
character map and outlines; PIL (FreeType) rasterizes the sample text onto
a fixed-size canvas and encodes it as PNG.
"""

from __future__ import annotations

import io
import logging
import struct

from fontTools.ttLib import TTFont, TTLibError
from PIL import Image, ImageDraw, ImageFont

from fontgate.config import (
    BACKGROUND,
    CANVAS_SIZE,
    FONT_SIZE_PT,
    FOREGROUND,
    RENDER_DPI,
    TEXT_ORIGIN,
)
from fontgate.errors import FontParseError, RenderError

logger = logging.getLogger("fontgate.renderer")

# fontTools surfaces malformed input through several exception types
_PARSE_ERRORS = (TTLibError, struct.error, EOFError, KeyError, ValueError, AssertionError)

_OUTLINE_TABLES = ("glyf", "CFF ", "CFF2")


def _pixel_size(points: float = FONT_SIZE_PT, dpi: int = RENDER_DPI) -> int:
    return round(points * dpi / 72)


def inspect_font(data: bytes) -> str | None:
    """Validate ``data`` as an sfnt font and return its family name, if any.

    Raises FontParseError when the bytes are not a usable font.
    """
    if not data:
        msg = "Font file is empty"
        raise FontParseError(msg)
    try:
        font = TTFont(io.BytesIO(data), lazy=True)
    except _PARSE_ERRORS as e:
        msg = f"Not a TrueType or OpenType font: {e}"
        raise FontParseError(msg) from e

    try:
        if "cmap" not in font or not any(tag in font for tag in _OUTLINE_TABLES):
            msg = "Font has no character map or glyph outlines"
            raise FontParseError(msg)
        return font["name"].getDebugName(1) if "name" in font else None
    except _PARSE_ERRORS as e:
        msg = f"Font tables could not be read: {e}"
        raise FontParseError(msg) from e
    finally:
        font.close()


def load_font(data: bytes) -> ImageFont.FreeTypeFont:
    """Parse raw font bytes into a PIL font at the sample size."""
    name = inspect_font(data)
    try:
        pil_font = ImageFont.truetype(io.BytesIO(data), size=_pixel_size())
    except OSError as e:
        msg = f"FreeType could not load font: {e}"
        raise FontParseError(msg) from e
    logger.debug("Loaded font %s (%d bytes)", name or "(unnamed)", len(data))
    return pil_font


def render_sample(pil_font: ImageFont.FreeTypeFont, text: str) -> bytes:
    """Draw ``text`` on the sample canvas and return PNG bytes.

    The text starts at TEXT_ORIGIN (left edge, baseline); long text is
    clipped at the canvas edge.
    """
    try:
        img = Image.new("RGB", CANVAS_SIZE, BACKGROUND)
        draw = ImageDraw.Draw(img)
        draw.text(TEXT_ORIGIN, text, font=pil_font, fill=FOREGROUND, anchor="ls")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        msg = f"Rendering sample failed: {e}"
        raise RenderError(msg) from e
    return buf.getvalue()
