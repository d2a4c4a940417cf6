from __future__ import annotations

import logging
from io import BytesIO
from typing import Final, Protocol

from django.conf import settings
from django.utils.html import escape
from PIL import Image, ImageDraw, ImageFont

from avatars.colors import avatar_colors
from avatars.exceptions import AvatarRenderingError

logger = logging.getLogger(__name__)

_RASTER_FONT_RATIO: Final[float] = 0.4

_SVG_TEMPLATE: Final[str] = (
    '<svg width="{size}" height="{size}" version="1.1" viewBox="0 0 500 500" '
    'xmlns="http://www.w3.org/2000/svg">'
    '<rect width="100%" height="100%" fill="#{fill}"></rect>'
    '<text x="50%" y="350" style="font-weight:normal;font-size:280px;'
    "font-family:'Noto Sans';text-anchor:middle;fill:#{text_fill}\">{text}</text>"
    "</svg>"
)


class VectorRenderer(Protocol):
    def __call__(self, display_name: str, size: int, dark_theme: bool) -> bytes | None: ...


class RasterRenderer(Protocol):
    def __call__(self, display_name: str, size: int, dark_theme: bool) -> bytes: ...


def avatar_text(display_name: str) -> str:
    """Return the initials shown on a placeholder avatar.

    The name is split once on the first space; the first letter of each part
    is uppercased. An empty name renders as "?".
    """

    name = str(display_name or "").strip()
    if not name:
        return "?"
    return "".join(part[:1].upper() for part in name.split(" ", 1))


def render_svg(display_name: str, size: int, dark_theme: bool) -> str:
    text_color, background = avatar_colors(display_name, dark_theme)
    return _SVG_TEMPLATE.format(
        size=size,
        fill=background.hex,
        text_fill=text_color.hex,
        text=escape(avatar_text(display_name)),
    )


def render_vector_png(display_name: str, size: int, dark_theme: bool) -> bytes | None:
    """Rasterize the SVG placeholder to PNG with cairosvg.

    Returns None when SVG rendering is unavailable on this host (cairosvg or
    the native cairo library missing) or the conversion fails, so callers can
    fall back to the raster renderer.
    """

    try:
        import cairosvg
    except (ImportError, OSError) as exc:
        logger.debug("SVG avatar rendering unavailable: %s", exc)
        return None

    svg = render_svg(display_name, size, dark_theme)
    try:
        return cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=size,
            output_height=size,
        )
    except Exception:
        logger.warning(
            "SVG avatar rendering failed size=%s",
            size,
            exc_info=True,
            extra={
                "event": "avatars.placeholder.vector_failed",
                "component": "avatars",
                "outcome": "fallback",
                "size": size,
            },
        )
        return None


def _load_font(font_size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    font_path = str(settings.AVATAR_PLACEHOLDER_FONT_PATH or "").strip()
    if not font_path:
        return ImageFont.load_default(size=font_size)

    try:
        return ImageFont.truetype(font_path, font_size)
    except OSError as exc:
        raise AvatarRenderingError(f"Cannot load avatar font {font_path!r}") from exc


def render_raster_png(display_name: str, size: int, dark_theme: bool) -> bytes:
    text = avatar_text(display_name)
    text_color, background = avatar_colors(display_name, dark_theme)

    image = Image.new("RGB", (size, size), background.rgb)
    draw = ImageDraw.Draw(image)
    font = _load_font(max(1, int(size * _RASTER_FONT_RATIO)))

    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    position = (
        (size - (right - left)) / 2 - left,
        (size - (bottom - top)) / 2 - top,
    )
    draw.text(position, text, fill=text_color.rgb, font=font)

    buf = BytesIO()
    image.save(buf, format="PNG", optimize=True)
    return buf.getvalue()
