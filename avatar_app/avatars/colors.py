from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

_MD5_LIKE_RE = re.compile(r"([0-9a-f]{4}-?){8}")
_NON_HEX_RE = re.compile(r"[^0-9a-f]+")

PALETTE_STEPS: Final[int] = 6


@dataclass(frozen=True)
class Color:
    red: int
    green: int
    blue: int

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        return f"{self.red:02x}{self.green:02x}{self.blue:02x}"

    def alpha_blending(self, opacity: float, background: Color) -> Color:
        """Return this color drawn at `opacity` over `background`."""

        return Color(
            int((1 - opacity) * background.red + opacity * self.red),
            int((1 - opacity) * background.green + opacity * self.green),
            int((1 - opacity) * background.blue + opacity * self.blue),
        )


WHITE: Final[Color] = Color(255, 255, 255)
BLACK: Final[Color] = Color(0, 0, 0)

_RED: Final[Color] = Color(182, 70, 157)
_YELLOW: Final[Color] = Color(221, 203, 85)
_BLUE: Final[Color] = Color(0, 130, 201)


def mix_palette(steps: int, start: Color, end: Color) -> list[Color]:
    """Return `steps` colors going from `start` towards (excluding) `end`."""

    step_red = (end.red - start.red) / steps
    step_green = (end.green - start.green) / steps
    step_blue = (end.blue - start.blue) / steps

    palette = [start]
    for i in range(1, steps):
        palette.append(
            Color(
                int(start.red + step_red * i),
                int(start.green + step_green * i),
                int(start.blue + step_blue * i),
            )
        )
    return palette


@lru_cache(maxsize=1)
def avatar_palette() -> tuple[Color, ...]:
    return (
        *mix_palette(PALETTE_STEPS, _RED, _YELLOW),
        *mix_palette(PALETTE_STEPS, _YELLOW, _BLUE),
        *mix_palette(PALETTE_STEPS, _BLUE, _RED),
    )


def _hash_to_int(digest: str, maximum: int) -> int:
    return sum(int(char, 16) for char in digest) % maximum


def avatar_background_color(value: str) -> Color:
    """Pick the palette color for a display name (or an md5-looking hash)."""

    digest = value.lower()
    if _MD5_LIKE_RE.fullmatch(digest) is None:
        digest = hashlib.md5(digest.encode("utf-8"), usedforsecurity=False).hexdigest()
    digest = _NON_HEX_RE.sub("", digest)

    palette = avatar_palette()
    return palette[_hash_to_int(digest, len(palette))]


def avatar_colors(display_name: str, dark_theme: bool) -> tuple[Color, Color]:
    """Return (text_color, background_color) for a placeholder avatar."""

    text_color = avatar_background_color(display_name)
    background = text_color.alpha_blending(0.1, BLACK if dark_theme else WHITE)
    return text_color, background
