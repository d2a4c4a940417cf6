from __future__ import annotations

from typing import Final

PLACEHOLDER_BASENAME: Final[str] = "avatar-placeholder"
PLACEHOLDER_EXTENSION: Final[str] = "png"

# Size -1 asks for the native-size image, stored without a size suffix.
NATIVE_SIZE: Final[int] = -1


def placeholder_filename(size: int, dark_theme: bool = False) -> str:
    """Return the cache file name for a placeholder avatar of `size` pixels.

    No validation happens here: every (size, theme) pair maps to exactly one
    name, e.g. ``avatar-placeholder-dark.64.png``.
    """

    name = PLACEHOLDER_BASENAME
    if dark_theme:
        name = f"{name}-dark"
    if size == NATIVE_SIZE:
        return f"{name}.{PLACEHOLDER_EXTENSION}"
    return f"{name}.{size}.{PLACEHOLDER_EXTENSION}"
