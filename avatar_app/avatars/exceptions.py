"""Placeholder avatar exception classes."""


class AvatarNotFoundError(LookupError):
    """Raised when an avatar file does not exist and will not be generated."""


class AvatarNotPermittedError(PermissionError):
    """Raised when the avatar storage refuses a write or delete (permissions or quota)."""


class AvatarFileExistsError(FileExistsError):
    """Raised when creating an avatar file whose name is already taken."""


class AvatarRenderingError(RuntimeError):
    """Raised when the raster renderer cannot produce an image."""


__all__ = [
    "AvatarNotFoundError",
    "AvatarNotPermittedError",
    "AvatarFileExistsError",
    "AvatarRenderingError",
]
