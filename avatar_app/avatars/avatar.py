from __future__ import annotations

import enum
import logging
from typing import Any, Protocol, override

from django.core.files.storage import Storage

from avatars.exceptions import AvatarFileExistsError, AvatarNotFoundError, AvatarNotPermittedError
from avatars.identity import display_name_for, unique_id_for
from avatars.paths import placeholder_filename
from avatars.rendering import RasterRenderer, VectorRenderer, render_raster_png, render_vector_png
from avatars.storage import AvatarFile, AvatarFolder

logger = logging.getLogger(__name__)


class AvatarKind(enum.StrEnum):
    custom = "custom"
    guest = "guest"
    placeholder = "placeholder"


class Avatar(Protocol):
    """Capabilities shared by every avatar kind."""

    kind: AvatarKind

    def exists(self) -> bool: ...

    def set(self, data: Any) -> None: ...

    def remove(self, silent: bool = False) -> None: ...

    def get_file(self, size: int, dark_theme: bool = False) -> AvatarFile: ...

    def is_custom_avatar(self) -> bool: ...

    def user_changed(self, feature: str, old_value: object, new_value: object) -> None: ...


class PlaceholderAvatar:
    """A registered user's generated initials avatar.

    Images are rendered on first request for a (size, theme) and cached in the
    user's avatar folder; later requests are served from the cached file until
    the folder is cleared.
    """

    kind = AvatarKind.placeholder

    def __init__(
        self,
        folder: AvatarFolder,
        user: object,
        *,
        vector_renderer: VectorRenderer | None = None,
        raster_renderer: RasterRenderer | None = None,
    ) -> None:
        self.folder = folder
        self.user = user
        self._vector_renderer = vector_renderer or render_vector_png
        self._raster_renderer = raster_renderer or render_raster_png

    def exists(self) -> bool:
        return True

    def set(self, data: Any) -> None:
        # Placeholders are always generated; there is nothing to upload.
        return None

    def remove(self, silent: bool = False) -> None:
        avatars = self.folder.get_directory_listing()
        for avatar in avatars:
            avatar.delete()

        if avatars:
            logger.info(
                "Placeholder avatars invalidated user=%s count=%d",
                unique_id_for(self.user),
                len(avatars),
                extra={
                    "event": "avatars.placeholder.invalidated",
                    "component": "avatars",
                    "outcome": "deleted",
                    "deleted_count": len(avatars),
                },
            )

    def get_display_name(self) -> str:
        return display_name_for(self.user)

    def get_file(self, size: int, dark_theme: bool = False) -> AvatarFile:
        """Return the cached placeholder for (size, theme), generating it on a miss.

        Raises AvatarNotFoundError when nothing is cached and `size` is not a
        positive pixel size, or when the generated image cannot be stored.
        """

        path = placeholder_filename(size, dark_theme)

        cached = self.folder.get_file(path)
        if cached is not None:
            return cached

        # The native-size sentinel (-1) is only ever looked up.
        if size <= 0:
            raise AvatarNotFoundError(path)

        display_name = self.get_display_name()
        renderer = "vector"
        data = self._vector_renderer(display_name, size, dark_theme)
        if not data:
            renderer = "raster"
            data = self._raster_renderer(display_name, size, dark_theme)

        try:
            avatar_file = self.folder.new_file(path, data)
        except AvatarFileExistsError:
            existing = self.folder.get_file(path)
            if existing is None:
                raise AvatarNotFoundError(path) from None
            return existing
        except AvatarNotPermittedError as exc:
            logger.error(
                "Failed to save avatar placeholder for %s",
                unique_id_for(self.user),
                extra={
                    "event": "avatars.placeholder.save_failed",
                    "component": "avatars",
                    "outcome": "not_permitted",
                    "user": unique_id_for(self.user),
                    "path": path,
                },
            )
            raise AvatarNotFoundError(path) from exc

        logger.info(
            "Placeholder avatar generated size=%s renderer=%s",
            size,
            renderer,
            extra={
                "event": "avatars.placeholder.generated",
                "component": "avatars",
                "outcome": "generated",
                "renderer": renderer,
                "size": size,
                "dark_theme": dark_theme,
            },
        )
        return avatar_file

    def user_changed(self, feature: str, old_value: object, new_value: object) -> None:
        # Any change may affect the rendered image; drop every cached variant.
        self.remove()

    def is_custom_avatar(self) -> bool:
        return False

    @override
    def __repr__(self) -> str:
        return f"<PlaceholderAvatar user={unique_id_for(self.user)!r} folder={self.folder.name!r}>"


def placeholder_avatar_for(user: object, *, storage: Storage | None = None) -> PlaceholderAvatar:
    return PlaceholderAvatar(AvatarFolder.for_user(user, storage=storage), user)
