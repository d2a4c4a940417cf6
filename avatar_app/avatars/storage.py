from __future__ import annotations

import errno
import hashlib
import hmac
import logging
import posixpath
from dataclasses import dataclass
from typing import IO

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import Storage, default_storage
from django.utils.encoding import force_bytes

from avatars.exceptions import AvatarFileExistsError, AvatarNotFoundError, AvatarNotPermittedError
from avatars.identity import unique_id_for

logger = logging.getLogger(__name__)

_NOT_PERMITTED_ERRNOS: frozenset[int] = frozenset(
    code for code in (errno.EACCES, errno.EPERM, errno.EROFS, errno.ENOSPC, getattr(errno, "EDQUOT", None)) if code
)


def _is_not_permitted(exc: OSError) -> bool:
    return isinstance(exc, PermissionError) or exc.errno in _NOT_PERMITTED_ERRNOS


def avatar_folder_name(user: object) -> str:
    """Return the deterministic, non-enumerable storage folder for a user's placeholders.

    Folders are not named after the username; the name is derived from
    HMAC(SECRET_KEY, normalized_username) so cached files cannot be listed by
    guessing usernames.
    """

    digest = hmac.new(
        force_bytes(settings.SECRET_KEY),
        force_bytes(unique_id_for(user)),
        hashlib.sha256,
    ).hexdigest()

    base_dir = str(settings.AVATAR_PLACEHOLDER_DIR or "avatars/placeholders").strip("/")
    return posixpath.join(base_dir, digest)


@dataclass(frozen=True)
class AvatarFile:
    storage: Storage
    path: str

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def size(self) -> int:
        return self.storage.size(self.path)

    def open(self) -> IO[bytes]:
        try:
            return self.storage.open(self.path, "rb")
        except FileNotFoundError as exc:
            # Invalidated between lookup and open.
            raise AvatarNotFoundError(self.path) from exc

    def read(self) -> bytes:
        with self.open() as fh:
            return fh.read()

    def delete(self) -> None:
        try:
            self.storage.delete(self.path)
        except OSError as exc:
            if _is_not_permitted(exc):
                raise AvatarNotPermittedError(f"Cannot delete {self.path!r}") from exc
            raise


class AvatarFolder:
    """One user's folder of cached avatar files on a Django storage backend.

    Lookups return `None` for a missing file instead of raising; a cache miss
    is an ordinary outcome for callers.
    """

    def __init__(self, storage: Storage, name: str) -> None:
        self.storage = storage
        self.name = name.strip("/")

    @classmethod
    def for_user(cls, user: object, *, storage: Storage | None = None) -> AvatarFolder:
        return cls(storage if storage is not None else default_storage, avatar_folder_name(user))

    def _path(self, filename: str) -> str:
        return posixpath.join(self.name, posixpath.basename(filename))

    def get_directory_listing(self) -> list[AvatarFile]:
        try:
            _dirs, files = self.storage.listdir(self.name)
        except FileNotFoundError:
            return []
        except OSError as exc:
            if _is_not_permitted(exc):
                raise AvatarNotPermittedError(f"Cannot list {self.name!r}") from exc
            raise
        return [AvatarFile(self.storage, self._path(filename)) for filename in sorted(files)]

    def get_file(self, filename: str) -> AvatarFile | None:
        path = self._path(filename)
        if not self.storage.exists(path):
            return None
        return AvatarFile(self.storage, path)

    def new_file(self, filename: str, content: bytes) -> AvatarFile:
        """Create `filename` holding `content` in a single storage write.

        Raises AvatarFileExistsError when the name is already taken, including
        when a concurrent writer created it between our check and our save.
        Raises AvatarNotPermittedError when the storage refuses the write.
        """

        path = self._path(filename)
        if self.storage.exists(path):
            raise AvatarFileExistsError(path)

        try:
            saved_path = self.storage.save(path, ContentFile(content))
        except OSError as exc:
            if _is_not_permitted(exc):
                raise AvatarNotPermittedError(f"Cannot write {path!r}") from exc
            raise

        if saved_path != path:
            # The storage picked an alternative name because `path` appeared
            # after our existence check; keep the first writer's file.
            logger.info("Avatar file %r was created concurrently; discarding %r", path, saved_path)
            self.storage.delete(saved_path)
            raise AvatarFileExistsError(path)

        return AvatarFile(self.storage, saved_path)
