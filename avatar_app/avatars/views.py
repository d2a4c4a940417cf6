from __future__ import annotations

from django.conf import settings
from django.contrib.auth import get_user_model
from django.http import FileResponse, Http404, HttpRequest
from django.views.decorators.http import require_GET

from avatars.avatar import placeholder_avatar_for
from avatars.exceptions import AvatarNotFoundError
from avatars.paths import NATIVE_SIZE


def _serve_placeholder(username: str, size: int, dark_theme: bool) -> FileResponse:
    if size > int(settings.AVATAR_PLACEHOLDER_MAX_SIZE):
        raise Http404("Avatar size not supported")

    user = get_user_model().objects.filter(username=username).first()
    if user is None:
        raise Http404("User not found")

    avatar = placeholder_avatar_for(user)
    try:
        avatar_file = avatar.get_file(size, dark_theme=dark_theme)
        fh = avatar_file.open()
    except AvatarNotFoundError as exc:
        raise Http404("Avatar not found") from exc

    response = FileResponse(fh, content_type="image/png")
    response["Cache-Control"] = f"public, max-age={int(settings.AVATAR_PLACEHOLDER_CACHE_MAX_AGE)}"
    response["X-Is-Custom-Avatar"] = "1" if avatar.is_custom_avatar() else "0"
    return response


@require_GET
def placeholder_avatar(request: HttpRequest, username: str, size: int = NATIVE_SIZE) -> FileResponse:
    return _serve_placeholder(username, size, dark_theme=False)


@require_GET
def placeholder_avatar_dark(request: HttpRequest, username: str, size: int) -> FileResponse:
    return _serve_placeholder(username, size, dark_theme=True)
