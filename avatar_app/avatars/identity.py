from __future__ import annotations


def _normalize_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def unique_id_for(user: object) -> str:
    """Return the stable identifier of a user (their username).

    `user` is typed as `object` because callers pass Django auth users as well
    as lightweight stand-ins; `get_username` may not exist.
    """

    get_username = getattr(user, "get_username", None)
    if callable(get_username):
        return _normalize_str(get_username())
    return _normalize_str(getattr(user, "username", ""))


def display_name_for(user: object) -> str:
    """Return the name rendered into a user's placeholder avatar.

    Prefers the full name, then an explicit `displayname` attribute, then the
    username. May return an empty string.
    """

    get_full_name = getattr(user, "get_full_name", None)
    if callable(get_full_name):
        full_name = _normalize_str(get_full_name())
        if full_name:
            return full_name

    displayname = _normalize_str(getattr(user, "displayname", ""))
    if displayname:
        return displayname

    return unique_id_for(user)
