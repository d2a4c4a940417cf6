from __future__ import annotations

import logging
from functools import partial

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from avatars.avatar import placeholder_avatar_for
from avatars.identity import display_name_for, unique_id_for

logger = logging.getLogger(__name__)

# Set on the instance by pre_save, consumed by post_save.
_PENDING_CHANGES_ATTR = "_avatar_placeholder_changes"


def _invalidate(user: object, feature: str, old_value: str, new_value: str) -> None:
    logger.debug("User %s changed; invalidating placeholder avatars", feature)
    placeholder_avatar_for(user).user_changed(feature, old_value, new_value)


@receiver(pre_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="avatars.record_user_change")
def record_placeholder_inputs_before_save(sender: type, instance: object, **kwargs) -> None:
    if kwargs.get("raw"):
        return

    pk = getattr(instance, "pk", None)
    if pk is None:
        return

    previous = sender._default_manager.filter(pk=pk).first()
    if previous is None:
        return

    changes: list[tuple[object, str, str, str]] = []

    old_username = unique_id_for(previous)
    new_username = unique_id_for(instance)
    if old_username != new_username:
        # The cache folder is keyed by username; clear the folder being abandoned.
        changes.append((previous, "username", old_username, new_username))

    old_value = display_name_for(previous)
    new_value = display_name_for(instance)
    if old_value != new_value:
        changes.append((instance, "displayname", old_value, new_value))

    setattr(instance, _PENDING_CHANGES_ATTR, changes)


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="avatars.invalidate_on_user_change")
def invalidate_placeholder_on_user_change(sender: type, instance: object, **kwargs) -> None:
    changes = getattr(instance, _PENDING_CHANGES_ATTR, None)
    if changes is None:
        return
    delattr(instance, _PENDING_CHANGES_ATTR)

    # Clear only once the new values are visible to other requests, so a
    # concurrent render cannot re-cache the old name.
    for user, feature, old_value, new_value in changes:
        transaction.on_commit(partial(_invalidate, user, feature, old_value, new_value), using=kwargs.get("using"))


@receiver(post_delete, sender=settings.AUTH_USER_MODEL, dispatch_uid="avatars.remove_on_user_delete")
def remove_placeholder_on_user_delete(sender: type, instance: object, **kwargs) -> None:
    placeholder_avatar_for(instance).remove(silent=True)
