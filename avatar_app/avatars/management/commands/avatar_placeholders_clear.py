import logging
from typing import override

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from avatars.avatar import placeholder_avatar_for

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delete cached placeholder avatars so they are regenerated on next request."

    @override
    def add_arguments(self, parser) -> None:
        parser.add_argument("usernames", nargs="*", help="Users whose placeholders should be cleared.")
        parser.add_argument(
            "--all",
            action="store_true",
            help="Clear placeholders for every user.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without deleting anything.",
        )

    @override
    def handle(self, *args, **options) -> None:
        usernames: list[str] = [str(u).strip() for u in options.get("usernames") or [] if str(u).strip()]
        clear_all: bool = bool(options.get("all"))
        dry_run: bool = bool(options.get("dry_run"))

        if not usernames and not clear_all:
            raise CommandError("Pass one or more usernames, or --all.")

        user_model = get_user_model()
        if clear_all:
            users = list(user_model._default_manager.order_by(user_model.USERNAME_FIELD))
        else:
            by_username = {
                user.get_username(): user
                for user in user_model._default_manager.filter(**{f"{user_model.USERNAME_FIELD}__in": usernames})
            }
            users = []
            for username in usernames:
                user = by_username.get(username)
                if user is None:
                    self.stderr.write(f"Unknown user: {username}")
                    continue
                users.append(user)

        cleared_files = 0
        for user in users:
            avatar = placeholder_avatar_for(user)
            entries = avatar.folder.get_directory_listing()
            if dry_run:
                for entry in entries:
                    self.stdout.write(f"[dry-run] Would delete {entry.path} ({user.get_username()})")
            else:
                avatar.remove()
            cleared_files += len(entries)

        verb = "Would clear" if dry_run else "Cleared"
        self.stdout.write(f"{verb} {cleared_files} placeholder file(s) for {len(users)} user(s).")
        logger.info(
            "Placeholder avatar clear finished files=%d users=%d dry_run=%s",
            cleared_files,
            len(users),
            dry_run,
        )
