from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase

from avatars.identity import display_name_for, unique_id_for


class IdentityTests(SimpleTestCase):
    def test_django_user_full_name(self) -> None:
        user = get_user_model()(username="alice", first_name="Alice", last_name="Liddell")

        self.assertEqual(display_name_for(user), "Alice Liddell")
        self.assertEqual(unique_id_for(user), "alice")

    def test_django_user_without_names_uses_username(self) -> None:
        user = get_user_model()(username="alice")

        self.assertEqual(display_name_for(user), "alice")

    def test_displayname_attribute(self) -> None:
        user = SimpleNamespace(username="bob", displayname=" Bob Builder ")

        self.assertEqual(display_name_for(user), "Bob Builder")
        self.assertEqual(unique_id_for(user), "bob")

    def test_missing_everything_is_empty(self) -> None:
        self.assertEqual(display_name_for(SimpleNamespace()), "")
        self.assertEqual(unique_id_for(SimpleNamespace()), "")
