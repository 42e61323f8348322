from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from gallery.models.user import User
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


class TestUserPassword:
    def test_password_is_hashed_and_verifiable(self, session):
        """
        GIVEN a user created with a raw password
        WHEN the password is checked
        THEN only the correct password verifies and the hash differs from it
        """
        user = UserFactory(password="hunter22")

        assert user.password_hash != "hunter22"
        assert user.verify_password("hunter22") is True
        assert user.verify_password("wrong") is False

    def test_password_is_write_only(self, session):
        user = UserFactory()
        with pytest.raises(AttributeError):
            _ = user.password

    def test_empty_password_rejected(self):
        user = User(username="bob", name="Bob")
        with pytest.raises(ValueError):
            user.password = ""


class TestUserRefreshToken:
    def test_refresh_token_stored_as_hash(self, session):
        user = UserFactory()
        user.refresh_token = "raw.refresh.token"

        assert user.refresh_token_hash is not None
        assert "raw.refresh.token" not in user.refresh_token_hash
        assert user.verify_refresh_token("raw.refresh.token") is True
        assert user.verify_refresh_token("other.token") is False

    def test_clearing_refresh_token(self, session):
        user = UserFactory()
        user.refresh_token = "abc"
        user.refresh_token = None

        assert user.refresh_token_hash is None
        assert user.verify_refresh_token("abc") is False

    def test_new_user_has_no_refresh_token(self, session):
        user = UserFactory()
        assert user.verify_refresh_token("anything") is False


class TestUserValidation:
    def test_username_is_trimmed(self, session):
        user = UserFactory(username="  carol  ")
        assert user.username == "carol"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_username_rejected(self, value):
        with pytest.raises(ValueError, match="Username is required"):
            User(username=value, name="X")

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError, match="Name is required"):
            User(username="dave", name=" ")

    def test_username_is_unique(self, session):
        UserFactory(username="erin")
        with pytest.raises(IntegrityError):
            UserFactory(username="erin")

    def test_ids_are_uuid_strings(self, session):
        user = UserFactory()
        assert isinstance(user.id, str)
        assert len(user.id) == 36

    def test_timestamps_are_set(self, session):
        user = UserFactory(password=DEFAULT_PASSWORD)
        assert user.created_at is not None
        assert user.updated_at is not None
