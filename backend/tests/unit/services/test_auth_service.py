from __future__ import annotations

import pytest

from gallery.services._shared.errors import (
    ConflictError,
    InternalError,
    UnauthorizedError,
)
from gallery.services.auth.dto import LoginIn, SignupIn
from gallery.services.auth.service import (
    ACCOUNT_NOT_ACCESSIBLE,
    INVALID_CREDENTIALS,
    INVALID_REFRESH_TOKEN,
    NO_REFRESH_TOKEN,
    AuthService,
)
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


@pytest.fixture()
def auth(tokens):
    return AuthService(tokens=tokens)


class TestSignup:
    def test_creates_user_and_issues_tokens(self, auth, tokens, session):
        result = auth.signup(SignupIn(username="quinn", name="Quinn", password="pw-123456"))

        assert result.user.username == "quinn"
        assert tokens.verify_access(result.access_token).user_id == result.user.id
        assert tokens.verify_refresh(result.refresh_token).user_id == result.user.id

    def test_stores_only_a_hash_of_the_refresh_token(self, auth, session):
        result = auth.signup(SignupIn(username="rupert", name="Rupert", password="pw-123456"))

        with auth.ro_uow() as uow:
            user = uow.users.get(result.user.id)
            assert user.refresh_token_hash != result.refresh_token
            assert user.verify_refresh_token(result.refresh_token)
            assert user.verify_password("pw-123456")

    def test_duplicate_username_conflicts(self, auth, session):
        UserFactory(username="sybil")

        with pytest.raises(ConflictError) as exc_info:
            auth.signup(SignupIn(username="sybil", name="Other", password="pw-123456"))

        assert exc_info.value.detail == "Username already exists"


class TestLogin:
    def test_valid_credentials(self, auth, tokens, session):
        user = UserFactory(username="trent")

        result = auth.login(LoginIn(username="trent", password=DEFAULT_PASSWORD))

        assert result.user.id == user.id
        assert tokens.verify_access(result.access_token).user_id == user.id

    @pytest.mark.parametrize(
        ("username", "password"),
        [("trent", "wrong-password"), ("nobody", DEFAULT_PASSWORD)],
    )
    def test_bad_credentials_fail_identically(self, auth, session, username, password):
        UserFactory(username="trent")

        with pytest.raises(UnauthorizedError, match=INVALID_CREDENTIALS):
            auth.login(LoginIn(username=username, password=password))

    def test_login_invalidates_previous_refresh_token(self, auth, tokens, session):
        first = auth.signup(SignupIn(username="uma", name="Uma", password="pw-123456"))
        auth.login(LoginIn(username="uma", password="pw-123456"))

        with pytest.raises(UnauthorizedError, match=INVALID_REFRESH_TOKEN):
            auth.refresh_tokens(tokens.verify_refresh(first.refresh_token))


class TestRefreshTokens:
    def test_rotation(self, auth, tokens, session):
        signed_up = auth.signup(SignupIn(username="victor", name="Victor", password="pw-123456"))

        rotated = auth.refresh_tokens(tokens.verify_refresh(signed_up.refresh_token))

        assert rotated.refresh_token != signed_up.refresh_token
        assert rotated.access_token != signed_up.access_token
        with pytest.raises(UnauthorizedError, match=INVALID_REFRESH_TOKEN):
            auth.refresh_tokens(tokens.verify_refresh(signed_up.refresh_token))
        again = auth.refresh_tokens(tokens.verify_refresh(rotated.refresh_token))
        assert again.user.id == signed_up.user.id

    def test_user_without_stored_token(self, auth, tokens, session):
        user = UserFactory()
        payload = tokens.verify_refresh(tokens.issue_refresh_token(user.id))

        with pytest.raises(UnauthorizedError, match=NO_REFRESH_TOKEN):
            auth.refresh_tokens(payload)

    def test_deleted_user(self, auth, tokens, session):
        payload = tokens.verify_refresh(
            tokens.issue_refresh_token("00000000-0000-0000-0000-000000000000")
        )

        with pytest.raises(UnauthorizedError, match=ACCOUNT_NOT_ACCESSIBLE):
            auth.refresh_tokens(payload)


class _BrokenTokens:
    access_secret = "a"
    refresh_secret = "r"

    def issue_access_token(self, user_id):
        raise RuntimeError("signing backend down")

    issue_refresh_token = issue_access_token


def test_unexpected_failure_becomes_internal_error(session):
    UserFactory(username="walter")
    auth = AuthService(tokens=_BrokenTokens())

    with pytest.raises(InternalError) as exc_info:
        auth.login(LoginIn(username="walter", password=DEFAULT_PASSWORD))

    assert "signing backend down" not in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
