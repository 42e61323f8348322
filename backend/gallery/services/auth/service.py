# gallery/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from gallery.models.user import User
from gallery.repositories.user import UserRepository
from gallery.services._shared.base import BaseService
from gallery.services._shared.errors import ConflictError, UnauthorizedError
from gallery.services._shared.ports.token_provider import JwtPayload, TokenProvider
from gallery.services.auth.dto import (
    AuthedUserOut,
    LoginIn,
    SignupIn,
    TokenPairOut,
    UserPublicOut,
)

log = logging.getLogger(__name__)

USERNAME_TAKEN = "Username already exists"
INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_NOT_ACCESSIBLE = "Account is not accessible"
NO_REFRESH_TOKEN = "No refresh token found, try to login first"
INVALID_REFRESH_TOKEN = "Invalid Refresh Token"


class AuthService(BaseService):
    """
    Authentication lifecycle service (signup / login / refresh).

    Tokens come from a pluggable :class:`TokenProvider`. Only a salted hash of
    the latest refresh token is kept on the user row; every successful
    signup, login or refresh overwrites it, so a superseded refresh token is
    rejected on its next use (rotation).
    """

    def __init__(self, *, tokens: TokenProvider) -> None:
        """
        :param tokens: Adapter issuing and verifying JWTs.
        """
        self.tokens = tokens

    # ------------------------------------------------------------------ #
    # Signup
    # ------------------------------------------------------------------ #

    def signup(self, dto: SignupIn) -> AuthedUserOut:
        """
        Create an account and sign it in.

        :param dto: Signup input.
        :returns: Token pair plus the public user.
        :raises ConflictError: If the username is taken.
        :raises InternalError: On unexpected persistence or signing failures.
        """
        with self.boundary("auth.signup", "Could not complete signup"):
            try:
                with self.rw_uow() as uow:
                    repo: UserRepository = uow.users
                    if repo.exists_by_username(dto.username):
                        raise ConflictError("User", USERNAME_TAKEN)
                    user = User(username=dto.username, name=dto.name)
                    user.password = dto.password
                    repo.add(user)
                    result = self._issue_and_store(repo, user)
            except IntegrityError as exc:
                # Lost a race against a concurrent signup for the same name
                raise ConflictError("User", USERNAME_TAKEN) from exc
        log.info("User signed up", extra={"user_id": result.user.id})
        return result

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthedUserOut:
        """
        Authenticate credentials and issue a fresh token pair.

        Unknown users and wrong passwords fail identically.

        :param dto: Login input.
        :returns: Token pair plus the public user.
        :raises UnauthorizedError: If credentials are invalid.
        """
        with self.boundary("auth.login", "Could not complete login"):
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get_by_username(dto.username)
                if user is None or not user.verify_password(dto.password):
                    raise UnauthorizedError(INVALID_CREDENTIALS)
                result = self._issue_and_store(repo, user)
        log.info("User logged in", extra={"user_id": result.user.id})
        return result

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def refresh_tokens(self, payload: JwtPayload) -> AuthedUserOut:
        """
        Rotate the caller's refresh token.

        ``payload`` must come from an already verified refresh token; this
        method only checks it against the hash stored for the user.

        :param payload: Verified refresh-token claims with the raw token.
        :returns: New token pair plus the public user.
        :raises UnauthorizedError: If the user is gone, never logged in, or
            presents a superseded token.
        """
        with self.boundary("auth.refresh_tokens", "Could not refresh tokens"):
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = repo.get_for_update(payload.user_id)
                if user is None:
                    raise UnauthorizedError(ACCOUNT_NOT_ACCESSIBLE)
                if not user.refresh_token_hash:
                    raise UnauthorizedError(NO_REFRESH_TOKEN)
                if not user.verify_refresh_token(payload.token):
                    log.warning("Stale refresh token presented", extra={"user_id": user.id})
                    raise UnauthorizedError(INVALID_REFRESH_TOKEN)
                result = self._issue_and_store(repo, user)
        return result

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def issue_pair(self, user_id: str) -> TokenPairOut:
        return TokenPairOut(
            access_token=self.tokens.issue_access_token(user_id),
            refresh_token=self.tokens.issue_refresh_token(user_id),
        )

    def _issue_and_store(self, repo: UserRepository, user: User) -> AuthedUserOut:
        pair = self.issue_pair(user.id)
        repo.update_refresh_hash(user, pair.refresh_token)
        return AuthedUserOut(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            user=UserPublicOut.from_model(user),
        )
