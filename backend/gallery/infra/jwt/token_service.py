"""PyJWT-backed issuance and verification of access/refresh tokens."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from gallery.services._shared.errors import InvalidTokenError, TokenExpiredError
from gallery.services._shared.ports.token_provider import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    JwtPayload,
    TokenProvider,
)

REQUIRED_CLAIMS = ("sub", "type", "jti", "iat", "exp")


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """
    Signing material and lifetimes for both token kinds.

    :param access_secret: HMAC secret for access tokens.
    :param refresh_secret: HMAC secret for refresh tokens (must differ).
    :param access_expires: Access token lifetime.
    :param refresh_expires: Refresh token lifetime.
    :param algorithm: JWS algorithm, ``HS256`` by default.
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=7)
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> TokenSettings:
        """Read settings from a Flask config mapping."""
        return cls(
            access_secret=str(config["ACCESS_TOKEN_SECRET"]),
            refresh_secret=str(config["REFRESH_TOKEN_SECRET"]),
            access_expires=config.get("ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
            refresh_expires=config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=7)),
            algorithm=str(config.get("JWT_ALGORITHM", "HS256")),
        )


class JWTTokenService(TokenProvider):
    """
    Issue and verify signed tokens with two independent secrets.

    The claim layout (``sub``, ``type``, ``jti``, ``fresh``) matches what
    Flask-JWT-Extended expects, so request guards can verify the same tokens.
    """

    def __init__(self, settings: TokenSettings) -> None:
        self.settings = settings

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JWTTokenService:
        return cls(TokenSettings.from_config(config))

    @property
    def access_secret(self) -> str:
        return self.settings.access_secret

    @property
    def refresh_secret(self) -> str:
        return self.settings.refresh_secret

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def _issue(self, user_id: str, token_type: str, secret: str, lifetime: timedelta) -> str:
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "type": token_type,
            # Two tokens minted in the same second must still differ
            "jti": uuid4().hex,
            "fresh": False,
            "iat": now,
            "nbf": now,
            "exp": now + lifetime,
        }
        return jwt.encode(claims, secret, algorithm=self.settings.algorithm)

    def issue_access_token(self, user_id: str) -> str:
        return self._issue(
            user_id, ACCESS_TOKEN_TYPE, self.settings.access_secret, self.settings.access_expires
        )

    def issue_refresh_token(self, user_id: str) -> str:
        return self._issue(
            user_id, REFRESH_TOKEN_TYPE, self.settings.refresh_secret, self.settings.refresh_expires
        )

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify(self, token: str, secret: str) -> JwtPayload:
        """
        Verify signature and time claims of ``token`` against ``secret``.

        :param token: Encoded JWT.
        :param secret: Secret the token is expected to be signed with.
        :returns: Typed payload with the raw token attached.
        :raises TokenExpiredError: If ``exp`` lies in the past.
        :raises InvalidTokenError: On a bad signature, malformed token or
            missing claims.
        """
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.settings.algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        return JwtPayload(
            user_id=str(claims["sub"]),
            token_type=str(claims["type"]),
            jti=str(claims["jti"]),
            issued_at=datetime.fromtimestamp(int(claims["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(claims["exp"]), tz=UTC),
            token=token,
        )

    def _verify_typed(self, token: str, secret: str, expected_type: str) -> JwtPayload:
        payload = self.verify(token, secret)
        if payload.token_type != expected_type:
            raise InvalidTokenError(f"Wrong token type, expected {expected_type}")
        return payload

    def verify_access(self, token: str) -> JwtPayload:
        return self._verify_typed(token, self.settings.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> JwtPayload:
        return self._verify_typed(token, self.settings.refresh_secret, REFRESH_TOKEN_TYPE)
