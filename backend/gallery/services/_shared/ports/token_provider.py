from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True, slots=True)
class JwtPayload:
    """
    Verified token claims plus the raw token they were decoded from.

    :ivar user_id: Subject (``sub``) of the token.
    :ivar token_type: ``"access"`` or ``"refresh"``.
    :ivar jti: Unique token identifier.
    :ivar issued_at: ``iat`` claim (UTC).
    :ivar expires_at: ``exp`` claim (UTC).
    :ivar token: Raw encoded token, attached after verification.
    """

    user_id: str
    token_type: str
    jti: str
    issued_at: datetime
    expires_at: datetime
    token: str


class TokenProvider(Protocol):
    """Port for issuing and verifying signed access/refresh tokens."""

    @property
    def access_secret(self) -> str: ...

    @property
    def refresh_secret(self) -> str: ...

    def issue_access_token(self, user_id: str) -> str: ...

    def issue_refresh_token(self, user_id: str) -> str: ...

    def verify(self, token: str, secret: str) -> JwtPayload: ...

    def verify_access(self, token: str) -> JwtPayload: ...

    def verify_refresh(self, token: str) -> JwtPayload: ...
