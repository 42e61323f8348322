# gallery/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from gallery.models.user import User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for signup.

    :param username: Desired login handle (trimmed, unique).
    :type username: str
    :param name: Display name.
    :type name: str
    :param password: Raw password (hashed before storage).
    :type password: str
    """

    username: str
    name: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Login handle.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    username: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Access and refresh tokens issued together.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public projection of a user; never carries hashes."""

    id: str
    name: str
    username: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> UserPublicOut:
        return cls(
            id=user.id,
            name=user.name,
            username=user.username,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class AuthedUserOut:
    """
    Result of signup, login and refresh.

    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT (its hash is the stored one).
    :param user: Public user projection.
    """

    access_token: str
    refresh_token: str
    user: UserPublicOut
