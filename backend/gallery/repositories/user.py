"""User repository for persistence and credential lookups."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from gallery.models.user import User
from gallery.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never issues tokens; it only stores and looks up credentials.
    """

    model = User

    def _filterable_fields(self):
        return {"username": User.username}

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by exact (trimmed) username.

        :param username: Login handle.
        :type username: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.username == username.strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_for_update(self, user_id: str) -> User | None:
        """Fetch a user and lock its row until the transaction ends.

        Concurrent refresh-token rotations for one user run one after the
        other. Dialects without row locks (SQLite) drop the clause.
        """
        stmt = select(User).where(User.id == user_id).with_for_update()
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_username(self, username: str) -> bool:
        return self.exists(username=username.strip())

    def update_refresh_hash(self, user: User, refresh_token: str | None) -> User:
        """Replace the stored refresh-token hash and flush.

        :param user: Persistent user.
        :type user: User
        :param refresh_token: Raw token to hash, or ``None`` to clear it.
        :type refresh_token: str | None
        :returns: The same user.
        :rtype: User
        """
        user.refresh_token = refresh_token  # setter hashes
        self.flush()
        return user
