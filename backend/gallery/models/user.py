"""User model: the credential store's single aggregate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from gallery.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .image import Image


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity owning a set of images.

    Fields
    ------
    name : str
        Display name.
    username : str
        Login handle, unique across all users. Stored trimmed.
    password_hash : str
        Salted one-way hash (write-only setter via ``password``).
    refresh_token_hash : str | None
        Hash of the single currently valid refresh token (write-only setter via
        ``refresh_token``). ``None`` until the first login/signup completes.
    created_at : datetime
        Creation timestamp (from mixin).
    updated_at : datetime
        Update timestamp (from mixin).
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    images: Mapped[list[Image]] = relationship(
        back_populates="user",
        passive_deletes=True,
        order_by="Image.uploaded_at",
    )

    __table_args__ = (UniqueConstraint("username", name="uq_users_username"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValueError: If ``raw`` is empty or not a string.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Refresh token API --------------------
    @property
    def refresh_token(self) -> Any:  # pragma: no cover - explicit write-only contract
        raise AttributeError("Refresh token is write-only.")

    @refresh_token.setter
    def refresh_token(self, raw: str | None) -> None:
        """Store a hash of ``raw``; ``None`` clears the stored token."""
        self.refresh_token_hash = generate_password_hash(raw) if raw else None

    def verify_refresh_token(self, raw: str) -> bool:
        """Return ``True`` if ``raw`` is the refresh token last stored."""
        if not self.refresh_token_hash:
            return False
        return bool(check_password_hash(self.refresh_token_hash, raw))

    # -------------------- Validators --------------------
    @validates("username")
    def _normalize_username(self, key: str, value: str) -> str:
        """
        Normalize and validate username.

        :param key: Field name (``username``).
        :type key: str
        :param value: Username to normalize.
        :type value: str
        :returns: Trimmed username.
        :rtype: str
        :raises ValueError: If username is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Username is required.")
        return value.strip()

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()
