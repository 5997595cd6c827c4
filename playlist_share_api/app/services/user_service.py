"""
Business logic for user accounts.

Signup, login and the admin ban toggle.  Input shapes (lengths and
charsets) are checked by the request schemas; this module only deals
with what needs the database: uniqueness, password verification and
the ban flag.
"""

import logging
import sqlite3

from ..core.config import settings
from ..core.db import format_timestamp, transaction, utcnow
from ..core.errors import ConflictError, NotFoundError, UnauthorizedError
from ..core.security import hash_password, verify_password
from ..schemas.user import UserRead
from . import entity_store
from .entity_store import UserRecord

logger = logging.getLogger(__name__)


class UserService:

    @classmethod
    async def signup(cls, conn: sqlite3.Connection, account: str, password: str, display_name: str) -> UserRead:
        """Create a user; a taken account raises ``ConflictError``."""
        if account == settings.anonymous_account:
            logger.info("Signup rejected, %s is the anonymous account", account)
            raise ConflictError("account already exist")
        now = format_timestamp(utcnow())
        hashed = hash_password(password)
        try:
            with transaction(conn, "IMMEDIATE"):
                if entity_store.get_user_by_account(conn, account) is not None:
                    raise ConflictError("account already exist")
                conn.execute(
                    """
                    INSERT INTO users (account, display_name, password_hash, is_ban, created_at, last_logged_in_at)
                    VALUES (?, ?, ?, 0, ?, ?)
                    """,
                    (account, display_name, hashed, now, now),
                )
        except ConflictError:
            logger.info("Signup rejected, account %s exists", account)
            raise
        logger.info("Registered user %s", account)
        return cls._to_read(entity_store.get_user_by_account(conn, account))

    @classmethod
    async def authenticate(cls, conn: sqlite3.Connection, account: str, password: str) -> UserRead:
        """Verify credentials and record the login time.

        Unknown accounts, banned accounts and wrong passwords all raise
        ``UnauthorizedError``.
        """
        user = entity_store.get_user_by_account(conn, account)
        if user is None or user.is_ban:
            raise UnauthorizedError("failed to login (no such user)")
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError("failed to login (wrong password)")
        with transaction(conn, "IMMEDIATE"):
            conn.execute(
                "UPDATE users SET last_logged_in_at = ? WHERE account = ?",
                (format_timestamp(utcnow()), account),
            )
        return cls._to_read(user)

    @classmethod
    async def set_ban(cls, conn: sqlite3.Connection, account: str, is_ban: bool) -> UserRead:
        """Set the ban flag of ``account`` and return the stored user."""
        with transaction(conn, "IMMEDIATE"):
            conn.execute("UPDATE users SET is_ban = ? WHERE account = ?", (int(is_ban), account))
            user = entity_store.get_user_by_account(conn, account)
            if user is None:
                raise NotFoundError("user not found")
        logger.info("User %s ban flag set to %s", account, is_ban)
        return cls._to_read(user)

    @staticmethod
    def _to_read(user: UserRecord) -> UserRead:
        return UserRead(
            user_account=user.account,
            display_name=user.display_name,
            is_ban=user.is_ban,
            created_at=user.created_at,
        )
