"""
Repository pattern for data access.

Handles the record store operations the dashboard reads from and writes to.
"""

import logging
import sqlite3
from typing import List, Optional

from .db import DEFAULT_DB_PATH, get_connection
from .models import ImageRecord, UserRecord

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, email, display_name, role, created_at"
_IMAGE_COLUMNS = "id, user_id, url, prompt, size, quality, created_at"


class RecordStoreError(Exception):
    """Raised when the record store cannot complete a read or write."""


class RecordRepository:
    """Repository for users and generated images.

    Every call opens its own connection and closes it before returning.
    Any SQLite failure is reported as a single RecordStoreError so callers
    never see partially loaded data.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """Initialize the repository with a database path.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

    def list_users(self, limit: int = 1000) -> List[UserRecord]:
        """List registered users, newest first.

        Args:
            limit: Maximum number of users to return

        Returns:
            List of user records

        Raises:
            RecordStoreError: If the store cannot be read
        """
        if limit <= 0:
            raise ValueError("limit must be > 0")

        conn = _connect(self.db_path)
        try:
            cursor = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users "
                "ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (limit,)
            )
            return [_row_to_user(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise RecordStoreError(f"Failed to list users: {e}") from e
        finally:
            conn.close()

    def list_images(
        self,
        user_id: Optional[str] = None,
        limit: int = 1000,
        newest_first: bool = True
    ) -> List[ImageRecord]:
        """List generated images with optional owner filtering.

        Args:
            user_id: Optional filter for a single owning user
            limit: Maximum number of images to return
            newest_first: Order by creation time descending when True

        Returns:
            List of image records

        Raises:
            RecordStoreError: If the store cannot be read
        """
        if limit <= 0:
            raise ValueError("limit must be > 0")

        query = f"SELECT {_IMAGE_COLUMNS} FROM generated_images"
        params: list = []
        if user_id is not None:
            query += " WHERE user_id = ?"
            params.append(user_id)

        direction = "DESC" if newest_first else "ASC"
        query += f" ORDER BY created_at {direction}, rowid {direction} LIMIT ?"
        params.append(limit)

        conn = _connect(self.db_path)
        try:
            cursor = conn.execute(query, params)
            return [_row_to_image(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise RecordStoreError(f"Failed to list images: {e}") from e
        finally:
            conn.close()

    def count_images_for_user(self, user_id: str) -> int:
        """Count every image owned by a user."""
        conn = _connect(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM generated_images WHERE user_id = ?",
                (user_id,)
            )
            return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise RecordStoreError(f"Failed to count images: {e}") from e
        finally:
            conn.close()

    def update_user_role(self, user_id: str, role: str) -> bool:
        """Set the role of a user.

        The value is written verbatim; validating it is the caller's job.

        Returns:
            True if a user was updated, False if no such user exists

        Raises:
            RecordStoreError: If the store cannot be written
        """
        conn = _connect(self.db_path)
        try:
            cursor = conn.execute(
                "UPDATE users SET role = ? WHERE id = ?",
                (role, user_id)
            )
            conn.commit()
            updated = cursor.rowcount > 0
        except sqlite3.Error as e:
            conn.rollback()
            raise RecordStoreError(f"Failed to update role for {user_id}: {e}") from e
        finally:
            conn.close()

        if updated:
            logger.info("Updated role of user %s to %s", user_id, role)
        else:
            logger.warning("Role update for unknown user %s", user_id)
        return updated

    def insert_user(self, user: UserRecord) -> None:
        """Insert a single user record."""
        conn = _connect(self.db_path)
        try:
            conn.execute(
                f"INSERT INTO users ({_USER_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                (user.id, user.email, user.display_name, user.role, user.created_at)
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RecordStoreError(f"Failed to insert user {user.id}: {e}") from e
        finally:
            conn.close()

    def insert_image(self, image: ImageRecord) -> None:
        """Insert a single generated-image record.

        Image records are never updated after insertion.
        """
        conn = _connect(self.db_path)
        try:
            conn.execute(
                f"INSERT INTO generated_images ({_IMAGE_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    image.id,
                    image.user_id,
                    image.url,
                    image.prompt,
                    image.size,
                    image.quality,
                    image.created_at
                )
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RecordStoreError(f"Failed to insert image {image.id}: {e}") from e
        finally:
            conn.close()
        logger.info("Stored image %s for user %s", image.id, image.user_id)


def _connect(db_path: str) -> sqlite3.Connection:
    try:
        return get_connection(db_path)
    except sqlite3.Error as e:
        raise RecordStoreError(f"Cannot open record store {db_path}: {e}") from e


def _row_to_user(row: sqlite3.Row) -> UserRecord:
    return UserRecord(
        id=row["id"],
        email=row["email"],
        display_name=row["display_name"],
        role=row["role"] or "user",
        created_at=row["created_at"]
    )


def _row_to_image(row: sqlite3.Row) -> ImageRecord:
    return ImageRecord(
        id=row["id"],
        user_id=row["user_id"],
        url=row["url"],
        prompt=row["prompt"],
        size=row["size"],
        quality=row["quality"],
        created_at=row["created_at"]
    )


# Global repository instance
_default_repository: Optional[RecordRepository] = None


def get_repository(db_path: str = DEFAULT_DB_PATH) -> RecordRepository:
    """Get a repository instance.

    The instance is reused while the database path stays the same.

    Args:
        db_path: Path to SQLite database file

    Returns:
        An instance of RecordRepository
    """
    global _default_repository
    if _default_repository is None or _default_repository.db_path != db_path:
        _default_repository = RecordRepository(db_path)
    return _default_repository


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the users and generated_images tables if they don't exist.

    Timestamps are stored as text exactly as supplied.

    Args:
        db_path: Path to SQLite database file
    """
    conn = _connect(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                email TEXT NOT NULL,
                display_name TEXT,
                role TEXT NOT NULL DEFAULT 'user',
                created_at TEXT
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS generated_images (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                url TEXT NOT NULL,
                prompt TEXT NOT NULL,
                size TEXT NOT NULL,
                quality TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_generated_images_user "
            "ON generated_images (user_id, created_at)"
        )
        conn.commit()
    except sqlite3.Error as e:
        raise RecordStoreError(f"Failed to initialize schema: {e}") from e
    finally:
        conn.close()
