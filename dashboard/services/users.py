#  Agent Dashboard - User Service
#
#  Insert-or-update of user records keyed by external identity (open_id),
#  plus single-user lookups.
#
#  Depends on: dashboard/db/connection.py, dashboard/config.py, models/schemas.py
#  Used by:    container.py, middleware/auth.py

import logging
import time

from dashboard.config import OWNER_OPEN_ID
from dashboard.db.connection import Database
from dashboard.exceptions import InvalidInputError
from dashboard.models.enums import UserRole
from dashboard.models.schemas import UserUpsert
from dashboard.services.rows import row_to_dict

logger = logging.getLogger("dashboard.users")

# Nullable profile fields copied verbatim when present in the patch
_TEXT_FIELDS = ("name", "email", "login_method")


class UserService:
    """Reads and upserts rows in the users table."""

    def __init__(self, db: Database, owner_open_id: str = OWNER_OPEN_ID):
        self._db = db
        self._owner_open_id = owner_open_id

    async def upsert_user(self, user: UserUpsert) -> None:
        """Insert the user if absent, otherwise apply the patch.

        Field rules:
          name/email/login_method: written only when set (explicit None clears).
          role: written when set; when unset and open_id is the owner
              identity, forced to admin. Otherwise untouched on update and
              the column default ("user") on insert.
          last_signed_in: defaults to now on insert and update, so every
              successful call advances it.
        """
        if not user.open_id:
            raise InvalidInputError("User open_id is required for upsert")

        patch = user.model_dump(exclude_unset=True, exclude={"open_id"})
        now = time.time()

        values: dict = {"open_id": user.open_id}
        update_set: dict = {}

        for field in _TEXT_FIELDS:
            if field in patch:
                values[field] = patch[field]
                update_set[field] = patch[field]

        role = patch.get("role")
        if role is not None:
            values["role"] = update_set["role"] = UserRole(role).value
        elif user.open_id == self._owner_open_id:
            values["role"] = update_set["role"] = UserRole.ADMIN.value

        signed_in = patch.get("last_signed_in") or now
        values["last_signed_in"] = update_set["last_signed_in"] = signed_in

        values["created_at"] = now
        values["updated_at"] = update_set["updated_at"] = now

        columns = list(values)
        placeholders = ", ".join("?" * len(columns))
        assignments = ", ".join(f"{col} = excluded.{col}" for col in update_set)

        try:
            await self._db.execute_write(
                f"INSERT INTO users ({', '.join(columns)}) VALUES ({placeholders}) "
                f"ON CONFLICT(open_id) DO UPDATE SET {assignments}",
                [values[c] for c in columns],
            )
        except Exception as e:
            logger.error("Failed to upsert user %s: %s", user.open_id, e)
            raise

    async def get_user_by_open_id(self, open_id: str) -> dict | None:
        """Fetch user by external identity. Returns dict or None."""
        row = await self._db.fetchone(
            "SELECT * FROM users WHERE open_id = ? LIMIT 1", (open_id,)
        )
        return row_to_dict(row) if row else None

    async def get_user(self, user_id: int) -> dict | None:
        """Fetch user by surrogate ID. Returns dict or None."""
        row = await self._db.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return row_to_dict(row) if row else None
