#  Agent Dashboard - Chat Service
#
#  Chat sessions, their message log, and the chat turn: persist the user
#  message, send the whole conversation to the language model, persist the
#  reply.
#
#  Depends on: dashboard/db/connection.py, services/llm.py
#  Used by:    container.py, routes/chat.py

import logging
import math
import time
from datetime import date

from dashboard.db.connection import Database
from dashboard.models.enums import MessageRole
from dashboard.services.llm import LLMClient
from dashboard.services.rows import row_to_dict, rows_to_dicts

logger = logging.getLogger("dashboard.chat")


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class ChatService:
    def __init__(self, db: Database, llm: LLMClient):
        self._db = db
        self._llm = llm

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self, user_id: int, model_used: str, title: str | None = None) -> int:
        """Open a session for the user. Returns the new session id."""
        if not title:
            title = f"Chat {date.today().isoformat()}"
        now = time.time()
        cursor = await self._db.execute_write(
            "INSERT INTO chat_sessions (user_id, title, model_used, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (user_id, title, model_used, now, now),
        )
        logger.info("Chat session %d created for user %d", cursor.lastrowid, user_id)
        return cursor.lastrowid

    async def get_session(self, session_id: int) -> dict | None:
        row = await self._db.fetchone("SELECT * FROM chat_sessions WHERE id = ?", (session_id,))
        return row_to_dict(row) if row else None

    async def list_sessions(self, user_id: int) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT * FROM chat_sessions WHERE user_id = ? ORDER BY created_at DESC, id DESC",
            (user_id,),
        )
        return rows_to_dicts(rows)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def add_message(
        self,
        session_id: int,
        role: MessageRole | str,
        content: str,
        *,
        model: str | None = None,
        tokens_used: int | None = None,
        cost: float | None = None,
    ) -> int:
        """Append a message to the session log. Returns the new message id.

        model/tokens_used/cost are written only when given; otherwise the
        columns keep their NULL default.
        """
        values: dict = {
            "session_id": session_id,
            "role": MessageRole(role).value,
            "content": content,
            "created_at": time.time(),
        }
        if model is not None:
            values["model"] = model
        if tokens_used is not None:
            values["tokens_used"] = tokens_used
        if cost is not None:
            values["cost"] = cost

        columns = list(values)
        cursor = await self._db.execute_write(
            f"INSERT INTO chat_messages ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' * len(columns))})",
            [values[c] for c in columns],
        )
        return cursor.lastrowid

    async def list_messages(self, session_id: int) -> list[dict]:
        rows = await self._db.fetchall(
            "SELECT * FROM chat_messages WHERE session_id = ? ORDER BY created_at ASC, id ASC",
            (session_id,),
        )
        return rows_to_dicts(rows)

    # ------------------------------------------------------------------
    # Chat turn
    # ------------------------------------------------------------------

    async def send_message(self, session_id: int, message: str, model: str) -> dict:
        """Run one chat turn and return {response, tokens_used, model}.

        The user message is committed before the model call and is not
        removed if the call fails.
        """
        user_msg_id = await self.add_message(
            session_id, MessageRole.USER, message, model=model
        )

        history = await self._db.fetchall(
            "SELECT role, content FROM chat_messages "
            "WHERE session_id = ? AND id != ? ORDER BY created_at ASC, id ASC",
            (session_id, user_msg_id),
        )
        messages = [{"role": r["role"], "content": r["content"]} for r in history]
        messages.append({"role": MessageRole.USER.value, "content": message})

        started = time.monotonic()
        reply = await self._llm.invoke(messages, model)
        duration_ms = round((time.monotonic() - started) * 1000)

        tokens_used = estimate_tokens(message) + estimate_tokens(reply)
        await self.add_message(
            session_id, MessageRole.ASSISTANT, reply, model=model, tokens_used=tokens_used
        )
        logger.info(
            "Chat turn completed",
            extra={
                "session_id": session_id,
                "model": model,
                "tokens_used": tokens_used,
                "duration_ms": duration_ms,
            },
        )

        return {"response": reply, "tokens_used": tokens_used, "model": model}
