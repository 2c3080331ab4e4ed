#  Agent Dashboard - Logging Configuration
#
#  Structured logging for the "dashboard" logger tree, JSON or text.
#  request_id and user_id ride on context variables set by the request
#  middleware and the auth dependency; per-call fields (session_id, model,
#  ...) are passed with extra= and copied into the JSON entry.
#
#  Depends on: (none)
#  Used by:    run.py, app.py, middleware/auth.py, services/chat.py

import contextvars
import json
import logging
import sys
import time

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
user_id_var: contextvars.ContextVar[int | None] = contextvars.ContextVar("user_id", default=None)

# Record attributes lifted into JSON output when a caller passes them via extra=
EXTRA_FIELDS = ("session_id", "model", "tokens_used", "duration_ms")

_TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s rid=%(request_id)s: %(message)s"


def set_request_id(rid: str | None):
    request_id_var.set(rid)


def set_user_id(uid: int | None):
    user_id_var.set(uid)


class ContextFilter(logging.Filter):
    """Stamp request_id/user_id onto every record so text formats can use them."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get(None) or "-"
        record.user_id = user_id_var.get(None)
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; context and extra fields only when set."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = request_id_var.get(None)
        if rid:
            entry["request_id"] = rid
        uid = user_id_var.get(None)
        if uid is not None:
            entry["user_id"] = uid

        for field in EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install a single stdout handler on the "dashboard" logger.

    Repeated calls only adjust the level. Noisy libraries are capped at
    WARNING.
    """
    root = logging.getLogger("dashboard")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.addFilter(ContextFilter())
        if fmt == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(handler)
        # Our handler is the only sink; avoid duplicates via the root logger
        root.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
