#  Agent Dashboard - Rate Limiter
#
#  Shared slowapi limiter. Authenticated callers are bucketed by their
#  bearer token so users behind one proxy don't share a budget; anonymous
#  requests fall back to the client address.
#
#  Depends on: config.py
#  Used by:    app.py, routes/chat.py

import hashlib

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from dashboard.config import CHAT_RATE_LIMIT, DEFAULT_RATE_LIMIT

# Per-caller budget for the chat turn, which proxies to a paid model
chat_limit = CHAT_RATE_LIMIT


def caller_key(request: Request) -> str:
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token:
        # Never keep the raw token in limiter storage
        return "tok:" + hashlib.sha256(token.encode()).hexdigest()[:32]
    return "ip:" + get_remote_address(request)


limiter = Limiter(key_func=caller_key, default_limits=[DEFAULT_RATE_LIMIT])
