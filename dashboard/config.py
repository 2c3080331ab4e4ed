#  Agent Dashboard - Configuration
#
#  Settings come from a JSON file (config.json beside the project, or the
#  file named by DASHBOARD_CONFIG) with a handful of environment overrides
#  for secrets and deployment paths. Values are read once at import time
#  into module constants; validate_config() runs the startup checks.
#
#  Depends on: config.json
#  Used by:    all dashboard modules

import json
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = Path(os.environ.get("DASHBOARD_CONFIG") or PROJECT_ROOT / "config.json")
DATA_DIR = PROJECT_ROOT / "data"


def _read_config(path: Path) -> dict:
    """Parse the config file. A missing file is an error; callers decide if it is optional."""
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}. "
            "Copy config.example.json to config.json or set DASHBOARD_CONFIG."
        )
    with open(path) as f:
        return json.load(f)


# Running without a config file is allowed; every setting has a default
_config: dict = _read_config(CONFIG_PATH) if CONFIG_PATH.exists() else {}


def cfg(path: str, default=None):
    """Look up a dotted key, e.g. cfg("llm.provider"). Missing keys give `default`."""
    val = _config
    for key in path.split("."):
        if not isinstance(val, dict) or key not in val:
            return default
        val = val[key]
    return val


def env_or_cfg(env_var: str, path: str, default=None):
    """Non-empty environment variable wins over the config file."""
    return os.environ.get(env_var) or cfg(path, default)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

# Server
HOST = cfg("server.host", "0.0.0.0")
PORT = cfg("server.port", 3000)
CORS_ORIGINS = cfg("server.cors_origins", [
    "http://localhost:5173",
    f"http://localhost:{PORT}",
    "http://127.0.0.1:5173",
    f"http://127.0.0.1:{PORT}",
])
LOG_LEVEL = cfg("server.log_level", "INFO")
LOG_FORMAT = cfg("server.log_format", "json")
RELOAD = cfg("server.reload", False)
DEFAULT_RATE_LIMIT = cfg("server.rate_limit", "60/minute")

# Database
DB_PATH = Path(env_or_cfg("DATABASE_PATH", "database.path", str(DATA_DIR / "dashboard.db")))

# Auth
AUTH_SECRET_KEY = env_or_cfg("JWT_SECRET", "auth.secret_key", "")
AUTH_ALGORITHM = cfg("auth.algorithm", "HS256")
OWNER_OPEN_ID = env_or_cfg("OWNER_OPEN_ID", "auth.owner_open_id", "")

# Language model
LLM_PROVIDER = cfg("llm.provider", "openai")
LLM_API_URL = cfg("llm.api_url", "https://api.openai.com/v1/chat/completions")
LLM_API_KEY = env_or_cfg("LLM_API_KEY", "llm.api_key", "")
LLM_TIMEOUT = cfg("llm.timeout", 120.0)
LLM_MAX_TOKENS = cfg("llm.max_tokens", 4096)

# Chat
CHAT_RATE_LIMIT = cfg("chat.rate_limit", "20/minute")
CHAT_MODELS: list[dict] | None = cfg("chat.models")

# Statistics
TASK_STATS_ROW_CAP = cfg("stats.task_row_cap", 1000)

_LLM_PROVIDERS = ("openai", "anthropic")


# ---------------------------------------------------------------------------
# Startup validation
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised by validate_config() when the server must not start."""


def _is_positive_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_config():
    """Check the settings the server cannot run without.

    Every fatal problem is collected and reported in one ConfigError;
    questionable but workable settings are logged as warnings. Called from
    the app lifespan and run.py, never at import time.
    """
    import logging
    _logger = logging.getLogger("dashboard.config")
    problems: list[str] = []

    if not AUTH_SECRET_KEY or len(AUTH_SECRET_KEY) < 32:
        problems.append(
            "auth.secret_key (or JWT_SECRET) is missing or too short "
            "(must be at least 32 characters)"
        )

    if isinstance(PORT, bool) or not isinstance(PORT, int) or not 1 <= PORT <= 65535:
        problems.append(f"server.port must be 1-65535, got {PORT!r}")

    if LLM_PROVIDER not in _LLM_PROVIDERS:
        problems.append(
            f"llm.provider must be one of {', '.join(_LLM_PROVIDERS)}, got {LLM_PROVIDER!r}"
        )

    if not _is_positive_number(LLM_TIMEOUT):
        problems.append(f"llm.timeout must be a number > 0, got {LLM_TIMEOUT!r}")

    for origin in CORS_ORIGINS:
        if origin == "*":
            _logger.warning("CORS origin '*' allows all origins; not recommended for production")
        elif not isinstance(origin, str) or not origin.startswith(("http://", "https://")):
            problems.append(f"CORS origin must start with http:// or https://, got {origin!r}")

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    if not LLM_API_KEY:
        _logger.warning("LLM_API_KEY is not set. Chat replies will fail until it is configured.")
    if not OWNER_OPEN_ID:
        _logger.warning("auth.owner_open_id is not set; no user will be promoted to admin by default")
