#  Agent Dashboard - Chat Model Catalog
#
#  Static list of models offered in the chat picker. Overridable with the
#  "chat.models" config list (same keys as the entries below).
#
#  Depends on: config.py, models/schemas.py
#  Used by:    routes/chat.py

from dashboard.config import CHAT_MODELS
from dashboard.models.schemas import ChatModelOut

_DEFAULT_MODELS: list[dict] = [
    {
        "id": "kimi-k2",
        "name": "Kimi K2",
        "provider": "Moonshot",
        "context_length": 256000,
        "cost_per_1k_tokens": 0.0008,
        "supports_vision": False,
    },
    {
        "id": "deepseek-coder",
        "name": "DeepSeek Coder",
        "provider": "DeepSeek",
        "context_length": 128000,
        "cost_per_1k_tokens": 0.0005,
        "supports_vision": False,
    },
    {
        "id": "qwen-turbo",
        "name": "Qwen Turbo",
        "provider": "Alibaba",
        "context_length": 32000,
        "cost_per_1k_tokens": 0.0003,
        "supports_vision": True,
    },
    {
        "id": "minimax-m2",
        "name": "MiniMax M2",
        "provider": "MiniMax",
        "context_length": 200000,
        "cost_per_1k_tokens": 0.0006,
        "supports_vision": False,
    },
    {
        "id": "gpt-4-turbo",
        "name": "GPT-4 Turbo",
        "provider": "OpenAI",
        "context_length": 128000,
        "cost_per_1k_tokens": 0.001,
        "supports_vision": True,
    },
]


def available_chat_models() -> list[ChatModelOut]:
    entries = CHAT_MODELS if CHAT_MODELS else _DEFAULT_MODELS
    return [ChatModelOut(**e) for e in entries]
