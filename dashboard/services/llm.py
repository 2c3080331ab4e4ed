#  Agent Dashboard - Language Model Client
#
#  Single synchronous (awaited) chat completion call against the configured
#  provider: an OpenAI-compatible HTTP endpoint via the shared httpx client,
#  or the Anthropic Messages API via the anthropic SDK.
#  No retries; transport errors propagate to the caller.
#
#  Depends on: config.py
#  Used by:    container.py, services/chat.py

import logging

import anthropic
import httpx

from dashboard.config import (
    LLM_API_KEY,
    LLM_API_URL,
    LLM_MAX_TOKENS,
    LLM_PROVIDER,
    LLM_TIMEOUT,
)

logger = logging.getLogger("dashboard.llm")


class LLMClient:
    """Sends an ordered message list and returns the reply text."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        provider: str = LLM_PROVIDER,
        api_url: str = LLM_API_URL,
        api_key: str = LLM_API_KEY,
        timeout: float = LLM_TIMEOUT,
        max_tokens: int = LLM_MAX_TOKENS,
    ):
        self._http = http_client
        self._provider = provider
        self._api_url = api_url
        self._api_key = api_key
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._anthropic = None

    async def aclose(self):
        """Close the Anthropic SDK client if one was created. The httpx client is closed by its owner."""
        if self._anthropic is not None:
            await self._anthropic.close()
            self._anthropic = None

    async def invoke(self, messages: list[dict], model: str) -> str:
        """Run one completion.

        Args:
            messages: [{"role": "user"|"assistant"|"system", "content": str}, ...]
                in conversation order.
            model: Model identifier passed through to the provider.
        """
        logger.debug("LLM call: provider=%s model=%s messages=%d",
                     self._provider, model, len(messages))
        if self._provider == "anthropic":
            return await self._invoke_anthropic(messages, model)
        return await self._invoke_openai(messages, model)

    async def _invoke_openai(self, messages: list[dict], model: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        resp = await self._http.post(
            self._api_url,
            json={
                "model": model,
                "messages": messages,
                "max_tokens": self._max_tokens,
            },
            headers=headers,
            timeout=self._timeout,
        )
        resp.raise_for_status()
        data = resp.json()

        choices = data.get("choices") or []
        content = choices[0].get("message", {}).get("content") if choices else None
        return content if isinstance(content, str) else ""

    async def _invoke_anthropic(self, messages: list[dict], model: str) -> str:
        if self._anthropic is None:
            self._anthropic = anthropic.AsyncAnthropic(
                api_key=self._api_key or None, timeout=self._timeout
            )

        # The Messages API takes system prompts out-of-band
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        turns = [m for m in messages if m["role"] != "system"]

        kwargs = {
            "model": model,
            "max_tokens": self._max_tokens,
            "messages": turns,
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)

        response = await self._anthropic.messages.create(**kwargs)
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
