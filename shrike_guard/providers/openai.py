"""ShrikeOpenAI — OpenAI chat completions with pre-flight scanning.

Wraps an ``openai.AsyncOpenAI`` (or compatible) client::

    from openai import AsyncOpenAI
    from shrike_guard import ShrikeOpenAI

    client = ShrikeOpenAI(AsyncOpenAI(api_key="sk-..."), shrike_api_key="shrike-...")
    response = await client.chat.completions.create(
        model="gpt-4o",
        messages=[{"role": "user", "content": "Hello!"}],
    )

``create(stream=True)`` is scanned identically and returns the provider's
native async stream unchanged.
"""

from __future__ import annotations

from typing import Any

from shrike_guard.interception.extract import extract_chat_messages
from shrike_guard.providers.base import GuardedClient


class ShrikeOpenAI(GuardedClient):
    """Drop-in replacement for ``AsyncOpenAI`` chat completions with Shrike protection."""

    provider_name = "openai"

    def __init__(self, client: Any, **options: Any) -> None:
        super().__init__(**options)
        self._openai = client
        self.chat = ChatNamespace(self)

    @property
    def openai(self) -> Any:
        """The wrapped provider client."""
        return self._openai


class ChatNamespace:
    """``client.chat``"""

    def __init__(self, client: ShrikeOpenAI) -> None:
        self.completions = CompletionsNamespace(client)


class CompletionsNamespace:
    """``client.chat.completions``"""

    def __init__(self, client: ShrikeOpenAI) -> None:
        self._client = client

    async def create(self, **params: Any) -> Any:
        """Create a chat completion after scanning the user messages.

        Raises:
            ShrikeBlockedError: The user messages were judged unsafe.
            ShrikeScanError:    The scan failed and fail_mode is 'closed'.
        """
        operation = "chat.completions.create"
        if params.get("stream"):
            operation += "[stream]"
        return await self._client._interceptor.run(
            operation,
            params,
            extract_chat_messages(params.get("messages")),
            lambda: self._client.openai.chat.completions.create(**params),
        )
