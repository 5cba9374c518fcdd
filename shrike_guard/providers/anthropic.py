"""ShrikeAnthropic — Anthropic messages with pre-flight scanning.

Wraps an ``anthropic.AsyncAnthropic`` (or compatible) client::

    from anthropic import AsyncAnthropic
    from shrike_guard import ShrikeAnthropic

    client = ShrikeAnthropic(AsyncAnthropic(api_key="sk-ant-..."), shrike_api_key="shrike-...")
    message = await client.messages.create(
        model="claude-sonnet-4-5",
        max_tokens=1024,
        messages=[{"role": "user", "content": "Hello!"}],
    )

    async with client.messages.stream(model=..., max_tokens=..., messages=...) as stream:
        async for text in stream.text_stream:
            ...

Parameters are forwarded exactly as given, including ``stream=True``.
"""

from __future__ import annotations

from typing import Any, Optional

from shrike_guard.interception.extract import extract_message_blocks
from shrike_guard.providers.base import GuardedClient


class ShrikeAnthropic(GuardedClient):
    """Drop-in replacement for ``AsyncAnthropic`` messages with Shrike protection."""

    provider_name = "anthropic"

    def __init__(self, client: Any, **options: Any) -> None:
        super().__init__(**options)
        self._anthropic = client
        self.messages = MessagesNamespace(self)

    @property
    def anthropic(self) -> Any:
        """The wrapped provider client."""
        return self._anthropic


class MessagesNamespace:
    """``client.messages``"""

    def __init__(self, client: ShrikeAnthropic) -> None:
        self._client = client

    async def create(self, **params: Any) -> Any:
        """Create a message after scanning the user turns.

        Raises:
            ShrikeBlockedError: The user turns were judged unsafe.
            ShrikeScanError:    The scan failed and fail_mode is 'closed'.
        """
        operation = "messages.create"
        if params.get("stream"):
            operation += "[stream]"
        return await self._client._interceptor.run(
            operation,
            params,
            extract_message_blocks(params.get("messages")),
            lambda: self._client.anthropic.messages.create(**params),
        )

    def stream(self, **params: Any) -> "GuardedMessageStream":
        """Streaming helper; the scan runs when the context is entered."""
        return GuardedMessageStream(self._client, params)


class GuardedMessageStream:
    """Async context manager around the provider's ``messages.stream(...)`` manager.

    ``__aenter__`` scans first. The provider's stream is opened only for a safe
    verdict; a blocked or failed scan raises before any provider connection exists.
    """

    def __init__(self, client: ShrikeAnthropic, params: dict[str, Any]) -> None:
        self._client = client
        self._params = params
        self._manager: Optional[Any] = None

    async def __aenter__(self) -> Any:
        interceptor = self._client._interceptor
        ctx = interceptor.begin(
            "messages.stream",
            self._params,
            extract_message_blocks(self._params.get("messages")),
        )
        await interceptor.check(ctx)
        self._manager = self._client.anthropic.messages.stream(**self._params)
        return await self._manager.__aenter__()

    async def __aexit__(self, *exc_info: Any) -> Any:
        if self._manager is None:
            return None
        return await self._manager.__aexit__(*exc_info)
