"""ShrikeGemini — Gemini generative models and chat sessions with pre-flight scanning.

Wraps any client exposing ``GenerativeModel(model_name, **kwargs)`` — the
``google.generativeai`` module itself qualifies::

    import google.generativeai as genai
    from shrike_guard import ShrikeGemini

    genai.configure(api_key="AIza...")
    client = ShrikeGemini(genai, shrike_api_key="shrike-...")

    model = client.GenerativeModel("gemini-1.5-flash")
    response = await model.generate_content("Hello!")

    chat = model.start_chat()
    reply = await chat.send_message("And then?")

Entry points, each scanned against the content of that call only:
  - ShrikeGenerativeModel.generate_content / generate_content_stream
  - ShrikeChatSession.send_message / send_message_stream
Chat history already sent is not re-scanned.
"""

from __future__ import annotations

from typing import Any, Protocol

from shrike_guard.interception.extract import extract_gemini_contents
from shrike_guard.interception.interceptor import Interceptor
from shrike_guard.providers.base import GuardedClient


class ChatSessionLike(Protocol):
    history: list[Any]

    async def send_message_async(self, content: Any, **kwargs: Any) -> Any: ...


class GenerativeModelLike(Protocol):
    async def generate_content_async(self, contents: Any, **kwargs: Any) -> Any: ...

    def start_chat(self, **kwargs: Any) -> ChatSessionLike: ...


class ShrikeGemini(GuardedClient):
    """Shrike-protected factory for Gemini generative models."""

    provider_name = "gemini"

    def __init__(self, client: Any, **options: Any) -> None:
        super().__init__(**options)
        self._genai = client

    @property
    def genai(self) -> Any:
        """The wrapped provider client."""
        return self._genai

    def GenerativeModel(self, model_name: str, **kwargs: Any) -> "ShrikeGenerativeModel":  # noqa: N802
        model = self._genai.GenerativeModel(model_name, **kwargs)
        return ShrikeGenerativeModel(model, self._interceptor, model_name)

    def get_generative_model(self, model: str, **kwargs: Any) -> "ShrikeGenerativeModel":
        """Alias of ``GenerativeModel`` using the JavaScript SDK's name."""
        return self.GenerativeModel(model, **kwargs)


class ShrikeGenerativeModel:
    """Wrapped GenerativeModel."""

    def __init__(self, model: GenerativeModelLike, interceptor: Interceptor, model_name: str) -> None:
        self._model = model
        self._interceptor = interceptor
        self._model_name = model_name

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def model(self) -> GenerativeModelLike:
        return self._model

    async def generate_content(self, contents: Any, **kwargs: Any) -> Any:
        return await self._interceptor.run(
            "generate_content",
            contents,
            extract_gemini_contents(contents),
            lambda: self._model.generate_content_async(contents, **kwargs),
        )

    async def generate_content_stream(self, contents: Any, **kwargs: Any) -> Any:
        """Scan once before streaming starts; returns the provider's streaming response."""
        return await self._interceptor.run(
            "generate_content[stream]",
            contents,
            extract_gemini_contents(contents),
            lambda: self._model.generate_content_async(contents, stream=True, **kwargs),
        )

    def start_chat(self, **kwargs: Any) -> "ShrikeChatSession":
        return ShrikeChatSession(self._model.start_chat(**kwargs), self._interceptor)


class ShrikeChatSession:
    """Wrapped multi-turn chat session."""

    def __init__(self, chat: ChatSessionLike, interceptor: Interceptor) -> None:
        self._chat = chat
        self._interceptor = interceptor

    async def send_message(self, content: Any, **kwargs: Any) -> Any:
        return await self._interceptor.run(
            "chat.send_message",
            content,
            extract_gemini_contents(content),
            lambda: self._chat.send_message_async(content, **kwargs),
        )

    async def send_message_stream(self, content: Any, **kwargs: Any) -> Any:
        return await self._interceptor.run(
            "chat.send_message[stream]",
            content,
            extract_gemini_contents(content),
            lambda: self._chat.send_message_async(content, stream=True, **kwargs),
        )

    @property
    def history(self) -> list[Any]:
        return list(getattr(self._chat, "history", None) or [])
