"""Common base for the provider wrappers.

A wrapper is built once by the caller around an ALREADY-CONSTRUCTED async
provider client (``openai.AsyncOpenAI``, ``anthropic.AsyncAnthropic``,
``google.generativeai``). The provider SDK is never imported here; any object
with the same methods works, which is also how the tests substitute fakes.

Configuration is resolved once in ``__init__`` (explicit arguments →
SHRIKE_* env vars → config file → defaults) and is immutable afterwards.
Misconfiguration raises ShrikeConfigError here, never on the first call.
"""

from __future__ import annotations

from typing import Any, Optional, Union

import httpx

from shrike_guard.config import FailMode, GuardConfig, load_config
from shrike_guard.errors import ShrikeConfigError
from shrike_guard.interception.interceptor import Interceptor
from shrike_guard.models.verdict import ScanVerdict
from shrike_guard.scanner.transport import ScanClient


class GuardedClient:
    """Owns the ScanClient and Interceptor shared by one wrapper's entry points.

    Args:
        shrike_api_key:  Shrike API key (else SHRIKE_API_KEY / config file).
        shrike_endpoint: Scan service base URL.
        fail_mode:       ``"open"`` / ``"closed"`` or a FailMode.
        scan_timeout_ms: Upper bound for one scan round trip.
        config:          A ready GuardConfig; when given, the four options above must be omitted.
        http_client:     httpx.AsyncClient for scan traffic (caller keeps ownership).
    """

    provider_name: str = "provider"

    def __init__(
        self,
        *,
        shrike_api_key: Optional[str] = None,
        shrike_endpoint: Optional[str] = None,
        fail_mode: Optional[Union[FailMode, str]] = None,
        scan_timeout_ms: Optional[int] = None,
        config: Optional[GuardConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if config is None:
            config = load_config(
                api_key=shrike_api_key,
                endpoint=shrike_endpoint,
                fail_mode=fail_mode,
                scan_timeout_ms=scan_timeout_ms,
            )
        elif any(v is not None for v in (shrike_api_key, shrike_endpoint, fail_mode, scan_timeout_ms)):
            raise ShrikeConfigError("Pass either config= or individual Shrike options, not both.")

        self._config = config
        self._scan_client = ScanClient(config, http_client=http_client)
        self._interceptor = Interceptor(self._scan_client, self.provider_name)

    @property
    def config(self) -> GuardConfig:
        return self._config

    @property
    def fail_mode(self) -> FailMode:
        return self._config.fail_mode

    @property
    def scan_client(self) -> ScanClient:
        return self._scan_client

    async def scan_sql(
        self,
        query: str,
        database: Optional[str] = None,
        allow_destructive: bool = False,
    ) -> ScanVerdict:
        """Scan a SQL query for injection attacks and dangerous operations."""
        return await self._scan_client.scan_sql(query, database, allow_destructive)

    async def scan_file(self, path: str, content: Optional[str] = None) -> ScanVerdict:
        """Scan a file path (and optionally its content) for security risks."""
        return await self._scan_client.scan_file(path, content)

    async def aclose(self) -> None:
        """Close scan connections. The wrapped provider client belongs to the caller."""
        await self._scan_client.aclose()

    async def __aenter__(self) -> Any:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self._config!r})"
