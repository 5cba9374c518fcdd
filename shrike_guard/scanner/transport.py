"""Async HTTP client for the Shrike scan API.

Provides ``ScanClient``: the ONLY component that talks to the scan service.

Per-call pipeline (scan / scan_sql / scan_file):
  1. Client-side size guard — combined UTF-8 input > MAX_CONTENT_SIZE returns a
     local ``size_limit_exceeded`` verdict. No network call.
  2. Single POST, bounded by ``asyncio.wait_for(scan_timeout)``. The timeout
     scope belongs to exactly this call; concurrent calls never share one.
  3. 2xx → JSON → ``sanitize_scan_response()`` → ScanVerdict.
  4. Anything else is a scan failure, resolved ONCE by the fail mode:
       FailMode.OPEN   → safe pass-through verdict with a diagnostic reason
       FailMode.CLOSED → ShrikeScanError
     Failure kinds: timeout (asyncio deadline or httpx timeout, reported alike),
     transport error (DNS, refused, reset), non-2xx, undecodable body,
     malformed verdict.

No retries. No backoff. ``asyncio.CancelledError`` from the caller's own scope
is never converted by the policy — it propagates and cancels the HTTP request.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from shrike_guard.config import FailMode, GuardConfig
from shrike_guard.constants import (
    MAX_CONTENT_SIZE,
    REQUEST_ID_HEADER,
    SCAN_PATH,
    SDK_HEADER,
    SDK_NAME,
    SDK_USER_AGENT,
    SDK_VERSION_HEADER,
    SPECIALIZED_SCAN_PATH,
)
from shrike_guard.errors import MalformedVerdictError, ShrikeScanError
from shrike_guard.models.block import build_size_limit_verdict
from shrike_guard.models.verdict import ScanVerdict
from shrike_guard.scanner.sanitizer import sanitize_scan_response
from shrike_guard.utils.logger import PerformanceLogger, bind_trace_id, get_logger
from shrike_guard.utils.trace import generate_trace_id
from shrike_guard.version import __version__

logger = get_logger(__name__)

# Connection pool for one ScanClient. Scans are one request per generation call.
POOL_MAX_CONNECTIONS: int = 100
POOL_MAX_KEEPALIVE: int = 20
POOL_KEEPALIVE_EXPIRY: float = 30.0  # seconds


def get_scan_headers(api_key: str, trace_id: Optional[str] = None) -> dict[str, str]:
    """Build the headers for a scan API request.

    Args:
        api_key:  Shrike API key for the ``Authorization: Bearer`` header.
        trace_id: Request id for tracing. A fresh UUID4 is generated when omitted.

    Returns:
        Header dict. Contains no secret other than ``api_key``.
    """
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        SDK_HEADER: SDK_NAME,
        SDK_VERSION_HEADER: __version__,
        REQUEST_ID_HEADER: trace_id or generate_trace_id(),
    }


def create_http_client(timeout_s: float) -> httpx.AsyncClient:
    """Create the httpx.AsyncClient owned by a ScanClient.

    Created once per ScanClient and reused for every scan. Redirects are not
    followed: a redirected scan endpoint is a misconfiguration, not a verdict.
    """
    return httpx.AsyncClient(
        limits=httpx.Limits(
            max_connections=POOL_MAX_CONNECTIONS,
            max_keepalive_connections=POOL_MAX_KEEPALIVE,
            keepalive_expiry=POOL_KEEPALIVE_EXPIRY,
        ),
        timeout=httpx.Timeout(timeout_s),
        headers={"User-Agent": f"{SDK_USER_AGENT}/{__version__}"},
        follow_redirects=False,
    )


def content_size(*parts: Optional[str]) -> int:
    """Combined UTF-8 byte size of the given strings (None counts as empty)."""
    return sum(len(p.encode("utf-8")) for p in parts if p)


class ScanClient:
    """Async client for the Shrike scan service.

    One instance per wrapper. Configuration is read-only after construction, so
    any number of scans may be in flight concurrently without coordination.

    Usage::

        async with ScanClient(load_config(api_key="shrike-...")) as scanner:
            verdict = await scanner.scan("What is the weather today?")
    """

    def __init__(
        self,
        config: GuardConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._owns_http_client = http_client is None
        self._http = http_client if http_client is not None else create_http_client(
            config.scan_timeout_s
        )

    @property
    def config(self) -> GuardConfig:
        return self._config

    @property
    def fail_mode(self) -> FailMode:
        return self._config.fail_mode

    async def aclose(self) -> None:
        """Close the underlying connection pool (only if this client created it)."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ScanClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ─── Public scan operations ───────────────────────────────────────────────

    async def scan(
        self,
        prompt: str,
        context: Optional[str] = None,
        *,
        trace_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ScanVerdict:
        """Scan a prompt for security threats.

        Args:
            prompt:   User-authored text to scan. Callers skip empty text themselves.
            context:  Optional conversation context for better analysis.
            trace_id: Request id for the X-Shrike-Request-ID header (generated if None).
            timeout:  Seconds; overrides the configured scan timeout for this call only.

        Returns:
            Sanitized ScanVerdict (or a fail-open pass-through verdict).

        Raises:
            ShrikeScanError: The scan failed and fail_mode is 'closed'.
        """
        size = content_size(prompt, context)
        if size > MAX_CONTENT_SIZE:
            logger.info("scan_size_limit_exceeded", size_bytes=size, limit_bytes=MAX_CONTENT_SIZE)
            return build_size_limit_verdict(size, "Content")

        payload: dict[str, Any] = {"prompt": prompt}
        if context:
            payload["context"] = context
        return await self._post(
            SCAN_PATH, payload, label="Scan", trace_id=trace_id, timeout=timeout
        )

    async def scan_sql(
        self,
        query: str,
        database: Optional[str] = None,
        allow_destructive: bool = False,
        *,
        trace_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ScanVerdict:
        """Scan a SQL query for injection attacks and dangerous operations.

        ``allow_destructive=True`` lets DROP/TRUNCATE through the backend policy.
        """
        size = content_size(query)
        if size > MAX_CONTENT_SIZE:
            logger.info("scan_size_limit_exceeded", size_bytes=size, limit_bytes=MAX_CONTENT_SIZE)
            return build_size_limit_verdict(size, "SQL query")

        payload = {
            "content": query,
            "content_type": "sql",
            "context": {
                "database": database or "",
                "allow_destructive": str(allow_destructive).lower(),
            },
        }
        return await self._post(
            SPECIALIZED_SCAN_PATH, payload, label="SQL scan", trace_id=trace_id, timeout=timeout
        )

    async def scan_file(
        self,
        path: str,
        content: Optional[str] = None,
        *,
        trace_id: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> ScanVerdict:
        """Scan a file path (and optionally its content) for traversal, secrets and PII."""
        size = content_size(path, content)
        if size > MAX_CONTENT_SIZE:
            logger.info("scan_size_limit_exceeded", size_bytes=size, limit_bytes=MAX_CONTENT_SIZE)
            return build_size_limit_verdict(size, "File content")

        payload: dict[str, Any] = {
            "content": path,
            "content_type": "file_content" if content else "file_path",
        }
        if content:
            payload["context"] = {"file_content": content}
        return await self._post(
            SPECIALIZED_SCAN_PATH, payload, label="File scan", trace_id=trace_id, timeout=timeout
        )

    # ─── Transport + failure policy ───────────────────────────────────────────

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        label: str,
        trace_id: Optional[str],
        timeout: Optional[float],
    ) -> ScanVerdict:
        trace_id = trace_id or generate_trace_id()
        timeout_s = timeout if timeout is not None else self._config.scan_timeout_s
        url = f"{self._config.endpoint}{path}"

        with bind_trace_id(trace_id):
            try:
                with PerformanceLogger(f"{label} request", logger):
                    response = await asyncio.wait_for(
                        self._http.post(
                            url,
                            json=payload,
                            headers=get_scan_headers(self._config.api_key, trace_id),
                            timeout=timeout_s,
                        ),
                        timeout=timeout_s,
                    )
            except (asyncio.TimeoutError, httpx.TimeoutException):
                return self._on_failure(
                    open_reason="Scan timeout, failing open",
                    closed_message=f"{label} request timed out and fail_mode is 'closed'",
                    failure="timeout",
                    timeout_ms=round(timeout_s * 1000),
                )
            except (httpx.HTTPError, OSError) as exc:
                message = str(exc) or type(exc).__name__
                return self._on_failure(
                    open_reason=f"Scan error: {message}",
                    closed_message=f"{label} failed: {message}",
                    failure="transport_error",
                    cause=exc,
                    error_type=type(exc).__name__,
                )

            if not response.is_success:
                return self._on_failure(
                    open_reason=f"Scan API error: {response.status_code}",
                    closed_message=f"{label} API returned error: {response.status_code}",
                    failure="http_error",
                    status_code=response.status_code,
                )

            try:
                verdict = sanitize_scan_response(response.json())
            except ValueError as exc:
                return self._on_failure(
                    open_reason="Scan response malformed: body is not valid JSON",
                    closed_message=f"{label} returned a body that is not valid JSON",
                    failure="malformed_verdict",
                    cause=exc,
                    status_code=response.status_code,
                    malformed=True,
                )
            except MalformedVerdictError as exc:
                return self._on_failure(
                    open_reason=f"Scan response malformed: {exc.message}",
                    closed_message=f"{label} returned a malformed verdict: {exc.message}",
                    failure="malformed_verdict",
                    cause=exc,
                    status_code=response.status_code,
                    malformed=True,
                )

            if not verdict.safe:
                logger.info(
                    "scan_unsafe",
                    threat_type=verdict.threat_type.value if verdict.threat_type else None,
                    severity=verdict.severity.value if verdict.severity else None,
                    confidence=verdict.confidence.value if verdict.confidence else None,
                )
            return verdict

    def _on_failure(
        self,
        *,
        open_reason: str,
        closed_message: str,
        failure: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        malformed: bool = False,
        **log_fields: Any,
    ) -> ScanVerdict:
        """Resolve a scan failure by fail mode. Returns a pass-through verdict or raises."""
        if self._config.fail_mode is FailMode.OPEN:
            logger.warning(
                "scan_failed_open",
                failure=failure,
                status_code=status_code,
                **log_fields,
            )
            return ScanVerdict.passthrough(open_reason)

        logger.error(
            "scan_failed_closed",
            failure=failure,
            status_code=status_code,
            **log_fields,
        )
        error_cls = MalformedVerdictError if malformed else ShrikeScanError
        raise error_cls(
            closed_message,
            {"failure": failure},
            status_code=status_code,
        ) from cause
