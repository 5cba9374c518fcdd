"""Interception state machine shared by every provider wrapper.

Per generation call::

    PENDING_SCAN ──unsafe verdict──▶ BLOCKED    (ShrikeBlockedError; provider never called)
         │
         └──────safe verdict──────▶ FORWARDED  (original request → provider; native result returned)

PENDING_SCAN runs the provider's extractor, then the scan transport + sanitizer.
Empty or whitespace-only text skips the scan entirely and goes straight to
FORWARDED with the implicit verdict ``{safe: True, reason: "No user content to scan"}``.

Scan infrastructure failures are resolved by ScanClient (fail_mode) before a
verdict reaches this module: under 'closed' they surface here as
ShrikeScanError and the call ends without a transition to FORWARDED.

FORWARDED never post-processes: the provider's response, stream or error is
returned or raised to the caller untouched. Output is never scanned.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar

from shrike_guard.constants import NO_CONTENT_REASON
from shrike_guard.models.block import build_blocked_error
from shrike_guard.models.verdict import ScanVerdict
from shrike_guard.scanner.transport import ScanClient
from shrike_guard.utils.logger import bind_trace_id, get_logger
from shrike_guard.utils.trace import generate_trace_id

logger = get_logger(__name__)

T = TypeVar("T")


class InterceptionState(str, Enum):
    PENDING_SCAN = "pending_scan"
    BLOCKED = "blocked"
    FORWARDED = "forwarded"


@dataclass
class InterceptionContext:
    """Ephemeral per-call record. Created at call entry, discarded at call exit.

    Never shared between concurrent calls.
    """

    provider: str
    """Wrapper name, e.g. ``"openai"``."""
    operation: str
    """Entry point, e.g. ``"chat.completions.create"``."""
    request: Any
    """The provider-native request exactly as the caller supplied it."""
    text: str = ""
    """Extracted user-authored text."""
    deadline: Optional[float] = None
    """``time.monotonic()`` value by which the scan must finish."""
    verdict: Optional[ScanVerdict] = None
    state: InterceptionState = InterceptionState.PENDING_SCAN
    trace_id: str = field(default_factory=generate_trace_id)

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), or None when unbounded."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)


class Interceptor:
    """Scan-then-forward driver bound to one ScanClient.

    Holds no per-call state, so one instance serves any number of concurrent calls.
    """

    def __init__(self, scan_client: ScanClient, provider: str) -> None:
        self._scan_client = scan_client
        self._provider = provider

    @property
    def scan_client(self) -> ScanClient:
        return self._scan_client

    def begin(self, operation: str, request: Any, text: str) -> InterceptionContext:
        """Create the context for one call (state PENDING_SCAN, deadline armed)."""
        return InterceptionContext(
            provider=self._provider,
            operation=operation,
            request=request,
            text=text,
            deadline=time.monotonic() + self._scan_client.config.scan_timeout_s,
        )

    async def scan_text(self, ctx: InterceptionContext) -> ScanVerdict:
        """Resolve the verdict for ``ctx.text`` (skipping the network for empty text)."""
        if not ctx.text.strip():
            return ScanVerdict.passthrough(NO_CONTENT_REASON)
        return await self._scan_client.scan(
            ctx.text,
            trace_id=ctx.trace_id,
            timeout=ctx.remaining(),
        )

    async def check(self, ctx: InterceptionContext) -> ScanVerdict:
        """Run PENDING_SCAN and apply the transition.

        Returns:
            The safe verdict (ctx.state is FORWARDED).

        Raises:
            ShrikeBlockedError: Unsafe verdict (ctx.state is BLOCKED).
            ShrikeScanError:    Scan failed under fail_mode 'closed'.
        """
        with bind_trace_id(ctx.trace_id):
            verdict = await self.scan_text(ctx)
            ctx.verdict = verdict

            if not verdict.safe:
                ctx.state = InterceptionState.BLOCKED
                logger.info(
                    "request_blocked",
                    provider=ctx.provider,
                    operation=ctx.operation,
                    threat_type=verdict.threat_type.value if verdict.threat_type else None,
                    severity=verdict.severity.value if verdict.severity else None,
                    confidence=verdict.confidence.value if verdict.confidence else None,
                )
                raise build_blocked_error(verdict)

            ctx.state = InterceptionState.FORWARDED
            logger.debug(
                "request_forwarded",
                provider=ctx.provider,
                operation=ctx.operation,
                reason=verdict.reason,
            )
            return verdict

    async def run(
        self,
        operation: str,
        request: Any,
        text: str,
        forward: Callable[[], Awaitable[T]],
    ) -> T:
        """Scan ``text`` and, only if safe, await ``forward()`` and return its result as-is."""
        ctx = self.begin(operation, request, text)
        await self.check(ctx)
        return await forward()
