"""Builders for the two verdict outcomes that never come from the scan service response.

  build_blocked_error():
      Turns an unsafe ScanVerdict into the ShrikeBlockedError raised to the caller.
      Carries reason, threat_type, severity, confidence bucket, violations and guidance.
      NEVER built for scan infrastructure failures — those are ShrikeScanError
      (fail_mode 'closed') or a safe pass-through verdict (fail_mode 'open').

  build_size_limit_verdict():
      The local ``size_limit_exceeded`` verdict for inputs over MAX_CONTENT_SIZE.
      This is the one verdict produced without a network round trip.
"""

from __future__ import annotations

from shrike_guard.constants import MAX_CONTENT_SIZE
from shrike_guard.errors import ShrikeBlockedError
from shrike_guard.models.verdict import Confidence, ScanVerdict, ThreatType
from shrike_guard.scanner.definitions import THREAT_GUIDANCE, THREAT_SEVERITY


def build_blocked_error(verdict: ScanVerdict) -> ShrikeBlockedError:
    """Build the blocking error for an unsafe verdict.

    Args:
        verdict: ScanVerdict with safe=False.

    Returns:
        ShrikeBlockedError whose message starts with ``"Request blocked: "``.
    """
    reason = verdict.reason or "Security threat detected"
    return ShrikeBlockedError(
        f"Request blocked: {reason}",
        threat_type=verdict.threat_type.value if verdict.threat_type else None,
        confidence=verdict.confidence.value if verdict.confidence else None,
        violations=list(verdict.violations),
        severity=verdict.severity.value if verdict.severity else None,
        guidance=verdict.guidance,
        reason=reason,
    )


def build_size_limit_verdict(size_bytes: int, subject: str = "Content") -> ScanVerdict:
    """Build the local verdict for input larger than MAX_CONTENT_SIZE.

    Args:
        size_bytes: Combined UTF-8 size of the rejected input.
        subject:    Label used in the reason (``"Content"``, ``"SQL query"``, ...).

    Returns:
        Unsafe ScanVerdict with threat_type SIZE_LIMIT_EXCEEDED and confidence HIGH.
    """
    limit_kb = MAX_CONTENT_SIZE // 1024
    threat_type = ThreatType.SIZE_LIMIT_EXCEEDED
    return ScanVerdict(
        safe=False,
        reason=f"{subject} too large ({round(size_bytes / 1024)}KB > {limit_kb}KB limit)",
        threat_type=threat_type,
        severity=THREAT_SEVERITY[threat_type],
        confidence=Confidence.HIGH,
        guidance=THREAT_GUIDANCE[threat_type],
        violations=(
            {
                "type": "size_limit",
                "description": f"{subject} exceeds maximum size of {limit_kb}KB",
            },
        ),
    )
