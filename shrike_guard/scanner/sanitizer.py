"""Response sanitization — the IP-protection boundary between the scan service and callers.

Converts a raw backend verdict into a ScanVerdict. Pure functions, no I/O.

OUTPUT IS BUILT FROM AN ALLOW-LIST:
  - safe verdict   → safe, reason. Nothing else, ever.
  - unsafe verdict → safe, reason, threat_type, severity, confidence (bucket),
                     guidance, violations.
  Any other backend field (detection stage, matched pattern, policy ids, AI
  reasoning, timings; see INTERNAL_FIELDS) is dropped by construction.

CONTRACT:
  The ``safe`` field is mandatory and must be a boolean. A payload that is not a
  JSON object, or whose ``safe`` is missing or not a bool, raises
  MalformedVerdictError. A malformed payload is never read as "safe"; the
  transport hands it to the fail-open/fail-closed policy like any other scan
  failure.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from shrike_guard.errors import MalformedVerdictError
from shrike_guard.models.verdict import Confidence, ScanVerdict, Severity, ThreatType
from shrike_guard.scanner.definitions import (
    CONFIDENCE_HIGH_THRESHOLD,
    CONFIDENCE_MEDIUM_THRESHOLD,
    THREAT_GUIDANCE,
    THREAT_SEVERITY,
    THREAT_TYPE_MAP,
)

_VALID_SEVERITIES: frozenset[str] = frozenset(s.value for s in Severity)


def normalize_threat_type(raw_type: Optional[str]) -> ThreatType:
    """Normalize an internal threat label to the public ThreatType enumeration.

    Lookup is case-insensitive and treats ``-`` as ``_``. Absent, non-string and
    unrecognized labels all map to ``ThreatType.UNKNOWN``.
    """
    if not raw_type or not isinstance(raw_type, str):
        return ThreatType.UNKNOWN
    normalized = raw_type.strip().lower().replace("-", "_")
    return THREAT_TYPE_MAP.get(normalized, ThreatType.UNKNOWN)


def bucket_confidence(score: Any) -> Confidence:
    """Convert a raw 0.0–1.0 confidence score to a bucket.

    Absent or non-numeric scores bucket to MEDIUM. ``bool`` is not a score.
    """
    if score is None or isinstance(score, bool) or not isinstance(score, (int, float)):
        return Confidence.MEDIUM
    if score >= CONFIDENCE_HIGH_THRESHOLD:
        return Confidence.HIGH
    if score >= CONFIDENCE_MEDIUM_THRESHOLD:
        return Confidence.MEDIUM
    return Confidence.LOW


def derive_severity(threat_type: ThreatType, raw_severity: Any = None) -> Severity:
    """Use a valid backend severity, else the default for ``threat_type``."""
    if isinstance(raw_severity, str) and raw_severity.strip().lower() in _VALID_SEVERITIES:
        return Severity(raw_severity.strip().lower())
    return THREAT_SEVERITY.get(threat_type, Severity.MEDIUM)


def sanitize_scan_response(raw: Any) -> ScanVerdict:
    """Sanitize a raw backend scan response.

    Args:
        raw: Decoded JSON body from the scan service.

    Returns:
        ScanVerdict honouring the safe/unsafe field invariants.

    Raises:
        MalformedVerdictError: ``raw`` is not a mapping, or ``safe`` is missing / not a bool.
    """
    if not isinstance(raw, Mapping):
        raise MalformedVerdictError(
            f"Scan response is not a JSON object (got {type(raw).__name__})"
        )
    if "safe" not in raw:
        raise MalformedVerdictError("Scan response is missing the 'safe' field")
    safe = raw["safe"]
    if not isinstance(safe, bool):
        raise MalformedVerdictError(
            f"Scan response 'safe' field is not a boolean (got {type(safe).__name__})"
        )

    reason = raw.get("reason")
    if safe:
        return ScanVerdict.passthrough(reason if isinstance(reason, str) else "")

    threat_type = normalize_threat_type(raw.get("threat_type"))
    guidance = THREAT_GUIDANCE.get(threat_type, THREAT_GUIDANCE[ThreatType.UNKNOWN])
    violations = raw.get("violations")

    return ScanVerdict(
        safe=False,
        reason=reason if isinstance(reason, str) and reason else guidance,
        threat_type=threat_type,
        severity=derive_severity(threat_type, raw.get("severity")),
        confidence=bucket_confidence(raw.get("confidence")),
        guidance=guidance,
        violations=tuple(violations) if isinstance(violations, list) else (),
    )
