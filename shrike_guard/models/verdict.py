"""Scan verdict contract — the only shape a scan result takes once it leaves the scanner.

ScanVerdict invariants (enforced in ``__post_init__``):
  - safe=True  → threat_type, severity and guidance are all None.
  - safe=False → threat_type is always a ThreatType (``UNKNOWN`` when unrecognized)
                 and severity is always set.
  - confidence is a Confidence bucket or None — never a raw 0.0–1.0 score.

Verdicts are immutable and created fresh per scan; nothing outlives one call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ThreatType(str, Enum):
    """Closed public enumeration of threat classifications."""

    PROMPT_INJECTION = "prompt_injection"
    JAILBREAK = "jailbreak"
    SYSTEM_PROMPT_LEAK = "system_prompt_leak"
    DATA_EXFILTRATION = "data_exfiltration"
    SQL_INJECTION = "sql_injection"
    PATH_TRAVERSAL = "path_traversal"
    SECRETS_EXPOSURE = "secrets_exposure"
    PII_EXPOSURE = "pii_exposure"
    BLOCKED_DOMAIN = "blocked_domain"
    TOXICITY = "toxicity"
    MALICIOUS_CODE = "malicious_code"
    HARMFUL_INTENT = "harmful_intent"
    SOCIAL_ENGINEERING = "social_engineering"
    PRIVILEGE_ESCALATION = "privilege_escalation"
    DESTRUCTIVE_OPERATION = "destructive_operation"
    SCAN_ERROR = "scan_error"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """critical > high > medium > low"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Confidence(str, Enum):
    """Coarse confidence bucket replacing the proprietary raw score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ScanVerdict:
    """Normalized, IP-safe result of one scan.

    Fields:
        safe:        True means the call may proceed.
        reason:      Human-readable reason. Always present; may be empty when safe.
        threat_type: Normalized threat type. Unsafe verdicts only.
        severity:    Derived severity. Unsafe verdicts only.
        confidence:  Confidence bucket. Unsafe verdicts only.
        guidance:    Fixed remediation text keyed by threat_type. Unsafe verdicts only.
        violations:  Opaque violation descriptors passed through from the backend.
    """

    safe: bool
    reason: str = ""
    threat_type: Optional[ThreatType] = None
    severity: Optional[Severity] = None
    confidence: Optional[Confidence] = None
    guidance: Optional[str] = None
    violations: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.safe:
            if self.threat_type is not None or self.severity is not None or self.guidance is not None:
                raise ValueError("A safe verdict must not carry threat_type, severity or guidance")
        else:
            if self.threat_type is None or self.severity is None:
                raise ValueError("An unsafe verdict requires threat_type and severity")
        if self.confidence is not None and not isinstance(self.confidence, Confidence):
            raise ValueError(f"confidence must be a Confidence bucket, got {self.confidence!r}")
        if not isinstance(self.violations, tuple):
            object.__setattr__(self, "violations", tuple(self.violations))

    @classmethod
    def passthrough(cls, reason: str = "") -> "ScanVerdict":
        """A safe verdict carrying only a reason (no content, or a fail-open diagnostic)."""
        return cls(safe=True, reason=reason)

    @property
    def blocked(self) -> bool:
        return not self.safe

    def to_dict(self) -> dict[str, Any]:
        """Public JSON-compatible form. Absent fields are omitted, never null."""
        out: dict[str, Any] = {"safe": self.safe, "reason": self.reason}
        if self.threat_type is not None:
            out["threat_type"] = self.threat_type.value
        if self.severity is not None:
            out["severity"] = self.severity.value
        if self.confidence is not None:
            out["confidence"] = self.confidence.value
        if self.guidance is not None:
            out["guidance"] = self.guidance
        if self.violations:
            out["violations"] = list(self.violations)
        return out
