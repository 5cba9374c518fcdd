"""Exception taxonomy for Shrike Guard.

Every error raised to callers derives from ``ShrikeError``:

  - ShrikeScanError       — the scan could not be completed and fail_mode is 'closed'.
  - MalformedVerdictError — the scan service answered, but not with a verdict.
  - ShrikeBlockedError    — the scan completed and the content was judged unsafe.
                            Raised regardless of fail_mode.
  - ShrikeConfigError     — invalid configuration, raised at construction time.
  - ShrikeAPIError        — a management API call (auth/agents/policies/sandbox) failed.

Blocked errors carry only the sanitized verdict fields (threat type, severity,
confidence bucket, violations, guidance). Raw detection internals never reach
an exception.
"""

from __future__ import annotations

from typing import Any, Optional


class ShrikeError(Exception):
    """Base exception for all Shrike Guard errors."""

    code: str = "shrike_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = dict(details or {})


class ShrikeScanError(ShrikeError):
    """Raised when a scan operation fails and fail_mode is 'closed'.

    Causes: the scan API timed out, a network error occurred, or the API
    returned a non-2xx status. Under fail_mode 'open' the same failures are
    converted into a safe verdict with a diagnostic reason instead.
    """

    code = "scan_failed"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        if status_code is not None:
            self.details.setdefault("status_code", status_code)


class MalformedVerdictError(ShrikeScanError):
    """The scan service response could not be interpreted as a verdict.

    A payload that is not a JSON object, or whose ``safe`` field is missing or
    not a boolean, is a contract violation. It is never read as "safe".
    """

    code = "malformed_verdict"


class ShrikeBlockedError(ShrikeError):
    """Raised when a prompt is blocked by Shrike security checks.

    Attributes:
        reason:      Human-readable reason (backend reason or guidance text).
        threat_type: Normalized threat type (e.g. ``"prompt_injection"``).
        severity:    ``"critical" | "high" | "medium" | "low"``.
        confidence:  Confidence bucket ``"high" | "medium" | "low"`` — never a raw score.
        violations:  Opaque violation descriptors passed through from the backend.
        guidance:    Fixed remediation text for the threat type.
    """

    code = "blocked"

    def __init__(
        self,
        message: str,
        *,
        threat_type: Optional[str] = None,
        confidence: Optional[str] = None,
        violations: Optional[list[Any]] = None,
        severity: Optional[str] = None,
        guidance: Optional[str] = None,
        reason: str = "",
    ) -> None:
        self.threat_type = threat_type
        self.confidence = confidence
        self.violations: list[Any] = list(violations or [])
        self.severity = severity
        self.guidance = guidance
        self.reason = reason
        super().__init__(
            message,
            {
                "threat_type": threat_type,
                "severity": severity,
                "confidence": confidence,
                "violations": self.violations,
            },
        )


class ShrikeConfigError(ShrikeError):
    """Raised when the SDK is misconfigured (missing key, bad endpoint, bad fail mode)."""

    code = "config_error"


class ShrikeAPIError(ShrikeError):
    """Raised when a management API request fails."""

    code = "api_error"

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
