"""Unit tests for the exception taxonomy."""

from __future__ import annotations

from shrike_guard.errors import (
    MalformedVerdictError,
    ShrikeAPIError,
    ShrikeBlockedError,
    ShrikeConfigError,
    ShrikeError,
    ShrikeScanError,
)


class TestHierarchy:
    def test_all_derive_from_shrike_error(self) -> None:
        for cls in (ShrikeScanError, MalformedVerdictError, ShrikeBlockedError, ShrikeConfigError, ShrikeAPIError):
            assert issubclass(cls, ShrikeError)

    def test_malformed_is_a_scan_error(self) -> None:
        assert issubclass(MalformedVerdictError, ShrikeScanError)

    def test_blocked_is_not_a_scan_error(self) -> None:
        assert not issubclass(ShrikeBlockedError, ShrikeScanError)


class TestAttributes:
    def test_message_and_details(self) -> None:
        exc = ShrikeError("boom", {"a": 1})
        assert str(exc) == "boom"
        assert exc.message == "boom"
        assert exc.details == {"a": 1}
        assert ShrikeError("x").details == {}

    def test_scan_error_status_code(self) -> None:
        exc = ShrikeScanError("failed", status_code=503)
        assert exc.status_code == 503
        assert exc.details["status_code"] == 503

    def test_api_error_status_code(self) -> None:
        assert ShrikeAPIError("nope", status_code=404).status_code == 404

    def test_blocked_error_fields(self) -> None:
        exc = ShrikeBlockedError(
            "Request blocked: x",
            threat_type="jailbreak",
            confidence="low",
            violations=None,
            severity="high",
            guidance="g",
            reason="x",
        )
        assert exc.violations == []
        assert exc.details == {
            "threat_type": "jailbreak",
            "severity": "high",
            "confidence": "low",
            "violations": [],
        }
