"""Sandbox API client.

Sandbox scans run the production pipeline without counting against quotas or
production metrics. Results go through the same sanitizer as wrapper scans,
so callers see the same ScanVerdict shape.
"""

from __future__ import annotations

from typing import Any, Optional

from shrike_guard.api.base import BaseClient, dump_request
from shrike_guard.api.models import SandboxScanRequest
from shrike_guard.errors import MalformedVerdictError, ShrikeAPIError
from shrike_guard.models.verdict import ScanVerdict
from shrike_guard.scanner.sanitizer import sanitize_scan_response

SANDBOX_SCAN_PATH = "/api/v1/sandbox/scan"


class SandboxClient(BaseClient):
    """Test prompts against the scan service outside production accounting."""

    async def scan(
        self,
        prompt: str,
        context: Optional[str] = None,
        model: Optional[str] = None,
    ) -> ScanVerdict:
        """Scan a prompt in sandbox mode.

        Raises:
            ShrikeAPIError: Request failed, or the body is not a verdict.
        """
        body = dump_request(SandboxScanRequest(prompt=prompt, context=context, model=model))
        data: Any = await self.post(SANDBOX_SCAN_PATH, body)
        try:
            return sanitize_scan_response(data)
        except MalformedVerdictError as exc:
            raise ShrikeAPIError(f"Sandbox returned a malformed verdict: {exc.message}") from exc
