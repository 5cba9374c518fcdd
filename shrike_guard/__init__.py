"""Shrike Guard — pre-flight security scanning for LLM provider SDKs.

Wrap an async provider client once; every generation call is scanned by the
Shrike service before the provider sees it::

    from openai import AsyncOpenAI
    from shrike_guard import ShrikeBlockedError, ShrikeOpenAI

    client = ShrikeOpenAI(AsyncOpenAI(), shrike_api_key="shrike-...", fail_mode="closed")
    try:
        response = await client.chat.completions.create(model="gpt-4o", messages=[...])
    except ShrikeBlockedError as exc:
        print(exc.threat_type, exc.severity, exc.guidance)
"""

from shrike_guard.api import AgentClient, AuthClient, PolicyClient, SandboxClient
from shrike_guard.config import FailMode, GuardConfig, load_config
from shrike_guard.constants import DEFAULT_ENDPOINT, DEFAULT_SCAN_TIMEOUT_MS, MAX_CONTENT_SIZE
from shrike_guard.errors import (
    MalformedVerdictError,
    ShrikeAPIError,
    ShrikeBlockedError,
    ShrikeConfigError,
    ShrikeError,
    ShrikeScanError,
)
from shrike_guard.models.verdict import Confidence, ScanVerdict, Severity, ThreatType
from shrike_guard.providers.anthropic import ShrikeAnthropic
from shrike_guard.providers.gemini import ShrikeChatSession, ShrikeGemini, ShrikeGenerativeModel
from shrike_guard.providers.openai import ShrikeOpenAI
from shrike_guard.scanner.sanitizer import (
    bucket_confidence,
    normalize_threat_type,
    sanitize_scan_response,
)
from shrike_guard.scanner.transport import ScanClient, get_scan_headers
from shrike_guard.utils.logger import configure_logging
from shrike_guard.version import __version__

__all__ = [
    "AgentClient",
    "AuthClient",
    "Confidence",
    "DEFAULT_ENDPOINT",
    "DEFAULT_SCAN_TIMEOUT_MS",
    "FailMode",
    "GuardConfig",
    "MAX_CONTENT_SIZE",
    "MalformedVerdictError",
    "PolicyClient",
    "SandboxClient",
    "ScanClient",
    "ScanVerdict",
    "Severity",
    "ShrikeAPIError",
    "ShrikeAnthropic",
    "ShrikeBlockedError",
    "ShrikeChatSession",
    "ShrikeConfigError",
    "ShrikeError",
    "ShrikeGemini",
    "ShrikeGenerativeModel",
    "ShrikeOpenAI",
    "ShrikeScanError",
    "ThreatType",
    "__version__",
    "bucket_confidence",
    "configure_logging",
    "get_scan_headers",
    "load_config",
    "normalize_threat_type",
    "sanitize_scan_response",
]
