"""Shared constants for Shrike Guard.

All size limits, timeouts, endpoints and header names used across modules are
defined here. No magic numbers in other modules — import from here.
"""

# ─── Scan service ─────────────────────────────────────────────────────────────

# Default Shrike API endpoint (load balancer in front of the scan cascade).
DEFAULT_ENDPOINT: str = "https://api.shrikesecurity.com/agent"

# Scan endpoint paths, appended to the configured endpoint.
SCAN_PATH: str = "/scan"
SPECIALIZED_SCAN_PATH: str = "/api/scan/specialized"

# Default timeout for a single scan round trip.
DEFAULT_SCAN_TIMEOUT_MS: int = 10_000  # 10 seconds

# Default timeout for management API calls (auth, agents, policies, sandbox).
DEFAULT_API_TIMEOUT_MS: int = 30_000  # 30 seconds

# ─── Size limits ──────────────────────────────────────────────────────────────

# Client-side cap on combined scan input, checked BEFORE any network call.
# Matches the backend MaxRequestBodySize so oversized inputs fail fast locally.
MAX_CONTENT_SIZE: int = 100 * 1024  # 100 KiB = 102,400 bytes

# ─── SDK identification ───────────────────────────────────────────────────────

SDK_NAME: str = "python"
SDK_USER_AGENT: str = "shrike-guard-python"

# ─── Header names ─────────────────────────────────────────────────────────────

SDK_HEADER: str = "X-Shrike-SDK"
SDK_VERSION_HEADER: str = "X-Shrike-SDK-Version"
REQUEST_ID_HEADER: str = "X-Shrike-Request-ID"

# ─── Implicit verdict reasons ─────────────────────────────────────────────────

NO_CONTENT_REASON: str = "No user content to scan"
