"""Config loading for Shrike Guard.

Reads `.shrike/config.yaml` (or `~/.shrike/config.yaml`), then applies
environment variables, then explicit keyword overrides.
Raises ShrikeConfigError on parse errors, a missing/unsupported `version`
field, or invalid values. If no config file is found, defaults apply
(a missing file is not an error; a missing API key is).

Config search order:
  1. `config_path` argument (if provided — for testing or explicit override)
  2. SHRIKE_CONFIG environment variable (if set)
  3. `.shrike/config.yaml` (working directory — for development)
  4. `~/.shrike/config.yaml` (home directory — for deployments)

Environment variable overrides (take precedence over the config file):
  SHRIKE_API_KEY          — scan service API key
  SHRIKE_ENDPOINT         — scan service base URL
  SHRIKE_FAIL_MODE        — "open" | "closed"
  SHRIKE_SCAN_TIMEOUT_MS  — integer milliseconds

Example config file::

    version: 1
    api_key: shrike-...
    endpoint: https://api.shrikesecurity.com/agent
    fail_mode: closed
    scan_timeout_ms: 5000
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import urlsplit

import yaml

from shrike_guard.constants import DEFAULT_ENDPOINT, DEFAULT_SCAN_TIMEOUT_MS
from shrike_guard.errors import ShrikeConfigError
from shrike_guard.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION = 1

SUPPORTED_VERSIONS: frozenset[int] = frozenset({SUPPORTED_CONFIG_VERSION})

# Default config search paths (SHRIKE_CONFIG env var prepended at runtime)
DEFAULT_CONFIG_PATHS = [
    ".shrike/config.yaml",
    os.path.expanduser("~/.shrike/config.yaml"),
]

# Environment variables → GuardConfig field names
_ENV_OVERRIDES: dict[str, str] = {
    "SHRIKE_API_KEY": "api_key",
    "SHRIKE_ENDPOINT": "endpoint",
    "SHRIKE_FAIL_MODE": "fail_mode",
    "SHRIKE_SCAN_TIMEOUT_MS": "scan_timeout_ms",
}

_CONFIG_FIELDS: frozenset[str] = frozenset(_ENV_OVERRIDES.values())


# ─── Fail mode ────────────────────────────────────────────────────────────────


class FailMode(str, Enum):
    """Behavior when a scan cannot be completed (timeout, network error, non-2xx).

    OPEN:   allow the request to proceed; the verdict carries a diagnostic reason.
    CLOSED: raise ShrikeScanError; the provider is never called.

    A genuine unsafe verdict is ALWAYS blocked, whatever the fail mode.
    """

    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: Union["FailMode", str]) -> "FailMode":
        """Normalize a FailMode or its string form. Raises ShrikeConfigError otherwise."""
        if isinstance(value, FailMode):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ShrikeConfigError(
            f"Invalid fail_mode: {value!r}. Supported values: {sorted(m.value for m in cls)}.",
            {"fail_mode": repr(value)},
        )


DEFAULT_FAIL_MODE = FailMode.OPEN


# ─── GuardConfig ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GuardConfig:
    """Immutable scan configuration shared by a wrapper and its ScanClient.

    Validated and normalized once at construction; never re-interpreted at call time.

    api_key:         Shrike API key sent as ``Authorization: Bearer <key>``. Required.
    endpoint:        Scan service base URL. Trailing slash stripped.
    fail_mode:       FailMode (a plain "open"/"closed" string is accepted and normalized).
    scan_timeout_ms: Upper bound for one scan round trip.
    """

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    fail_mode: FailMode = DEFAULT_FAIL_MODE
    scan_timeout_ms: int = DEFAULT_SCAN_TIMEOUT_MS

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ShrikeConfigError(
                "A Shrike API key is required. Pass shrike_api_key= or set SHRIKE_API_KEY."
            )
        object.__setattr__(self, "endpoint", validate_endpoint(self.endpoint))
        object.__setattr__(self, "fail_mode", FailMode.parse(self.fail_mode))
        object.__setattr__(self, "scan_timeout_ms", _validate_timeout(self.scan_timeout_ms))

    @property
    def scan_timeout_s(self) -> float:
        return self.scan_timeout_ms / 1000

    def __repr__(self) -> str:
        # Never print the key.
        return (
            f"GuardConfig(api_key='***', endpoint={self.endpoint!r}, "
            f"fail_mode={self.fail_mode.value!r}, scan_timeout_ms={self.scan_timeout_ms})"
        )

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "GuardConfig":
        """Construct GuardConfig from a parsed mapping.

        Unknown keys (including ``version``) are ignored; missing keys take defaults.

        Raises:
            ShrikeConfigError: On any invalid value.
        """
        return cls(
            api_key=raw.get("api_key", ""),
            endpoint=raw.get("endpoint", DEFAULT_ENDPOINT),
            fail_mode=raw.get("fail_mode", DEFAULT_FAIL_MODE),
            scan_timeout_ms=raw.get("scan_timeout_ms", DEFAULT_SCAN_TIMEOUT_MS),
        )


def validate_endpoint(endpoint: Any) -> str:
    """Normalize an http(s) base URL (trailing slash stripped). Raises ShrikeConfigError."""
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ShrikeConfigError("Shrike endpoint must be a non-empty URL string.")
    cleaned = endpoint.strip().rstrip("/")
    parts = urlsplit(cleaned)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ShrikeConfigError(
            f"Malformed Shrike endpoint: {endpoint!r}. Expected an http(s) URL with a host.",
            {"endpoint": endpoint},
        )
    return cleaned


def _validate_timeout(timeout_ms: Any) -> int:
    if isinstance(timeout_ms, bool):
        raise ShrikeConfigError(f"scan_timeout_ms must be an integer, got {timeout_ms!r}.")
    if isinstance(timeout_ms, str):
        try:
            timeout_ms = int(timeout_ms.strip())
        except ValueError:
            raise ShrikeConfigError(
                f"scan_timeout_ms is not a valid integer: {timeout_ms!r}."
            ) from None
    if not isinstance(timeout_ms, (int, float)) or timeout_ms <= 0:
        raise ShrikeConfigError(f"scan_timeout_ms must be a positive number, got {timeout_ms!r}.")
    return int(timeout_ms)


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None, **overrides: Any) -> GuardConfig:
    """Load and validate Shrike Guard configuration.

    Layering, lowest to highest precedence:
      defaults → config file → SHRIKE_* environment variables → ``overrides``.

    ``overrides`` whose value is None are ignored, so wrappers can forward their
    optional keyword arguments unconditionally.

    Returns:
        GuardConfig with all values populated and validated.

    Raises:
        ShrikeConfigError: On YAML parse error, non-mapping YAML, missing or
                           unsupported ``version``, unknown override keys, or any
                           invalid value (including a missing API key).
    """
    unknown = set(overrides) - _CONFIG_FIELDS
    if unknown:
        raise ShrikeConfigError(f"Unknown configuration option(s): {sorted(unknown)}")

    values: dict[str, Any] = {}

    found_path = _find_config_file(config_path)
    if found_path is None:
        logger.debug("No Shrike config file found — using defaults")
    else:
        values.update(_read_config_file(found_path))

    for env_name, field_name in _ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value:
            values[field_name] = env_value

    values.update({k: v for k, v in overrides.items() if v is not None})

    config = GuardConfig.from_dict(values)
    logger.debug(
        "Shrike config resolved",
        path=found_path,
        endpoint=config.endpoint,
        fail_mode=config.fail_mode.value,
        scan_timeout_ms=config.scan_timeout_ms,
    )
    return config


def _find_config_file(config_path: Optional[str]) -> Optional[str]:
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("SHRIKE_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            return expanded
    return None


def _read_config_file(found_path: str) -> dict[str, Any]:
    """Parse and version-check a config file. Returns only known GuardConfig fields."""
    logger.debug("Loading Shrike config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ShrikeConfigError(
            f"Failed to parse {found_path}: {exc}", {"path": found_path}
        ) from exc
    except OSError as exc:
        raise ShrikeConfigError(
            f"Could not read {found_path}: {exc}", {"path": found_path}
        ) from exc

    if not isinstance(raw, dict):
        if raw is None:
            msg = (
                f"{found_path} is missing the required 'version' field. "
                "Add 'version: 1' to the top of your config file."
            )
        else:
            msg = (
                f"{found_path} is not a valid YAML mapping. "
                "The config file must be a YAML dictionary at the top level."
            )
        raise ShrikeConfigError(msg, {"path": found_path})

    version = raw.get("version")
    if version is None:
        raise ShrikeConfigError(
            f"{found_path} is missing the required 'version' field. "
            "Add 'version: 1' to the top of your config file.",
            {"path": found_path},
        )
    if version not in SUPPORTED_VERSIONS:
        raise ShrikeConfigError(
            f"Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}.",
            {"path": found_path, "version": version},
        )

    return {k: v for k, v in raw.items() if k in _CONFIG_FIELDS}
