"""Management API clients for the Shrike backend.

  - base.py     — BaseClient: shared httpx transport, bearer headers, error mapping
  - models.py   — pydantic request/response models
  - auth.py     — AuthClient     (/api/v1/auth/*)
  - agents.py   — AgentClient    (/api/v1/agents*)
  - policies.py — PolicyClient   (/api/v1/policies*)
  - sandbox.py  — SandboxClient  (/api/v1/sandbox/scan)

These clients are independent of the provider wrappers: no fail mode applies,
and every non-2xx response raises ShrikeAPIError.
"""

from shrike_guard.api.agents import AgentClient
from shrike_guard.api.auth import AuthClient
from shrike_guard.api.base import BaseClient
from shrike_guard.api.policies import PolicyClient
from shrike_guard.api.sandbox import SandboxClient

__all__ = [
    "AgentClient",
    "AuthClient",
    "BaseClient",
    "PolicyClient",
    "SandboxClient",
]
