"""Request and response models for the management API.

Response models accept unknown fields so a newer backend never breaks an
older SDK. Request models reject them.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict

RuleAction = Literal["block", "warn", "allow"]


class _Response(BaseModel):
    model_config = ConfigDict(extra="allow")


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ─── Auth ─────────────────────────────────────────────────────────────────────


class RegisterRequest(_Request):
    email: str
    password: str
    company_name: Optional[str] = None


class LoginRequest(_Request):
    email: str
    password: str


class AuthResponse(_Response):
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


class UserProfile(_Response):
    customer_id: str
    email: str
    company_name: Optional[str] = None
    created_at: str


# ─── Policies ─────────────────────────────────────────────────────────────────


class PolicyRule(_Response):
    """One policy rule. Rule-type-specific settings travel as extra fields."""

    type: str
    action: RuleAction
    threshold: Optional[float] = None
    patterns: Optional[list[str]] = None


class Policy(_Response):
    policy_id: str
    customer_id: str
    name: str
    description: Optional[str] = None
    rules: list[PolicyRule] = []
    is_default: bool = False
    created_at: str
    updated_at: str


class CreatePolicyRequest(_Request):
    name: str
    description: Optional[str] = None
    rules: list[PolicyRule]
    is_default: Optional[bool] = None


class UpdatePolicyRequest(_Request):
    name: Optional[str] = None
    description: Optional[str] = None
    rules: Optional[list[PolicyRule]] = None
    is_default: Optional[bool] = None


# ─── Agents ───────────────────────────────────────────────────────────────────


class RegisterAgentRequest(_Request):
    name: str
    description: Optional[str] = None
    policy_id: Optional[str] = None


class Agent(_Response):
    agent_id: str
    customer_id: str
    name: str
    description: Optional[str] = None
    api_key: Optional[str] = None
    """Returned in full only by ``register``."""
    policy_id: Optional[str] = None
    status: Literal["active", "inactive"]
    created_at: str
    last_heartbeat: Optional[str] = None


class HeartbeatResponse(_Response):
    status: str
    server_time: str


class AgentPolicy(_Response):
    policy_id: str
    name: str
    rules: list[PolicyRule] = []


# ─── Sandbox ──────────────────────────────────────────────────────────────────


class SandboxScanRequest(_Request):
    prompt: str
    context: Optional[str] = None
    model: Optional[str] = None


def as_request(model: type[_Request], value: Any) -> _Request:
    """Accept either a request model instance or a plain mapping of its fields."""
    if isinstance(value, model):
        return value
    return model.model_validate(value)
