"""Policy API client."""

from __future__ import annotations

from typing import Any, Union

from shrike_guard.api.base import BaseClient, dump_request, parse_model, parse_models
from shrike_guard.api.models import (
    CreatePolicyRequest,
    Policy,
    UpdatePolicyRequest,
    as_request,
)

POLICIES_PATH = "/api/v1/policies"


class PolicyClient(BaseClient):
    """CRUD over the current customer's scan policies."""

    async def list(self) -> list[Policy]:
        return parse_models(Policy, await self.get(POLICIES_PATH))

    async def get_policy(self, policy_id: str) -> Policy:
        return parse_model(Policy, await self.get(f"{POLICIES_PATH}/{policy_id}"))

    async def create(self, request: Union[CreatePolicyRequest, dict[str, Any]]) -> Policy:
        body = dump_request(as_request(CreatePolicyRequest, request))
        return parse_model(Policy, await self.post(POLICIES_PATH, body))

    async def update(
        self,
        policy_id: str,
        request: Union[UpdatePolicyRequest, dict[str, Any]],
    ) -> Policy:
        """Partial update: only the fields set on ``request`` are sent."""
        body = dump_request(as_request(UpdatePolicyRequest, request))
        return parse_model(Policy, await self.put(f"{POLICIES_PATH}/{policy_id}", body))

    async def delete_policy(self, policy_id: str) -> None:
        await self.delete(f"{POLICIES_PATH}/{policy_id}")
