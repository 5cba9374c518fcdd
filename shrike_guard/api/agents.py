"""Agent API client.

``register`` and ``list`` need a customer API key; ``heartbeat`` and
``get_policies`` need the agent's own key.
"""

from __future__ import annotations

from typing import Any, Union

from shrike_guard.api.base import BaseClient, dump_request, parse_model, parse_models
from shrike_guard.api.models import (
    Agent,
    AgentPolicy,
    HeartbeatResponse,
    RegisterAgentRequest,
    as_request,
)

AGENTS_PATH = "/api/v1/agents"


class AgentClient(BaseClient):
    """Agent registration, liveness and policy retrieval."""

    async def register(self, request: Union[RegisterAgentRequest, dict[str, Any]]) -> Agent:
        """Register a new agent. The response carries the agent's API key."""
        body = dump_request(as_request(RegisterAgentRequest, request))
        return parse_model(Agent, await self.post(f"{AGENTS_PATH}/register", body))

    async def heartbeat(self) -> HeartbeatResponse:
        return parse_model(HeartbeatResponse, await self.post(f"{AGENTS_PATH}/heartbeat"))

    async def get_policies(self) -> list[AgentPolicy]:
        """Policies assigned to the calling agent."""
        return parse_models(AgentPolicy, await self.get(f"{AGENTS_PATH}/policies"))

    async def list(self) -> list[Agent]:
        """All agents of the current customer."""
        return parse_models(Agent, await self.get(AGENTS_PATH))

    async def get_agent(self, agent_id: str) -> Agent:
        return parse_model(Agent, await self.get(f"{AGENTS_PATH}/{agent_id}"))

    async def delete_agent(self, agent_id: str) -> None:
        await self.delete(f"{AGENTS_PATH}/{agent_id}")
