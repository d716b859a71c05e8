"""Agents API - CRUD and direct chat for IRIS AI agents."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.agents import Agent, AgentCollection, ChatResponse
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class AgentsAPI:
    """Agents API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # List agents
            agents = await iris.agents.list()

            # Create agent
            agent = await iris.agents.create({
                "name": "Support Bot",
                "prompt": "You are a helpful support agent.",
            })

            # Change one field, keep the rest
            await iris.agents.patch(agent.id, {"model": "gpt-4o"})

            # One-shot reply without a workflow
            reply = await iris.agents.chat(agent.id, [{"role": "user", "content": "Hi"}])
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _base(self) -> str:
        uid = self._client.config.require_user_id()
        return f"/api/v1/users/{uid}/bloqs/agents"

    async def list(self, **params) -> AgentCollection:
        """List agents for the current user.

        Args:
            **params: Filters such as page, per_page, search

        Returns:
            AgentCollection
        """
        response = await self._client._get(self._base, **params)
        return AgentCollection.from_items(
            extract_list(response, "data.data", "data", "agents"),
            Agent.from_dict,
            extract_meta(response),
        )

    async def search(self, query: str, **params) -> AgentCollection:
        """Search agents by name or prompt."""
        return await self.list(search=query, **params)

    async def get(self, agent_id: int) -> Agent:
        """Get agent details.

        Args:
            agent_id: The agent ID

        Returns:
            Agent
        """
        response = await self._client._get(f"{self._base}/{agent_id}")
        return Agent.from_dict(extract_payload(response, "data.agent", "agent", "data"))

    async def create(self, data: dict[str, Any]) -> Agent:
        """Create a new agent.

        Args:
            data: Agent fields; ``name`` and ``prompt`` are required,
                ``type`` defaults to ``ai_bloq``

        Returns:
            Created Agent
        """
        if not data.get("name"):
            raise ValueError("Agent name is required")
        if not (data.get("prompt") or data.get("system_prompt")):
            raise ValueError("Agent prompt is required")

        payload = {"type": "ai_bloq", **data}
        response = await self._client._post(self._base, payload)
        return Agent.from_dict(extract_payload(response, "data.agent", "agent", "data"))

    async def update(self, agent_id: int, data: dict[str, Any]) -> Agent:
        """Replace agent fields (PUT)."""
        response = await self._client._put(f"{self._base}/{agent_id}", data)
        return Agent.from_dict(extract_payload(response, "data.agent", "agent", "data"))

    async def patch(self, agent_id: int, changes: dict[str, Any]) -> Agent:
        """Merge changes into the current agent and save.

        Fetches the agent first so fields not in ``changes`` are kept.
        """
        current = await self.get(agent_id)
        merged = {**current.attributes, **changes}
        settings = changes.get("settings")
        if isinstance(settings, dict):
            merged["settings"] = {**current.settings, **settings}
        return await self.update(agent_id, merged)

    async def delete(self, agent_id: int) -> dict[str, Any]:
        """Delete an agent."""
        return await self._client._delete(f"{self._base}/{agent_id}")

    async def chat(
        self,
        agent_id: int,
        messages: list[dict[str, Any]],
        bloq_id: int | None = None,
        thread_id: str | None = None,
        use_rag: bool = True,
        model: str | None = None,
    ) -> ChatResponse:
        """Get a single reply from an agent.

        Args:
            agent_id: Agent to answer
            messages: Conversation so far, [{"role": ..., "content": ...}]
            bloq_id: Knowledge base for retrieval
            thread_id: Continue an existing thread
            use_rag: Retrieve from the agent's knowledge base
            model: Override the agent's model

        Returns:
            ChatResponse
        """
        payload = {
            "agentId": agent_id,
            "messages": messages,
            "bloqId": bloq_id,
            "threadId": thread_id,
            "useRAG": use_rag,
            "model": model,
        }
        payload = {k: v for k, v in payload.items() if v is not None}
        response = await self._client._post("/api/v1/bloqs/agents/generate-response", payload)
        return ChatResponse.from_dict(extract_payload(response, "data"))
