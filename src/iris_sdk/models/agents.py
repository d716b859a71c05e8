"""Agent and agent chat models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_dict, as_int, as_list

PUBLIC_APP_URL = "https://app.heyiris.io"


@dataclass
class Agent(IRISModel):
    """AI agent configured on the platform."""

    id: int = 0
    name: str = ""
    prompt: str = ""
    type: str = "assistant"
    model: str = "gpt-4o-mini"
    bloq_id: int | None = None
    is_public: bool = False
    slug: str | None = None
    capabilities: list[str] = field(default_factory=list)
    integrations: list[str] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Agent":
        settings = as_dict(data.get("settings"))
        # {"google-gemini": true, "slack": false} -> ["google-gemini"]
        enabled = as_dict(settings.get("agentIntegrations"))
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            name=data.get("name") or "",
            prompt=data.get("prompt") or data.get("system_prompt") or "",
            type=data.get("type") or "assistant",
            model=data.get("model") or "gpt-4o-mini",
            bloq_id=as_int(data.get("bloq_id")),
            is_public=bool(data.get("is_public", False)),
            slug=data.get("slug"),
            capabilities=as_list(data.get("capabilities")),
            integrations=[name for name, on in enabled.items() if on is True],
            settings=settings,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    def has_integration(self, integration: str) -> bool:
        return integration in self.integrations

    @property
    def has_knowledge_base(self) -> bool:
        return self.bloq_id is not None

    def public_url(self, base_url: str = PUBLIC_APP_URL) -> str | None:
        if not self.is_public or not self.slug:
            return None
        return f"{base_url}/agent/{self.slug}"

    def simple_url(self, base_url: str = PUBLIC_APP_URL) -> str:
        url = f"{base_url}/agent/simple/{self.id}"
        if self.bloq_id:
            url += f"?bloq={self.bloq_id}"
        return url


class AgentCollection(ModelCollection[Agent]):
    def find_by_name(self, name: str) -> Agent | None:
        lowered = name.lower()
        return next((a for a in self.items if a.name.lower() == lowered), None)


@dataclass
class ChatResponse(IRISModel):
    """Single-shot agent reply from generate-response."""

    content: str = ""
    model: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    thread_id: str | None = None
    used_rag: bool = False
    sources: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatResponse":
        usage = as_dict(data.get("usage"))
        prompt = as_int(data.get("prompt_tokens", usage.get("prompt_tokens")), 0)
        completion = as_int(data.get("completion_tokens", usage.get("completion_tokens")), 0)
        total = as_int(data.get("total_tokens", usage.get("total_tokens")), prompt + completion)
        return cls(
            attributes=cls._copy(data),
            content=data.get("content") or data.get("message") or data.get("response") or "",
            model=data.get("model"),
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=total,
            thread_id=data.get("thread_id"),
            used_rag=bool(data.get("used_rag", False)),
            sources=as_list(data.get("sources") or data.get("rag_sources")),
        )

    def __str__(self) -> str:
        return self.content

    @property
    def is_empty(self) -> bool:
        return not self.content.strip()

    def estimated_cost(self, input_cost_per_1k: float = 0.00015, output_cost_per_1k: float = 0.0006) -> float:
        """Rough USD cost from token usage."""
        return (
            self.prompt_tokens / 1000 * input_cost_per_1k
            + self.completion_tokens / 1000 * output_cost_per_1k
        )
