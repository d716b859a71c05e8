"""Third-party integration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_dict, as_float, as_int

CONNECTED_STATUSES = ("connected", "active")


@dataclass
class Integration(IRISModel):
    id: int = 0
    type: str = ""
    name: str = ""
    status: str = "disconnected"
    capabilities: list[str] | None = None
    config: dict[str, Any] | None = None
    is_oauth: bool = False
    last_synced_at: str | None = None
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Integration":
        capabilities = data.get("capabilities")
        config = data.get("config")
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            type=data.get("type") or "",
            name=data.get("name") or "",
            status=data.get("status") or "disconnected",
            capabilities=capabilities if isinstance(capabilities, list) else None,
            config=config if isinstance(config, dict) else None,
            is_oauth=bool(data.get("is_oauth", False)),
            last_synced_at=data.get("last_synced_at"),
            created_at=data.get("created_at"),
        )

    @property
    def is_connected(self) -> bool:
        return self.status in CONNECTED_STATUSES

    @property
    def is_disconnected(self) -> bool:
        return self.status == "disconnected"

    @property
    def has_error(self) -> bool:
        return self.status == "error"

    @property
    def is_expired(self) -> bool:
        return self.status == "expired" or self.has_error

    @property
    def error_message(self) -> str | None:
        return self.get_attribute("error_message")

    def has_capability(self, capability: str) -> bool:
        return capability in (self.capabilities or [])


class IntegrationCollection(ModelCollection[Integration]):
    def connected(self) -> "IntegrationCollection":
        return self.filter(lambda i: i.is_connected)

    def by_type(self, integration_type: str) -> "IntegrationCollection":
        return self.filter(lambda i: i.type == integration_type)

    def find_by_type(self, integration_type: str) -> Integration | None:
        return next((i for i in self.items if i.type == integration_type), None)

    def filter_by_status(self, status: str) -> "IntegrationCollection":
        return self.filter(lambda i: i.status == status)

    def types(self) -> list[str]:
        return [i.type for i in self.items]


@dataclass
class IntegrationTestResult(IRISModel):
    success: bool = False
    message: str | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
    latency_ms: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntegrationTestResult":
        return cls(
            attributes=cls._copy(data),
            success=bool(data.get("success", False)),
            message=data.get("message"),
            error=data.get("error"),
            details=as_dict(data.get("details")),
            latency_ms=as_float(data.get("latency_ms", data.get("latency"))),
        )

    @property
    def latency_seconds(self) -> float | None:
        if self.latency_ms is None:
            return None
        return self.latency_ms / 1000
