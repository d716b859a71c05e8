"""Social publishing results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, as_dict, as_int


@dataclass
class SocialPublishResult(IRISModel):
    success: bool = False
    request_id: str | None = None
    message: str | None = None
    platform_results: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SocialPublishResult":
        return cls(
            attributes=cls._copy(data),
            success=bool(data.get("success", False)),
            request_id=data.get("request_id"),
            message=data.get("message"),
            platform_results=as_dict(data.get("data")),
            error=data.get("error"),
        )

    def platform_result(self, platform: str) -> dict[str, Any] | None:
        result = self.platform_results.get(platform)
        return result if isinstance(result, dict) else None

    def platform_succeeded(self, platform: str) -> bool:
        result = self.platform_result(platform)
        if not result:
            return False
        return bool(result.get("success")) or result.get("status") == "success"

    def post_url(self, platform: str) -> str | None:
        result = self.platform_result(platform) or {}
        return result.get("url") or result.get("post_url")

    def post_id(self, platform: str) -> str | None:
        result = self.platform_result(platform) or {}
        return result.get("id") or result.get("post_id")

    def successful_platforms(self) -> list[str]:
        return [p for p in self.platform_results if self.platform_succeeded(p)]


@dataclass
class SocialStatusResult(IRISModel):
    success: bool = True
    status: str | None = None
    completed: int = 0
    total: int = 0
    platforms: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SocialStatusResult":
        return cls(
            attributes=cls._copy(data),
            success=bool(data.get("success", True)),
            status=data.get("status"),
            completed=as_int(data.get("completed"), 0),
            total=as_int(data.get("total"), 0),
            platforms=as_dict(data.get("platforms")),
            error=data.get("error"),
        )

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed >= self.total

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100
