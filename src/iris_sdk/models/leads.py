"""Lead (CRM contact) models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .base import IRISModel, ModelCollection, as_float, as_int, as_list

HOT_LEAD_SCORE = 80


def _parse_contact_info(value: Any) -> dict[str, Any]:
    """contact_info arrives either as an object or as a JSON-encoded string."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return {}
    return value if isinstance(value, dict) else {}


@dataclass
class Lead(IRISModel):
    """CRM lead."""

    id: int = 0
    name: str = ""
    nickname: str | None = None
    email: str | None = None
    phone: str | None = None
    company: str | None = None
    title: str | None = None
    source: str | None = None
    status: str | None = None
    lead_type: str | None = None
    stage_id: int | None = None
    stage_name: str | None = None
    outreach_agent_id: int | None = None
    score: float | None = None
    tags: list[Any] = field(default_factory=list)
    custom_fields: dict[str, Any] | None = None
    contact_info: dict[str, Any] = field(default_factory=dict)
    notes: Any = None
    last_contacted_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lead":
        contact = _parse_contact_info(data.get("contact_info"))
        custom = data.get("custom_fields")
        return cls(
            attributes=cls._copy(data),
            id=as_int(data.get("id"), 0),
            name=data.get("name") or data.get("nickname") or "",
            nickname=data.get("nickname"),
            email=data.get("email") or contact.get("email"),
            phone=data.get("phone") or contact.get("phone"),
            company=data.get("company") or contact.get("company"),
            title=data.get("title"),
            source=data.get("source"),
            status=data.get("status"),
            lead_type=data.get("lead_type"),
            stage_id=as_int(data.get("stage_id")),
            stage_name=data.get("stage_name"),
            outreach_agent_id=as_int(data.get("outreach_agent_id")),
            score=as_float(data.get("score")),
            tags=as_list(data.get("tags")),
            custom_fields=custom if isinstance(custom, dict) else None,
            contact_info=contact,
            notes=data.get("notes"),
            last_contacted_at=data.get("last_contacted_at"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    @property
    def has_email(self) -> bool:
        return bool(self.email)

    @property
    def has_phone(self) -> bool:
        return bool(self.phone)

    @property
    def is_hot(self) -> bool:
        return self.score is not None and self.score > HOT_LEAD_SCORE

    def has_tag(self, tag: str) -> bool:
        # Tags come back either as plain names or as {"name": ...} objects
        for t in self.tags:
            name = t.get("name") if isinstance(t, dict) else t
            if name == tag:
                return True
        return False


class LeadCollection(ModelCollection[Lead]):
    def hot(self) -> "LeadCollection":
        return self.filter(lambda lead: lead.is_hot)

    def with_email(self) -> "LeadCollection":
        return self.filter(lambda lead: lead.has_email)
