"""Leads API - CRM lead management, notes, enrichment and deliverables."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.leads import Lead, LeadCollection
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

DEFAULT_DELIVERABLE_SUBJECT = "Your deliverables are ready"


class LeadsAPI:
    """Leads API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # List leads (all visible, or only the current user's)
            leads = await iris.leads.list(search="acme", status="new")
            mine = await iris.leads.list(scope_to_user=True)

            # Create lead (must belong to a bloq)
            lead = await iris.leads.create({"name": "Ada", "bloq_id": 40})

            # Notes and enrichment
            await iris.leads.add_note(lead.id, "Called, left voicemail")
            await iris.leads.enrich(lead.id, auto_update=True)

            # Deliverables for a lead
            await iris.leads.deliverables(lead.id).generate_and_send(deliverable_ids=[5, 6])
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_id(self) -> int:
        return self._client.config.require_user_id()

    async def list(self, scope_to_user: bool = False, **filters) -> LeadCollection:
        """List leads.

        Args:
            scope_to_user: Only leads owned by the current user
            **filters: search, status, stage_id, bloq_id, page, per_page, ...

        Returns:
            LeadCollection with pagination meta
        """
        if scope_to_user:
            endpoint = f"/api/v1/users/{self._user_id}/leads"
        else:
            endpoint = "/api/v1/leads"
        response = await self._client._get(endpoint, **filters)
        return LeadCollection.from_items(
            extract_list(response, "data.data", "data", "leads"),
            Lead.from_dict,
            extract_meta(response),
        )

    async def get(self, lead_id: int) -> Lead:
        """Get lead details."""
        response = await self._client._get(f"/api/v1/leads/{lead_id}")
        return Lead.from_dict(extract_payload(response, "data.lead", "lead", "data"))

    async def create(self, data: dict[str, Any]) -> Lead:
        """Create a new lead.

        Args:
            data: Lead fields; ``bloq_id`` is required

        Returns:
            Created Lead
        """
        if not (data.get("bloq_id") or data.get("bloqId")):
            raise ValueError(
                "bloq_id is required when creating a lead. Leads must be associated with a bloq."
            )
        response = await self._client._post("/api/v1/leads", data)
        return Lead.from_dict(extract_payload(response, "data.lead", "lead", "data"))

    async def update(self, lead_id: int, data: dict[str, Any]) -> Lead:
        """Update a lead."""
        response = await self._client._put(f"/api/v1/leads/{lead_id}", data)
        return Lead.from_dict(extract_payload(response, "data.lead", "lead", "data"))

    async def delete(self, lead_id: int) -> dict[str, Any]:
        """Delete a lead."""
        return await self._client._delete(f"/api/v1/leads/{lead_id}")

    async def add_note(
        self, lead_id: int, content: str, type: str = "note", **metadata
    ) -> dict[str, Any]:
        """Add a note to a lead.

        Args:
            lead_id: The lead ID
            content: Note text
            type: Note type (note, call, email, meeting)
            **metadata: Extra note fields
        """
        return await self._client._post(
            f"/api/v1/leads/{lead_id}/notes",
            {"message": content, "type": type, **metadata},
        )

    async def tags(self) -> list[dict[str, Any]]:
        """Lead tags defined by the current user."""
        response = await self._client._get(f"/api/v1/user/{self._user_id}/lead-tags")
        return extract_list(response, "data", "tags")

    async def stages(self) -> list[dict[str, Any]]:
        """Pipeline stages defined by the current user."""
        response = await self._client._get(f"/api/v1/user/{self._user_id}/lead-stages")
        return extract_list(response, "data", "stages")

    async def enrich(self, lead_id: int, **options) -> dict[str, Any]:
        """Run AI enrichment (web research) on a lead.

        Args:
            lead_id: The lead ID
            **options: e.g. auto_update=True to write found fields back
        """
        return await self._client._post(f"/api/v1/leads/{lead_id}/enrich", options)

    async def enrichment_status(self, lead_id: int) -> dict[str, Any]:
        """Get enrichment progress for a lead."""
        return await self._client._get(f"/api/v1/leads/{lead_id}/enrichment-status")

    def deliverables(self, lead_id: int) -> "DeliverablesAPI":
        """Deliverables scoped to one lead."""
        return DeliverablesAPI(self._client, lead_id)


class DeliverablesAPI:
    """Files and links delivered to a lead, and the emails announcing them."""

    def __init__(self, client: "IRISClient", lead_id: int):
        self._client = client
        self.lead_id = lead_id

    @property
    def _base(self) -> str:
        return f"/api/v1/leads/{self.lead_id}/deliverables"

    async def list(self) -> list[dict[str, Any]]:
        response = await self._client._get(self._base)
        return extract_list(response, "deliverables", "data.deliverables", "data")

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._client._post(self._base, data)
        return extract_payload(response, "data.deliverable", "deliverable")

    async def update(self, deliverable_id: int, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._client._patch(f"{self._base}/{deliverable_id}", data)
        return extract_payload(response, "data.deliverable", "deliverable")

    async def delete(self, deliverable_id: int) -> dict[str, Any]:
        return await self._client._delete(f"{self._base}/{deliverable_id}")

    async def preview_email(self, **options) -> dict[str, Any]:
        """Generate (but do not send) the delivery email.

        Returns:
            {"subject": ..., "body": ...}
        """
        response = await self._client._post(f"{self._base}/preview-email", options)
        return extract_payload(response, "data")

    async def send(self, **options) -> dict[str, Any]:
        """Send the delivery email."""
        response = await self._client._post(f"{self._base}/send", options)
        return extract_payload(response, "data")

    async def generate_and_send(self, **options) -> dict[str, Any]:
        """Preview an AI-written email, then send it.

        Makes two requests. The body comes from the preview, else
        ``email_content``; the subject from the preview, else ``subject``,
        else a generic subject line.

        Args:
            **options: deliverable_ids, recipient_email, custom_instructions, ...
        """
        preview = await self.preview_email(**{**options, "message_mode": "ai"})
        send_options = {
            **options,
            "email_content": preview.get("body") or options.get("email_content") or "",
            "subject": preview.get("subject") or options.get("subject") or DEFAULT_DELIVERABLE_SUBJECT,
        }
        return await self.send(**send_options)
