"""Integrations API - Connect third-party services and run their actions."""

from __future__ import annotations

import logging
from typing import Any, TYPE_CHECKING

from ..models.integrations import Integration, IntegrationCollection, IntegrationTestResult
from .payload import extract_list, extract_meta, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

logger = logging.getLogger(__name__)

OAUTH_TYPES = ("google-drive", "google-calendar", "gmail", "slack", "github", "mailchimp")
API_KEY_TYPES = ("vapi", "servis-ai", "smtp-email", "mailjet", "google-gemini", "savelife-ai")


class IntegrationsAPI:
    """Integrations API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # What is connected?
            for integration in await iris.integrations.connected():
                print(integration.type, integration.status)

            # Connect an API-key service
            await iris.integrations.connect_with_api_key("mailjet", {"api_key": "..."})

            # OAuth services need a browser round-trip
            url = await iris.integrations.oauth_url("gmail")

            # Run an action through a connected service
            await iris.integrations.execute("gmail", "send_email", {"to": "a@b.co"})
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_id(self) -> int:
        return self._client.config.require_user_id()

    @property
    def _base(self) -> str:
        return f"/api/v1/users/{self._user_id}/integrations"

    async def list(self, **params) -> IntegrationCollection:
        response = await self._client._get(self._base, **params)
        return IntegrationCollection.from_items(
            extract_list(response, "data.data", "data", "integrations"),
            Integration.from_dict,
            extract_meta(response),
        )

    async def get(self, integration_id: int) -> Integration:
        response = await self._client._get(f"{self._base}/{integration_id}")
        return Integration.from_dict(
            extract_payload(response, "data.integration", "integration", "data")
        )

    async def create(self, data: dict[str, Any]) -> Integration:
        response = await self._client._post(self._base, data)
        return Integration.from_dict(
            extract_payload(response, "data.integration", "integration", "data")
        )

    async def update(self, integration_id: int, data: dict[str, Any]) -> Integration:
        response = await self._client._put(f"{self._base}/{integration_id}", data)
        return Integration.from_dict(
            extract_payload(response, "data.integration", "integration", "data")
        )

    async def delete(self, integration_id: int) -> dict[str, Any]:
        return await self._client._delete(f"{self._base}/{integration_id}")

    async def test(self, integration_id: int) -> IntegrationTestResult:
        """Check stored credentials still work against the provider."""
        response = await self._client._post(f"{self._base}/{integration_id}/test")
        return IntegrationTestResult.from_dict(extract_payload(response, "data"))

    async def types(self) -> dict[str, Any]:
        """Available integration types keyed by type slug."""
        response = await self._client._get("/api/v1/integrations/types")
        types = extract_payload(response, "data", "types")
        if isinstance(types, list):
            return {t["type"]: t for t in types if isinstance(t, dict) and "type" in t}
        return types if isinstance(types, dict) else {}

    async def oauth_url(self, integration_type: str) -> str | None:
        """URL the user must visit to authorize an OAuth integration."""
        response = await self._client._get(f"{self._base}/oauth-url/{integration_type}")
        return extract_payload(response, "url", "data.url", "oauth_url", default=None)

    async def execute(
        self,
        integration: str,
        action: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run an action through a connected integration.

        Args:
            integration: Integration type, e.g. "gmail"
            action: Action name, e.g. "send_email"
            params: Action arguments
        """
        response = await self._client._post(
            f"{self._base}/execute",
            {"integration": integration, "action": action, "params": params or {}},
        )
        return extract_payload(response, "data")

    async def connected(self) -> IntegrationCollection:
        return (await self.list()).connected()

    async def status(self, integration_type: str) -> Integration | None:
        """The connected integration of a type, or None."""
        integrations = await self.connected()
        return integrations.find_by_type(integration_type)

    async def disconnect(self, integration_type: str) -> bool:
        """Delete the integration of a type. False when there is none."""
        integration = (await self.list()).find_by_type(integration_type)
        if integration is None:
            return False
        await self.delete(integration.id)
        logger.info("Disconnected %s integration %s", integration_type, integration.id)
        return True

    async def connect_with_api_key(
        self,
        integration_type: str,
        credentials: dict[str, Any],
        name: str | None = None,
    ) -> Integration:
        """Create an API-key integration after checking the type exists.

        Raises:
            ValueError: Unknown integration type
        """
        types = await self.types()
        type_info = types.get(integration_type)
        if type_info is None:
            raise ValueError(f"Unknown integration type: {integration_type}")

        return await self.create({
            "name": name or type_info.get("name") or integration_type.replace("-", " ").title(),
            "type": integration_type,
            "category": type_info.get("category", "automation"),
            "credentials": credentials,
        })

    @staticmethod
    def uses_oauth(integration_type: str) -> bool:
        return integration_type in OAUTH_TYPES

    @staticmethod
    def uses_api_key(integration_type: str) -> bool:
        return integration_type in API_KEY_TYPES
