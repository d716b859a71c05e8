"""Phone API - Provision phone numbers and attach them to voice agents."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .payload import extract_list, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient

SUPPORTED_PROVIDERS = ("vapi", "twilio", "telnyx")


def _check_provider(provider: str) -> str:
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(
            f"Unsupported phone provider '{provider}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )
    return provider


class PhoneAPI:
    """Phone number API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # Find and buy a number
            numbers = await iris.phone.search("twilio", area_code="415")
            bought = await iris.phone.buy(numbers[0]["phone_number"], "twilio")

            # Route calls to an agent
            await iris.phone.configure(bought["id"], agent_id=11, provider="twilio")

            # Detach it again
            await iris.phone.release(bought["id"], agent_id=11, provider="twilio")
    """

    BASE = "/api/v1/phone"

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_id(self) -> int:
        return self._client.config.require_user_id()

    async def list(self, provider: str = "vapi") -> list[dict[str, Any]]:
        """List numbers owned through one provider."""
        _check_provider(provider)
        response = await self._client._get(
            f"{self.BASE}/list", user_id=self._user_id, provider=provider
        )
        return extract_list(response, "data", "phone_numbers", "numbers")

    async def list_all(self) -> list[dict[str, Any]]:
        """List numbers across all providers."""
        response = await self._client._get(f"{self.BASE}/list-all", user_id=self._user_id)
        return extract_list(response, "data", "phone_numbers", "numbers")

    async def search(self, provider: str = "twilio", **criteria) -> list[dict[str, Any]]:
        """Search numbers available to buy.

        Args:
            provider: Provider to search
            **criteria: area_code, country, contains, limit, ...

        Returns:
            List of available numbers
        """
        _check_provider(provider)
        response = await self._client._get(
            f"{self.BASE}/search", user_id=self._user_id, provider=provider, **criteria
        )
        return extract_list(response, "data", "available_numbers", "numbers")

    async def buy(self, phone_number: str, provider: str = "twilio", **options) -> dict[str, Any]:
        """Buy a phone number.

        Args:
            phone_number: E.164 number from search()
            provider: Provider to buy from
            **options: agent_id, friendly_name, ...
        """
        _check_provider(provider)
        response = await self._client._post(
            f"{self.BASE}/buy",
            {"user_id": self._user_id, "phone_number": phone_number, "provider": provider, **options},
        )
        return extract_payload(response, "data")

    async def delete(self, phone_id: str, provider: str) -> dict[str, Any]:
        """Release a number back to the provider."""
        _check_provider(provider)
        return await self._client._delete(
            f"{self.BASE}/delete", user_id=self._user_id, phone_id=phone_id, provider=provider
        )

    async def configure(
        self, phone_id: str, agent_id: int | None, provider: str = "vapi", **options
    ) -> dict[str, Any]:
        """Point inbound calls on a number at an agent (None detaches)."""
        _check_provider(provider)
        response = await self._client._post(
            f"{self.BASE}/configure",
            {
                "user_id": self._user_id,
                "phone_id": phone_id,
                "agent_id": agent_id,
                "provider": provider,
                **options,
            },
        )
        return extract_payload(response, "data")

    async def release(self, phone_id: str, agent_id: int, provider: str = "vapi") -> dict[str, Any]:
        """Detach an agent from a number, keeping the number."""
        _check_provider(provider)
        response = await self._client._post(
            f"{self.BASE}/release",
            {"user_id": self._user_id, "phone_id": phone_id, "agent_id": agent_id, "provider": provider},
        )
        return extract_payload(response, "data")

    async def get(self, phone_id: str, provider: str = "vapi") -> dict[str, Any]:
        """Get one number's details."""
        _check_provider(provider)
        response = await self._client._get(
            f"{self.BASE}/get", user_id=self._user_id, phone_id=phone_id, provider=provider
        )
        return extract_payload(response, "data")

    async def providers(self) -> list[dict[str, Any]]:
        """Providers configured for this account."""
        response = await self._client._get(f"{self.BASE}/providers", user_id=self._user_id)
        return extract_list(response, "data", "providers")

    async def is_provider_available(self, provider: str) -> bool:
        _check_provider(provider)
        response = await self._client._get(
            f"{self.BASE}/provider-available", user_id=self._user_id, provider=provider
        )
        payload = extract_payload(response, "data")
        return bool(payload.get("available", False)) if isinstance(payload, dict) else False

    async def assign(self, phone_id: str, agent_id: int, provider: str = "vapi") -> dict[str, Any]:
        return await self.configure(phone_id, agent_id, provider)

    async def unassign(self, phone_id: str, provider: str = "vapi") -> dict[str, Any]:
        return await self.configure(phone_id, None, provider)
