"""Usage API - Consumption, quotas, credits and billing for the current user."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .client import IRISClient


class UsageAPI:
    """Usage and billing API for IRIS.

    Every method returns the server's JSON as-is.

    Usage:
        async with IRISClient.from_env() as iris:
            quota = await iris.usage.quota()
            credits = await iris.usage.credit_status()
            by_agent = await iris.usage.by_agent(period="month")
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    @property
    def _user_id(self) -> int:
        return self._client.config.require_user_id()

    @property
    def _base(self) -> str:
        return f"/api/v1/users/{self._user_id}"

    # Consumption
    async def summary(self) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/summary")

    async def details(self, **options) -> dict[str, Any]:
        """Itemized usage; options such as start_date, end_date, type."""
        return await self._client._get(f"{self._base}/usage/details", **options)

    async def by_agent(self, **options) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/by-agent", **options)

    async def by_model(self, **options) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/by-model", **options)

    async def quota(self) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/quota")

    async def history(self, months: int = 6) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/history", months=months)

    async def workflow_stats(self, **options) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/workflows", **options)

    async def storage(self) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/usage/storage")

    # Billing
    async def billing(self) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/billing")

    async def package(self) -> dict[str, Any]:
        return await self._client._get(f"{self._base}/package")

    async def credit_status(self) -> dict[str, Any]:
        return await self._client._get("/api/v1/billing/credit-status", user_id=self._user_id)

    async def credit_history(self, **options) -> dict[str, Any]:
        return await self._client._get(
            "/api/v1/billing/credit-history", user_id=self._user_id, **options
        )

    async def subscription(self) -> dict[str, Any]:
        return await self._client._get("/api/v1/billing/subscription", user_id=self._user_id)

    async def available_plans(self) -> dict[str, Any]:
        return await self._client._get("/api/v1/billing/plans")
