"""Marketplace API - Discover, install, publish and review skills."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from .payload import extract_list, extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class MarketplaceAPI:
    """Skills marketplace API for IRIS.

    Usage:
        async with IRISClient.from_env() as iris:
            # Discover
            skills = await iris.marketplace.search("calendar", category="productivity")
            skill = await iris.marketplace.get("google-calendar-sync")

            # Install with config
            await iris.marketplace.install(skill["slug"], {"calendar_id": "primary"})

            # Leave a review
            await iris.marketplace.review(skill["slug"], 5, "Works great")
    """

    BASE = "/api/v1/marketplace/skills"

    def __init__(self, client: "IRISClient"):
        self._client = client

    # Discovery
    async def search(self, query: str | None = None, **filters) -> list[dict[str, Any]]:
        """Search published skills.

        Args:
            query: Free-text search
            **filters: category, sort, page, per_page, ...
        """
        if query:
            filters["q"] = query
        response = await self._client._get(self.BASE, **filters)
        return extract_list(response, "data.data", "data", "skills")

    async def get(self, slug: str) -> dict[str, Any]:
        response = await self._client._get(f"{self.BASE}/{slug}")
        return extract_payload(response, "data.skill", "skill", "data")

    async def categories(self) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/categories")
        return extract_list(response, "data", "categories")

    async def featured(self) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/featured")
        return extract_list(response, "data", "skills")

    async def versions(self, slug: str) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/{slug}/versions")
        return extract_list(response, "data", "versions")

    async def reviews(self, slug: str) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/{slug}/reviews")
        return extract_list(response, "data.data", "data", "reviews")

    # Publishing
    async def publish(self, manifest: dict[str, Any], **options) -> dict[str, Any]:
        """Publish a new skill from its manifest."""
        response = await self._client._post(self.BASE, {"manifest": manifest, **options})
        return extract_payload(response, "data.skill", "skill", "data")

    async def update(self, slug: str, data: dict[str, Any]) -> dict[str, Any]:
        response = await self._client._put(f"{self.BASE}/{slug}", data)
        return extract_payload(response, "data.skill", "skill", "data")

    async def publish_version(
        self, slug: str, manifest: dict[str, Any], changelog: str | None = None
    ) -> dict[str, Any]:
        payload = {"manifest": manifest}
        if changelog:
            payload["changelog"] = changelog
        response = await self._client._post(f"{self.BASE}/{slug}/versions", payload)
        return extract_payload(response, "data")

    async def unpublish(self, slug: str) -> dict[str, Any]:
        return await self._client._delete(f"{self.BASE}/{slug}")

    # Installation
    async def install(self, slug: str, config: dict[str, Any] | None = None) -> dict[str, Any]:
        """Install a skill for the current user.

        Args:
            slug: Skill slug
            config: Skill-specific settings
        """
        response = await self._client._post(
            f"{self.BASE}/{slug}/install", {"config": config or {}}
        )
        return extract_payload(response, "data")

    async def uninstall(self, slug: str) -> dict[str, Any]:
        return await self._client._delete(f"{self.BASE}/{slug}/install")

    async def purchase(self, slug: str) -> dict[str, Any]:
        """Buy a paid skill. May return a checkout_url to complete payment."""
        response = await self._client._post(f"{self.BASE}/{slug}/purchase")
        return extract_payload(response, "data")

    async def installed(self) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/my/installed")
        return extract_list(response, "data", "skills")

    async def published(self) -> list[dict[str, Any]]:
        response = await self._client._get(f"{self.BASE}/my/published")
        return extract_list(response, "data", "skills")

    # Reviews
    async def review(self, slug: str, rating: int, review_text: str | None = None) -> dict[str, Any]:
        """Rate a skill from 1 to 5.

        Raises:
            ValueError: rating outside 1-5
        """
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")
        payload: dict[str, Any] = {"rating": rating}
        if review_text:
            payload["review_text"] = review_text
        response = await self._client._post(f"{self.BASE}/{slug}/reviews", payload)
        return extract_payload(response, "data")

    async def respond_to_review(self, review_id: int, response_text: str) -> dict[str, Any]:
        """Reply to a review of one of your skills."""
        response = await self._client._post(
            f"/api/v1/marketplace/reviews/{review_id}/respond", {"response": response_text}
        )
        return extract_payload(response, "data")
