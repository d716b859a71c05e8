"""Social API - Publish text, photos and videos to social platforms."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..models.social import SocialPublishResult, SocialStatusResult
from .payload import extract_payload

if TYPE_CHECKING:
    from .client import IRISClient


class SocialAPI:
    """Social publishing API for IRIS.

    Publishing is asynchronous on the server: the publish calls return a
    ``request_id`` which get_status() reports progress for.

    Usage:
        async with IRISClient.from_env() as iris:
            result = await iris.social.publish_text({
                "text": "We just shipped v2!",
                "platforms": ["twitter", "linkedin"],
            })

            status = await iris.social.get_status(result.request_id)
            print(status.percentage)

            await iris.social.publish_instagram_reel("/tmp/clip.mp4", "Launch day")
    """

    def __init__(self, client: "IRISClient"):
        self._client = client

    async def _publish(self, kind: str, params: dict[str, Any]) -> SocialPublishResult:
        response = await self._client._post(f"/api/social/publish-{kind}", params)
        # Per-platform results live under "data"; the envelope carries request_id
        return SocialPublishResult.from_dict(response)

    async def publish_text(self, params: dict[str, Any]) -> SocialPublishResult:
        """Publish a text post.

        Args:
            params: ``text`` and ``platforms``, plus optional ``options``
        """
        return await self._publish("text", params)

    async def publish_video(self, params: dict[str, Any]) -> SocialPublishResult:
        """Publish a video.

        Args:
            params: ``file_path`` or ``url``, ``title``, ``platforms``,
                plus optional ``options``
        """
        return await self._publish("video", params)

    async def publish_photo(self, params: dict[str, Any]) -> SocialPublishResult:
        """Publish one or more photos."""
        return await self._publish("photo", params)

    async def publish_instagram_reel(
        self, video_path: str, title: str, **options
    ) -> SocialPublishResult:
        return await self.publish_video({
            "file_path": video_path,
            "title": title,
            "platforms": ["instagram"],
            "options": {"media_type": "REELS", "share_to_feed": True, **options},
        })

    async def publish_tiktok(self, video_path: str, title: str, **options) -> SocialPublishResult:
        return await self.publish_video({
            "file_path": video_path,
            "title": title,
            "platforms": ["tiktok"],
            "options": options,
        })

    async def publish_compilation(self, params: dict[str, Any]) -> SocialPublishResult:
        """Stitch several clips into one video and publish it."""
        return await self._publish("compilation", params)

    async def get_status(self, request_id: str) -> SocialStatusResult:
        """Progress of a publish request across its platforms."""
        response = await self._client._get("/api/social/status", request_id=request_id)
        return SocialStatusResult.from_dict(extract_payload(response, "data"))

    async def get_history(self, **params) -> dict[str, Any]:
        return await self._client._get("/api/social/history", **params)
