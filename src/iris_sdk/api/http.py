"""HTTP transport for the IRIS API.

Wraps httpx.AsyncClient with host routing, bearer auth, JSON decoding,
typed error mapping and GET-only retries.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, TYPE_CHECKING

import httpx

from ..errors import (
    APIError,
    AuthenticationError,
    NetworkError,
    RateLimitError,
    ValidationError,
)

if TYPE_CHECKING:
    from ..config import IRISConfig

logger = logging.getLogger(__name__)


# Endpoints served by the FL-API host. /users/ is checked first because
# /users/{id}/bloqs/agents lives there too.
FL_API_SEGMENTS = (
    "/users/",
    "/user/",
    "/leads",
    "/deliverables",
    "/profile",
    "/services",
    "/integrations",
    "/cloud-files",
    "/articles",
    "/bloqs/",
    "/programs",
    "/courses",
    "/pages",
    "/videos",
    "/collections",
    "/a2p/",
)

# Workflow and chat endpoints served by the IRIS host
IRIS_SEGMENTS = ("/iris/", "/chat/", "/workflows/")

DEFAULT_RETRY_AFTER = 60


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop None values and render booleans the way the API expects."""
    if not params:
        return None
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


def _normalize_field_errors(errors: Any) -> dict[str, list[str]]:
    if isinstance(errors, dict):
        return {
            str(field): [str(m) for m in messages] if isinstance(messages, list) else [str(messages)]
            for field, messages in errors.items()
        }
    if isinstance(errors, list):
        return {"general": [str(m) for m in errors]}
    return {}


class HTTPClient:
    """Async HTTP client for the IRIS API.

    Usage:
        http = HTTPClient(config)
        try:
            agents = await http.get("/api/v1/users/42/bloqs/agents", {"page": 1})
            result = await http.post("/api/chat/start", {"query": "hello"})
            stored = await http.upload("/api/v1/vector/store", "notes.pdf", {"tags": ["a"]})
        finally:
            await http.aclose()
    """

    def __init__(
        self,
        config: "IRISConfig",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self.last_request_id: str | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_url(self, endpoint: str) -> str:
        """Resolve an endpoint path to a full URL on the right host."""
        if endpoint.startswith(("http://", "https://")):
            return endpoint

        if any(segment in endpoint for segment in FL_API_SEGMENTS):
            host = self.config.fl_api_url
        elif any(segment in endpoint for segment in IRIS_SEGMENTS):
            host = self.config.iris_url
        else:
            host = self.config.base_url
        return f"{host}/{endpoint.lstrip('/')}"

    # HTTP methods
    async def get(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make GET request (retried on transient failures)."""
        return await self._request("GET", endpoint, params=params)

    async def post(self, endpoint: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make POST request."""
        return await self._request("POST", endpoint, json_body=data)

    async def put(self, endpoint: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make PUT request."""
        return await self._request("PUT", endpoint, json_body=data)

    async def patch(self, endpoint: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make PATCH request."""
        return await self._request("PATCH", endpoint, json_body=data)

    async def delete(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make DELETE request."""
        return await self._request("DELETE", endpoint, params=params)

    async def upload(
        self,
        endpoint: str,
        file_path: str | Path,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Upload a file as multipart form data.

        Args:
            endpoint: API endpoint
            file_path: Local file sent in the ``file`` part
            metadata: Extra form fields; dicts and lists are JSON-encoded

        Returns:
            Decoded JSON response
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        fields = {}
        for key, value in (metadata or {}).items():
            if value is None:
                continue
            fields[key] = json.dumps(value) if isinstance(value, (dict, list)) else str(value)

        with path.open("rb") as fh:
            return await self._request(
                "POST",
                endpoint,
                files={"file": (path.name, fh)},
                form=fields,
            )

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
        form: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = self.build_url(endpoint)
        attempts = self.config.retries + 1 if method == "GET" else 1

        for attempt in range(attempts):
            is_last = attempt + 1 >= attempts
            try:
                response = await self._send(method, url, params, json_body, files, form)
            except NetworkError as exc:
                if is_last:
                    raise
                await self._backoff(method, url, attempt, attempts, str(exc))
                continue

            if response.status_code >= 500 and not is_last:
                await self._backoff(method, url, attempt, attempts, f"HTTP {response.status_code}")
                continue

            return self._handle_response(response)

        # The loop always returns or raises on its final attempt
        raise NetworkError(f"Request failed: {method} {url}")

    async def _send(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        json_body: dict[str, Any] | None,
        files: dict[str, Any] | None,
        form: dict[str, Any] | None,
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        if self.config.debug and json_body is not None:
            logger.debug("Request body: %s", json.dumps(json_body, default=str))

        try:
            response = await self.client.request(
                method,
                url,
                params=_clean_params(params),
                json=json_body,
                files=files,
                data=form,
                headers=self.config.headers(),
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"Request failed: {method} {url}: {exc}") from exc

        logger.debug("Response %s for %s %s", response.status_code, method, url)
        return response

    async def _backoff(self, method: str, url: str, attempt: int, attempts: int, reason: str) -> None:
        delay = self.config.retry_backoff * (2 ** attempt)
        logger.warning(
            "Retrying %s %s after %s (attempt %d/%d, sleeping %.1fs)",
            method, url, reason, attempt + 2, attempts, delay,
        )
        await asyncio.sleep(delay)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        self.last_request_id = response.headers.get("x-request-id") or None

        if response.status_code >= 400:
            raise self._build_error(response)

        if not response.content:
            return {"success": True}

        try:
            data = response.json()
        except ValueError:
            raise APIError(
                f"Invalid JSON response from {response.request.url}",
                status_code=response.status_code,
                request_id=self.last_request_id,
                response_body=response.text,
            ) from None

        if isinstance(data, dict):
            return data
        return {"data": data}

    def _build_error(self, response: httpx.Response) -> APIError:
        """Map an error response to a typed exception."""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        status = response.status_code
        message = body.get("message") or body.get("error") or body.get("detail")
        if message is None:
            message = response.reason_phrase or f"HTTP {status}"
        elif not isinstance(message, str):
            message = json.dumps(message)

        kwargs = {
            "errors": _normalize_field_errors(body.get("errors")),
            "request_id": response.headers.get("x-request-id") or body.get("request_id"),
            "response_body": body or response.text,
        }

        logger.debug("API error %s: %s", status, message)

        if status in (401, 403):
            return AuthenticationError(message, status_code=status, **kwargs)
        if status == 422:
            return ValidationError(message, status_code=status, **kwargs)
        if status == 429:
            return RateLimitError(message, retry_after=self._retry_after(response), **kwargs)
        return APIError(message, status_code=status, **kwargs)

    @staticmethod
    def _retry_after(response: httpx.Response) -> int:
        value = response.headers.get("retry-after")
        try:
            return int(value) if value else DEFAULT_RETRY_AFTER
        except ValueError:
            return DEFAULT_RETRY_AFTER
