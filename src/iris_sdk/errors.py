"""IRIS SDK exceptions.

Every error raised by the SDK derives from IRISError. HTTP failures are
translated into these types at the transport boundary, so callers never
see raw httpx exceptions.
"""

from __future__ import annotations

from typing import Any


class IRISError(Exception):
    """Base exception for IRIS API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: dict[str, list[str]] | None = None,
        request_id: str | None = None,
        response_body: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}
        self.request_id = request_id
        self.response_body = response_body
        super().__init__(self.message)

    def formatted_message(self) -> str:
        """Message with request id appended for support correlation."""
        if self.request_id:
            return f"{self.message} (request id: {self.request_id})"
        return self.message


class InvalidConfigurationError(IRISError):
    """Client configuration is missing or invalid."""

    pass


class UserIdRequiredError(InvalidConfigurationError):
    """Operation needs a user id but none is configured."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "user_id is required for this operation. "
            "Set it in the config or use as_user(user_id)"
        )


class NetworkError(IRISError):
    """Transport-level failure (connection refused, DNS, timeout)."""

    pass


class APIError(IRISError):
    """Remote API returned an error status."""

    pass


class AuthenticationError(APIError):
    """Invalid API key or insufficient permissions (401/403)."""

    pass


class ValidationError(APIError):
    """Request payload was rejected (422)."""

    def get_field_errors(self, field: str) -> list[str]:
        """Messages reported for a single field."""
        messages = self.errors.get(field, [])
        if isinstance(messages, str):
            return [messages]
        return list(messages)

    def has_field_error(self, field: str) -> bool:
        return bool(self.get_field_errors(field))

    def error_fields(self) -> list[str]:
        return list(self.errors.keys())

    def all_messages(self) -> list[str]:
        """Flatten all field messages into one list."""
        messages: list[str] = []
        for field in self.errors:
            messages.extend(self.get_field_errors(field))
        return messages


class RateLimitError(APIError):
    """Too many requests (429)."""

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        super().__init__(message, status_code=429, **kwargs)
        self.retry_after = retry_after

    def should_retry(self) -> bool:
        """Worth waiting for, i.e. the server asked for at most five minutes."""
        return 0 < self.retry_after <= 300


class PollingTimeoutError(IRISError):
    """Polling gave up before the remote job reached a terminal state.

    The remote workflow or job keeps running; only the client stopped
    watching it.
    """

    def __init__(self, message: str, workflow_id: str | None = None, elapsed: float | None = None):
        super().__init__(message)
        self.workflow_id = workflow_id
        self.elapsed = elapsed


class WorkflowFailedError(IRISError):
    """The server reported the workflow as failed."""

    def __init__(self, message: str, workflow_id: str | None = None, response_body: Any = None):
        super().__init__(message, response_body=response_body)
        self.workflow_id = workflow_id
