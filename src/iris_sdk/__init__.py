"""IRIS Python SDK - async client and CLI for the IRIS AI platform."""

from .config import IRISConfig, SDK_VERSION
from .errors import (
    IRISError,
    InvalidConfigurationError,
    UserIdRequiredError,
    NetworkError,
    APIError,
    AuthenticationError,
    ValidationError,
    RateLimitError,
    PollingTimeoutError,
    WorkflowFailedError,
)
from .api import IRISClient

__version__ = SDK_VERSION

__all__ = [
    "IRISClient",
    "IRISConfig",
    "IRISError",
    "InvalidConfigurationError",
    "UserIdRequiredError",
    "NetworkError",
    "APIError",
    "AuthenticationError",
    "ValidationError",
    "RateLimitError",
    "PollingTimeoutError",
    "WorkflowFailedError",
    "__version__",
]
