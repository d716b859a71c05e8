"""IRIS client configuration.

Holds credentials, endpoint hosts and timing settings shared by the HTTP
client and every resource API. Can be built directly, from environment
variables (with optional .env file), or from the local credential store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TYPE_CHECKING

from dotenv import load_dotenv

from .errors import InvalidConfigurationError, UserIdRequiredError

if TYPE_CHECKING:
    from .auth.storage import CredentialStore


SDK_VERSION = "1.0.0"

DEFAULT_BASE_URL = "https://apiv2.heyiris.io"
DEFAULT_IRIS_URL = "https://heyiris.io"
DEFAULT_FL_API_URL = "https://apiv2.heyiris.io"

# Used when IRIS_ENV=local and no explicit URL is set
LOCAL_IRIS_URL = "https://local.iris.freelabel.net"
LOCAL_FL_API_URL = "https://local.raichu.freelabel.net"

_TRUTHY = {"1", "true", "yes", "on"}


def mask_secret(value: str | None) -> str | None:
    """Show first and last 4 chars of a secret, hide the rest."""
    if not isinstance(value, str) or len(value) <= 8:
        return value
    return value[:4] + "****" + value[-4:]


def _coerce_user_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"user_id must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"user_id must be an integer, got {value!r}") from None


def _env_number(name: str, cast: Any) -> Any:
    raw = os.environ.get(name)
    try:
        return cast(raw)
    except ValueError:
        raise InvalidConfigurationError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class IRISConfig:
    """IRIS API configuration."""

    api_key: str = ""
    user_id: int | None = None
    base_url: str = DEFAULT_BASE_URL
    iris_url: str = DEFAULT_IRIS_URL
    fl_api_url: str = DEFAULT_FL_API_URL
    timeout: float = 30.0
    retries: int = 3
    retry_backoff: float = 1.0  # seconds, doubled on each retry
    polling_interval: float = 0.5  # seconds between status polls
    max_polling_duration: float = 300.0  # seconds before execute() gives up
    webhook_secret: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise InvalidConfigurationError(
                "api_key is required. Set IRIS_API_KEY in your environment or .env, "
                "pass it explicitly, or run 'iris config setup'."
            )
        self.api_key = self.api_key.strip()
        self.user_id = _coerce_user_id(self.user_id)

        if self.timeout <= 0:
            raise InvalidConfigurationError("timeout must be positive")
        if self.retries < 0:
            raise InvalidConfigurationError("retries cannot be negative")
        if self.polling_interval < 0:
            raise InvalidConfigurationError("polling_interval cannot be negative")
        if self.max_polling_duration < 0:
            raise InvalidConfigurationError("max_polling_duration cannot be negative")

        self.base_url = self.base_url.rstrip("/")
        self.iris_url = self.iris_url.rstrip("/")
        self.fl_api_url = self.fl_api_url.rstrip("/")

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, **overrides: Any) -> "IRISConfig":
        """Load config from environment variables.

        A .env file (current directory, or ``env_file``) is loaded first
        without overriding variables already present in the environment.
        IRIS_ENV selects between ``production`` (default) and ``local``
        keys and hosts.

        Args:
            env_file: Optional path to a .env file
            **overrides: Explicit values; take precedence over the environment

        Returns:
            IRISConfig
        """
        load_dotenv(env_file if env_file else Path.cwd() / ".env", override=False)

        env = os.environ.get
        environment = env("IRIS_ENV", "production")
        values: dict[str, Any] = {}

        if environment == "local":
            api_key = env("IRIS_LOCAL_API_KEY") or env("IRIS_API_KEY")
            local_url = env("IRIS_LOCAL_URL") or LOCAL_IRIS_URL
            values["base_url"] = local_url
            values["iris_url"] = local_url
            values["fl_api_url"] = env("FL_API_LOCAL_URL") or LOCAL_FL_API_URL
        else:
            api_key = env("IRIS_API_KEY") or env("IRIS_PROD_API_KEY")
            values["base_url"] = env("IRIS_API_URL") or DEFAULT_BASE_URL
            values["iris_url"] = env("IRIS_URL") or DEFAULT_IRIS_URL
            values["fl_api_url"] = env("FL_API_URL") or env("IRIS_API_URL") or DEFAULT_FL_API_URL

        if api_key:
            values["api_key"] = api_key
        if env("IRIS_USER_ID"):
            values["user_id"] = env("IRIS_USER_ID")
        if env("IRIS_TIMEOUT"):
            values["timeout"] = _env_number("IRIS_TIMEOUT", float)
        if env("IRIS_RETRIES"):
            values["retries"] = _env_number("IRIS_RETRIES", int)
        if env("IRIS_WEBHOOK_SECRET"):
            values["webhook_secret"] = env("IRIS_WEBHOOK_SECRET")
        if env("IRIS_CLIENT_ID"):
            values["client_id"] = env("IRIS_CLIENT_ID")
        if env("IRIS_CLIENT_SECRET"):
            values["client_secret"] = env("IRIS_CLIENT_SECRET")
        if env("IRIS_DEBUG"):
            values["debug"] = env("IRIS_DEBUG", "").lower() in _TRUTHY

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @classmethod
    def from_credential_store(
        cls,
        store: "CredentialStore | None" = None,
        **overrides: Any,
    ) -> "IRISConfig":
        """Load config from the local credential store (~/.iris).

        Args:
            store: CredentialStore instance (uses default if not provided)
            **overrides: Explicit values; take precedence over stored ones
        """
        if store is None:
            from .auth.storage import CredentialStore
            store = CredentialStore()

        values = store.to_config_kwargs()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def require_user_id(self) -> int:
        """Return the configured user id or fail before any request is made."""
        if self.user_id is None:
            raise UserIdRequiredError()
        return self.user_id

    def has_client_credentials(self) -> bool:
        return self.client_id is not None and self.client_secret is not None

    def headers(self) -> dict[str, str]:
        """Default headers sent with every request."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
            "User-Agent": f"iris-python-sdk/{SDK_VERSION}",
        }

    def to_dict(self) -> dict[str, Any]:
        """Export config as dictionary (secrets masked)."""
        return {
            "api_key": mask_secret(self.api_key),
            "user_id": self.user_id,
            "base_url": self.base_url,
            "iris_url": self.iris_url,
            "fl_api_url": self.fl_api_url,
            "timeout": self.timeout,
            "retries": self.retries,
            "polling_interval": self.polling_interval,
            "max_polling_duration": self.max_polling_duration,
            "webhook_secret": mask_secret(self.webhook_secret),
            "debug": self.debug,
        }
