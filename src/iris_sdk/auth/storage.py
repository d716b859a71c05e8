"""Credential storage for the IRIS CLI.

Stores credentials in ~/.iris/credentials.json with restrictive file
permissions (0o600). Credentials are plaintext, protected only by those
permissions.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import mask_secret, _coerce_user_id
from ..errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

# Default storage directory
DEFAULT_CONFIG_DIR = Path.home() / ".iris"


@dataclass
class StoredCredentials:
    """Credentials saved by 'iris config setup'."""

    api_key: str | None = None
    user_id: int | None = None
    base_url: str | None = None
    iris_url: str | None = None
    webhook_secret: str | None = None
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoredCredentials":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["user_id"] = _coerce_user_id(values.get("user_id"))
        return cls(**values)


class CredentialStore:
    """Local credential file used by the CLI.

    Usage:
        store = CredentialStore()
        store.save(StoredCredentials(api_key="sk_...", user_id=42))

        if store.has_minimum_credentials():
            config = IRISConfig(**store.to_config_kwargs())
    """

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize credential store.

        Args:
            config_dir: Directory for the credentials file (default: ~/.iris)
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.credentials_file = self.config_dir / "credentials.json"

    def exists(self) -> bool:
        return self.credentials_file.exists()

    def load(self) -> StoredCredentials:
        """Load credentials; empty credentials if the file is missing or unreadable."""
        if not self.credentials_file.exists():
            return StoredCredentials()

        try:
            with open(self.credentials_file) as f:
                data = json.load(f)
            return StoredCredentials.from_dict(data)
        except (json.JSONDecodeError, TypeError, AttributeError, InvalidConfigurationError) as e:
            logger.warning("Could not load credentials from %s: %s", self.credentials_file, e)
            return StoredCredentials()

    def save(self, credentials: StoredCredentials) -> None:
        """Save credentials, creating the directory if needed."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        credentials.updated_at = datetime.now().isoformat()

        with open(self.credentials_file, "w") as f:
            json.dump(credentials.to_dict(), f, indent=2)

        # Set restrictive permissions
        os.chmod(self.credentials_file, 0o600)
        logger.debug("Saved credentials to %s", self.credentials_file)

    def clear(self) -> bool:
        """Delete the credentials file. Returns False if there was none."""
        if not self.credentials_file.exists():
            return False
        self.credentials_file.unlink()
        return True

    def has_minimum_credentials(self) -> bool:
        """Both an API key and a user id are stored."""
        credentials = self.load()
        return bool(credentials.api_key) and credentials.user_id is not None

    def to_config_kwargs(self) -> dict[str, Any]:
        """Stored values as IRISConfig keyword arguments (unset ones omitted)."""
        credentials = self.load()
        values = {
            "api_key": credentials.api_key,
            "user_id": credentials.user_id,
            "base_url": credentials.base_url,
            "iris_url": credentials.iris_url,
            "webhook_secret": credentials.webhook_secret,
        }
        return {k: v for k, v in values.items() if v is not None}

    def masked(self) -> dict[str, Any]:
        """Stored values with secrets masked, for display."""
        data = self.load().to_dict()
        data["api_key"] = mask_secret(data.get("api_key"))
        data["webhook_secret"] = mask_secret(data.get("webhook_secret"))
        return data
