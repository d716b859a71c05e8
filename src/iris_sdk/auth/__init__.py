"""Local credential storage for the IRIS CLI.

Usage:
    from iris_sdk.auth import CredentialStore

    store = CredentialStore()
    if store.has_minimum_credentials():
        print(store.masked())
"""

from .storage import CredentialStore, StoredCredentials, DEFAULT_CONFIG_DIR

__all__ = [
    "CredentialStore",
    "StoredCredentials",
    "DEFAULT_CONFIG_DIR",
]
