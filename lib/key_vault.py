# =============================================================================
# lib/key_vault.py - Azure Key Vault Secret Adapter
# =============================================================================
# This module fetches every accessible secret from an Azure Key Vault and
# returns them as flat configuration key/value pairs.
#
# Authentication uses ambient credentials (DefaultAzureCredential): managed
# identity in Azure, developer login (az cli, VS Code) locally.
#
# Secret names cannot contain ":" so "--" is used as the hierarchy separator:
#   AppSettings--Security--JwtSecret  ->  AppSettings:Security:JwtSecret
#
# Every failure (bad URL, credential resolution, network, timeout) is raised
# as VaultUnavailableError so callers can branch on it explicitly.
#
# Usage:
#   from lib.key_vault import KeyVaultSecretClient
#   secrets = KeyVaultSecretClient("https://myvault.vault.azure.net", 30).fetch_secrets()
# =============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from lib.utils import KEY_DELIMITER, ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# Key Vault secret names only allow alphanumerics and dashes
SECRET_NAME_DELIMITER = "--"


class VaultUnavailableError(ApplicationError):
    """Raised when a configured vault cannot be read (auth, network, timeout)."""

    def __init__(self, vault_url: str, error: str):
        super().__init__(
            message=f"Could not read secrets from Key Vault {vault_url}: {error}",
            code="VAULT_UNAVAILABLE",
            suggestion=(
                "Check KeyVault:Url, the managed identity / developer login, "
                "and the identity's 'get' and 'list' secret permissions"
            ),
            details={"vault_url": vault_url, "error": error},
        )


class SecretFetcher(Protocol):
    """Anything that can return all secrets of a vault as configuration pairs."""

    def fetch_secrets(self) -> dict[str, str]:
        ...


def secret_name_to_key(name: str) -> str:
    """
    Convert a Key Vault secret name into a configuration key.

    Example:
        secret_name_to_key("AppSettings--ExternalApi--ApiKey")
        # "AppSettings:ExternalApi:ApiKey"
    """
    return name.replace(SECRET_NAME_DELIMITER, KEY_DELIMITER)


class KeyVaultSecretClient:
    """
    Reads all enabled secrets from one Azure Key Vault.

    The whole fetch (credential resolution, listing, reading each secret)
    is bounded by timeout_seconds.

    Example:
        client = KeyVaultSecretClient(
            vault_url="https://myvault.vault.azure.net",
            timeout_seconds=30,
        )
        secrets = client.fetch_secrets()
        # {"AppSettings:Security:JwtSecret": "...", ...}
    """

    def __init__(
        self,
        vault_url: str,
        timeout_seconds: float,
        *,
        credential: Any | None = None,
        secret_client: Any | None = None,
    ):
        self.vault_url = vault_url
        self.timeout_seconds = timeout_seconds
        self._credential = credential
        self._secret_client = secret_client

    def _list_secrets(self, client: Any) -> dict[str, str]:
        secrets: dict[str, str] = {}
        for properties in client.list_properties_of_secrets():
            if properties.enabled is False:
                logger.debug(f"Skipping disabled secret: {properties.name}")
                continue
            secret = client.get_secret(properties.name)
            secrets[secret_name_to_key(properties.name)] = secret.value or ""
        return secrets

    def _read_all(self) -> dict[str, str]:
        if self._secret_client is not None:
            return self._list_secrets(self._secret_client)

        credential = self._credential or DefaultAzureCredential()
        client = SecretClient(
            vault_url=self.vault_url,
            credential=credential,
            connection_timeout=self.timeout_seconds,
            read_timeout=self.timeout_seconds,
        )
        try:
            return self._list_secrets(client)
        finally:
            client.close()
            # Only close what this client created
            if self._credential is None:
                credential.close()

    def fetch_secrets(self) -> dict[str, str]:
        """
        Fetch every enabled secret in the vault.

        The read runs on a daemon thread: a fetch that outlives the timeout
        is abandoned and cannot hold up interpreter exit.

        Returns:
            Mapping of configuration key -> secret value

        Raises:
            VaultUnavailableError: On any authentication, network or timeout failure
        """
        outcome: dict[str, Any] = {}

        def read() -> None:
            try:
                outcome["secrets"] = self._read_all()
            except Exception as e:
                outcome["error"] = e

        worker = threading.Thread(target=read, name="key-vault", daemon=True)
        worker.start()
        worker.join(self.timeout_seconds)

        if worker.is_alive():
            raise VaultUnavailableError(self.vault_url, f"timed out after {self.timeout_seconds}s")

        error = outcome.get("error")
        if isinstance(error, (AzureError, ValueError)):
            raise VaultUnavailableError(self.vault_url, str(error)) from error
        if error is not None:
            raise error

        secrets = outcome["secrets"]
        logger.info(f"Loaded {len(secrets)} secrets from Key Vault {self.vault_url}")
        return secrets
