# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - key_vault.py: Azure Key Vault adapter returning configuration keys
# - utils.py: Shared utilities (error handling, configuration key helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.key_vault import (
    KeyVaultSecretClient,
    SecretFetcher,
    VaultUnavailableError,
    secret_name_to_key,
)
from lib.utils import KEY_DELIMITER, ApplicationError, join_key

__all__ = [
    # Key Vault
    "KeyVaultSecretClient",
    "SecretFetcher",
    "VaultUnavailableError",
    "secret_name_to_key",
    # Utils
    "ApplicationError",
    "KEY_DELIMITER",
    "join_key",
]
