# =============================================================================
# app/bootstrap.py - Process Startup
# =============================================================================
# Configures logging, runs the configuration pipeline once and decides the
# fate of the process:
# - validated settings -> returned to the caller (the app factory)
# - validation failure -> every violation logged, exit code 1
# - anything unexpected -> CRITICAL log with traceback, exit code 1
#
# Logs are flushed before exiting so nothing is lost on the way down.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv
from pydantic import ValidationError

from app.config import HostSettings, get_host_settings
from core.configuration import (
    ConfigurationValidationError,
    StartupOrchestrator,
)
from core.configuration.builder import VaultClientFactory
from core.models.settings import AppSettings
from lib.key_vault import KeyVaultSecretClient
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

DOTENV_PATH = ".env"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Azure SDK logs every HTTP request and response at INFO
_NOISY_LOGGERS = ("azure", "urllib3")


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the process; safe to call again to change the level."""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(log_level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _exit(code: int) -> None:
    for handler in logging.getLogger().handlers:
        handler.flush()
    sys.exit(code)


def _load_host_settings() -> HostSettings:
    # Export .env into os.environ so AppSettings__* lines reach the pipeline
    load_dotenv(DOTENV_PATH)
    return get_host_settings()


def bootstrap(
    host: HostSettings | None = None,
    *,
    vault_client_factory: VaultClientFactory = KeyVaultSecretClient,
) -> AppSettings:
    """
    Resolve and validate AppSettings, or terminate the process.

    Args:
        host: Host settings (default: from the environment and .env)
        vault_client_factory: Key Vault client factory (tests inject fakes)

    Returns:
        Validated AppSettings

    Raises:
        SystemExit: With code 1 when configuration is invalid or startup fails
    """
    # Default level first so failures reading host settings are still logged
    configure_logging()

    try:
        host = host or _load_host_settings()
        configure_logging(host.log_level)

        orchestrator = StartupOrchestrator(
            host.source_options(),
            vault_client_factory=vault_client_factory,
            deadline_seconds=host.startup_deadline_seconds,
        )
        return orchestrator.run()
    except ConfigurationValidationError as e:
        # Violations were already logged one by one by the orchestrator
        logger.critical(f"Startup aborted: {e.message}")
        if e.suggestion:
            logger.critical(f"Suggestion: {e.suggestion}")
    except ApplicationError as e:
        logger.critical(f"Startup aborted: {e}")
    except ValidationError as e:
        logger.critical(f"Startup aborted: invalid host settings\n{e}")
    except Exception:
        logger.critical("Unexpected error during startup", exc_info=True)

    _exit(1)
