#!/usr/bin/env python3
# =============================================================================
# scripts/check_config.py - Resolve and Validate Configuration Locally
# =============================================================================
# Runs the same pipeline as the function app startup and prints the
# redacted result, without starting a server.
#
# Usage:
#   poetry run python scripts/check_config.py
#   AZURE_FUNCTIONS_ENVIRONMENT=Staging poetry run python scripts/check_config.py
#
# Exit code is 0 when the configuration is valid, 1 otherwise.
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from app.bootstrap import configure_logging
from app.config import HostSettings
from core.configuration import ConfigurationValidationError, StartupOrchestrator
from lib.utils import ApplicationError


def print_sources(layered) -> None:
    """Source list, vault outcome and warnings of the build stage."""
    print("\nSources (lowest to highest precedence):")
    for source in layered.sources:
        print(f"  {source.priority}. {source.kind.value}: {source.name}")
    print(f"Key Vault: {layered.vault_status.value}")
    for warning in layered.warnings:
        print(f"  {warning}")


def main() -> int:
    host = HostSettings()
    configure_logging(host.log_level)

    print("=" * 60)
    print(f"Environment: {host.environment}")
    print(f"Config dir:  {host.config_dir.resolve()}")
    print("=" * 60)

    orchestrator = StartupOrchestrator(
        host.source_options(),
        deadline_seconds=host.startup_deadline_seconds,
    )
    try:
        settings = orchestrator.run()
    except ConfigurationValidationError as e:
        print_sources(orchestrator.layered)
        print(f"\nINVALID ({len(e.errors)} error(s)):")
        for error in e.errors:
            print(f"  - {error}")
        return 1
    except ApplicationError as e:
        # Sources exist unless a file was malformed
        if orchestrator.layered is not None:
            print_sources(orchestrator.layered)
        print(f"\nFAILED: {e}")
        return 1

    print_sources(orchestrator.layered)
    print("\nVALID:")
    print(settings.to_redacted().model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
