#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - Local HTTP Server
# =============================================================================
# Serves the function app with uvicorn instead of the Functions host.
# Startup validation runs first; an invalid configuration exits with code 1.
#
# Usage:
#   poetry run python scripts/start_server.py
#
#   # Or use the uvicorn CLI directly
#   poetry run uvicorn app.main:create_app --factory --reload
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

import uvicorn


def main():
    """Start uvicorn on PORT (default 7071, the Functions host port)."""
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.environ.get("PORT", "7071")),
        log_level="info",
    )


if __name__ == "__main__":
    main()
