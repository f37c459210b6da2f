# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# - health.py: Health check endpoint
# - settings.py: Redacted configuration endpoint
#
# Each router is mounted in main.py.
# =============================================================================

from . import health
from . import settings

__all__ = [
    "health",
    "settings",
]
