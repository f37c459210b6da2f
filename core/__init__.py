# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic logic:
# - configuration/: layered sources, binding, validation, startup
# - models/: Pydantic settings and health schemas
# - services/: health checks
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
