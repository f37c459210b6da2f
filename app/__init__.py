# =============================================================================
# app/ - HTTP Function App Package
# =============================================================================
# This package contains the HTTP surface and process startup:
# - main.py: app factory, middleware, error handlers
# - bootstrap.py: logging setup, configuration pipeline, exit policy
# - config.py: host settings (environment name, paths, timeouts)
# - routers/: /config and /health endpoints
#
# The app layer is thin - configuration logic lives in core/configuration/.
# =============================================================================
