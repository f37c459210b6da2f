# =============================================================================
# function_app.py - Azure Functions Entry Point
# =============================================================================
# The Functions host imports this module once per worker process. Importing
# it runs the configuration pipeline; an invalid configuration terminates
# the worker before any trigger is registered.
# =============================================================================

import azure.functions as func

from app.main import create_app

app = func.AsgiFunctionApp(
    app=create_app(),
    http_auth_level=func.AuthLevel.ANONYMOUS,
)
