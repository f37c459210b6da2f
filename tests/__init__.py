# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the ModularData API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_profiler.py: Tests for the data profiling engine
# - test_sandbox.py: Tests for secure code execution
# - test_api/: Integration tests for API endpoints
#
# Run tests with: poetry run pytest
# =============================================================================
