# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for Hello Backend:
# - test_config.py: Environment validation and startup failure
# - test_app.py: Root, docs, API base path and static files
# - test_middleware.py: Access logging and security headers by running mode
# - test_body_parsing.py: JSON and URL-encoded body parsing
# - test_exceptions.py: RouteError and unexpected error handling
#
# Run tests with: poetry run pytest
# =============================================================================
