# =============================================================================
# backend/ - Hello Backend Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, middleware wiring, error handlers, entry point
# - config.py: Environment variable loading and validation
# - constants.py: URL paths and filesystem locations
# - exceptions.py: RouteError and the global exception handlers
# - middleware/: Body parsing, request logging, security headers
# - routers/: The API route table and the docs endpoint
# - static.py: Fall-through static file serving from public/
# =============================================================================
