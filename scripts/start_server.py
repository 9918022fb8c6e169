#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - HTTP Server Entry Point
# =============================================================================
# Starts the Hello Backend HTTP server.
#
# Usage:
#   # Start server (development)
#   NODE_ENV=development PORT=3000 poetry run python scripts/start_server.py
#
#   # Or use uvicorn directly, with auto-reload
#   poetry run uvicorn backend.main:app --reload --port 3000
#
# Prerequisites:
#   - NODE_ENV and PORT must be set (environment or .env file)
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from backend.server import run


def main():
    """Start the HTTP server."""
    print("=" * 60)
    print("Hello Backend")
    print("=" * 60)
    print()
    print("Starting server...")
    print("Press Ctrl+C to stop")
    print()

    run()


if __name__ == "__main__":
    main()
