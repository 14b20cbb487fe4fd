#!/usr/bin/env python3
"""
Development runner script for the Completion Dispatch API.

Usage:
    python run.py                    # Run with default settings
    python run.py --port 8080       # Run on custom port
    python run.py --reload          # Enable auto-reload
"""

import argparse

from completion_dispatch.core.config import Settings
from completion_dispatch.main import run_development_server


def main():
    """Main entry point for development server."""
    settings = Settings()

    parser = argparse.ArgumentParser(description="Run Completion Dispatch API")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=False,
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.value,
        help=f"Set log level (default: {settings.LOG_LEVEL.value})",
    )

    args = parser.parse_args()

    print(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"Server: http://{args.host}:{args.port}")
    print(f"Documentation: http://{args.host}:{args.port}/docs")
    print(f"Providers: {', '.join(provider.value for provider in settings.PROVIDER_PRIORITY)}")
    print(f"Worst-case latency: {settings.worst_case_latency_seconds:.0f}s over {settings.candidate_count} candidates")

    run_development_server(host=args.host, port=args.port, reload=args.reload, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
