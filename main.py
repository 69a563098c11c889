#!/usr/bin/env python3
"""Main entry point for Debatcoach AI."""

import asyncio
import logging
import os
import sys

from config.settings import get_default_config


def setup_logging(level: str = "INFO"):
    """Configure logging for the coach."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # Suppress noisy third-party loggers
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def print_usage():
    """Print usage information for local development."""

    print("Debatcoach AI")
    print("=" * 40)
    print("Available entry points:")
    print()
    print("🌐 Web Server (API + WebSocket):")
    print("   python main.py --web")
    print("   python web_server.py")
    print()
    print("🖥️  Terminal training session:")
    print("   python main.py --cli")
    print()
    print("⚙️  Settings live in coach_config.json (created on first run).")
    print()


def start_web_server():
    """Start the FastAPI web server."""

    config = get_default_config()
    setup_logging(config.system.log_level)

    import uvicorn

    from web.api import app

    port = int(os.environ.get("PORT", 8000))

    print("🎯 Starting Debatcoach AI Web Server...")
    print(f"📡 API Documentation: http://localhost:{port}/docs")
    print(f"🔌 WebSocket: ws://localhost:{port}/ws/session")

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info", access_log=True)


def start_cli():
    """Play a training session in the terminal."""
    from cli import run_cli

    config = get_default_config()
    # Keep the terminal readable; only warnings and errors are logged.
    setup_logging("WARNING" if config.system.log_level == "INFO" else config.system.log_level)
    asyncio.run(run_cli(config))


def main():
    """Main entry point."""
    # Check for production environment (Railway, Docker, Heroku, etc.)
    is_production = any([
        "RAILWAY_ENVIRONMENT" in os.environ,
        "PORT" in os.environ,
        "DYNO" in os.environ,  # Heroku
        os.environ.get("ENVIRONMENT") == "production"
    ])

    if "--cli" in sys.argv:
        start_cli()
    elif is_production or "--web" in sys.argv:
        start_web_server()
    else:
        print_usage()
        print("💡 Tip: Use 'python main.py --web' to start the server")


if __name__ == "__main__":
    main()
