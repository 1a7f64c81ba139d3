#!/usr/bin/env python3
"""
CLI tool to start the event-management web services.

Starts either the main event-management API or the statistics service with
uvicorn. Both are plain FastAPI applications; the main API talks to the
statistics service over HTTP (EWM_STATS_SERVER_URL).

Usage:
    python3 web_server.py                         # Main API on 127.0.0.1:8080
    python3 web_server.py stats                   # Statistics service on 127.0.0.1:9090
    python3 web_server.py --host 0.0.0.0          # Listen on all interfaces
    python3 web_server.py stats --port 9191       # Use custom port
    python3 web_server.py --reload                # Enable auto-reload for development

Environment Variables:
    EWM_DB_URL: Main API database URL
    EWM_STATS_SERVER_URL: Statistics service base URL used by the main API
    STATS_DB_URL: Statistics service database URL
    EWM_ENV: Environment (production/development, default: development)
    EWM_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


# Service name -> (ASGI application path, default port)
SERVICES = {
    "main": ("backend.src.main:app", 8080),
    "stats": ("stats.src.main:app", 9090),
}


def load_env_file() -> None:
    """
    Load environment variables from backend/.env.

    Variables already set in the environment take precedence.
    """
    env_path = Path(__file__).parent / "backend" / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Arguments:
        service: main or stats (default: main)
        --host: Host to bind (default: 127.0.0.1)
        --port: Port to bind (default: 8080 for main, 9090 for stats)
        --reload: Enable auto-reload for development (default: False)
    """
    parser = argparse.ArgumentParser(
        description="Start an event-management web service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Main API with auto-reload
  python3 web_server.py --reload

  # Statistics service on all interfaces
  python3 web_server.py stats --host 0.0.0.0
        """
    )

    parser.add_argument(
        "service",
        nargs="?",
        choices=sorted(SERVICES),
        default="main",
        help="Service to start (default: main)"
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1). "
             "Use 0.0.0.0 to listen on all interfaces."
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8080 for main, 9090 for stats)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development. Not recommended for production."
    )

    args = parser.parse_args(argv)
    if args.port is None:
        args.port = SERVICES[args.service][1]
    return args


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point: parse arguments, load backend/.env and run uvicorn.

    Exit Codes:
        0: Server stopped normally
    """
    args = parse_arguments(argv)

    # Ensure the repo root is on sys.path so "backend.src.main" is importable
    repo_root = str(Path(__file__).parent)
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    load_env_file()

    import uvicorn

    app_path = SERVICES[args.service][0]
    print(f"\nStarting {args.service} service ({app_path})...")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Auto-reload: {'enabled' if args.reload else 'disabled'}")
    print(f"\nAPI documentation: http://{args.host}:{args.port}/docs")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print("\nPress CTRL+C to stop the server\n")

    try:
        uvicorn.run(
            app_path,
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n\nServer stopped by user (CTRL+C)")
        sys.exit(0)


if __name__ == "__main__":
    main()
