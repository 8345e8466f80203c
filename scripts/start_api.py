#!/usr/bin/env python3
"""Startup script for the funcdiff API server."""

import argparse
import os
import sys
from pathlib import Path

# Add src to path so we can import funcdiff
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import uvicorn


def main():
    """Main entry point for API server."""
    parser = argparse.ArgumentParser(
        description="Start the funcdiff API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/start_api.py                          # Analyze the current directory
  python scripts/start_api.py --repo /srv/repos/app    # Default repository for requests
  python scripts/start_api.py --scope com.example.app  # Default target scope
  python scripts/start_api.py --reload                 # Auto-reload on changes
        """
    )

    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes (default: 1)"
    )
    parser.add_argument(
        "--repo",
        help="Default repository path (sets FUNCDIFF_REPO_PATH)"
    )
    parser.add_argument(
        "--scope",
        help="Default target scope (sets FUNCDIFF_TARGET_SCOPE)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development"
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level (default: info)"
    )

    args = parser.parse_args()

    # Settings are read from the environment by every worker process
    if args.repo:
        os.environ["FUNCDIFF_REPO_PATH"] = args.repo
    if args.scope:
        os.environ["FUNCDIFF_TARGET_SCOPE"] = args.scope

    print("Starting funcdiff API server...")
    print(f"   Host: {args.host}")
    print(f"   Port: {args.port}")
    print(f"   Repository: {os.environ.get('FUNCDIFF_REPO_PATH', '.')}")
    print(f"   Scope: {os.environ.get('FUNCDIFF_TARGET_SCOPE', '(all paths)')}")
    print(f"   API Docs: http://{args.host}:{args.port}/docs")
    print()

    config = {
        "app": "funcdiff.api.app:app",
        "host": args.host,
        "port": args.port,
        "log_level": args.log_level,
    }

    if args.reload:
        config["reload"] = True
        config["reload_dirs"] = ["src"]
    else:
        config["workers"] = args.workers

    uvicorn.run(**config)


if __name__ == "__main__":
    main()
