#!/usr/bin/env python3
"""
Main entry point for the Sideline Rotation web application.

This script launches the Flask-based API server.
"""
import argparse
import logging

from sideline_rotation.ui.web_app import run_web_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Sideline Rotation API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host address to bind to")
    parser.add_argument("--port", type=int, default=7122, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s: %(message)s",
    )
    run_web_app(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
