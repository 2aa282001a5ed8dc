"""
=============================================================================
TINYSERVE CLI ENTRY POINT
=============================================================================

Command-line interface for running the server.

=============================================================================
USAGE
=============================================================================

    # Serve the current directory on port 80 (needs root on Unix)
    python -m tinyserve

    # Custom port and directory
    python -m tinyserve -p 8080 -d ./public

    # Loopback only, with request dumps
    python -m tinyserve -H 127.0.0.1 -p 8080 -l DEBUG

    # JSON access log
    tinyserve -p 8080 --log-format json

    # Settings from the environment; flags still win
    TINYSERVE_PORT=8080 TINYSERVE_ROOT=./public tinyserve -l DEBUG

Bad arguments print usage and exit with status 2. If the server can't
start (port in use, permission denied) the error is printed and the exit
status is 1.

=============================================================================
"""

import argparse
import os
import sys
from typing import List, Optional

from . import __version__
from .config import ServerConfig
from .server import HTTPServer


def port_number(value: str) -> int:
    """argparse type for a TCP port in 1-65535."""
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}")
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port must be 1-65535, got {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinyserve",
        description="Serve static files from a directory over HTTP/1.1",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tinyserve                          # Port 80, current directory
  tinyserve -p 8080                  # Custom port
  tinyserve -p 8080 -d ./public      # Custom port and directory
  tinyserve -H 127.0.0.1 -l DEBUG    # Loopback only, verbose
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "-p", "--port",
        type=port_number,
        default=None,
        help="Port to listen on, 1-65535 (default: $TINYSERVE_PORT or 80)"
    )

    parser.add_argument(
        "-H", "--host",
        default=None,
        help="Address to bind to (default: $TINYSERVE_HOST or 0.0.0.0)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "-d", "--directory",
        default=None,
        help="Directory to serve files from (default: $TINYSERVE_ROOT or ./)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "-l", "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: $TINYSERVE_LOG_LEVEL or INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: $TINYSERVE_LOG_FORMAT or text)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"tinyserve {__version__}"
    )

    return parser


def resolve_directory(directory: str) -> str:
    """
    Absolute form of the directory to serve.

    Relative paths are taken from the current working directory.
    """
    if os.path.isabs(directory):
        return directory
    return os.path.abspath(os.path.join(os.getcwd(), directory))


def main(argv: Optional[List[str]] = None):
    """
    Main CLI entry point.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Environment first, then whatever was given on the command line
    try:
        config = ServerConfig.from_env()
    except ValueError as e:
        parser.error(f"bad TINYSERVE_* environment value: {e}")

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.directory is not None:
        config.root_dir = args.directory
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    directory = config.root_dir
    config.root_dir = resolve_directory(directory)
    if not os.path.isdir(config.root_dir):
        parser.error(f"directory does not exist: {directory}")

    try:
        server = HTTPServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
