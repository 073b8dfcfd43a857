#!/usr/bin/env python3
"""
p0f-query - Ask a running p0f daemon what it knows about an address
===================================================================

USAGE:
    p0f-query -s <socket> -ip <address> [options]

OPTIONS:
    -s, --socket <path>        p0f API socket (default: from config)
    -ip, --ip <address>        IP address to query (IPv4 or IPv6)
    -c, --config <file>        JSON configuration file
    -of, --output-format <fmt> simple|detailed|json
    --no-color                 Disable colored output
    -v, --verbose              Debug logging
    --version                  Show version

EXIT CODES:
    0  query answered (match or no match)
    1  connection, protocol or query error
    2  usage error

EXAMPLES:
    p0f-query -s /var/run/p0f.sock -ip 192.168.1.10
    p0f-query -s /var/run/p0f.sock -ip 2001:db8::1 -of json
"""

import argparse
import ipaddress
import logging
import sys
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from . import __version__
from .config.config_manager import ConfigManager
from .core.client import P0fClient
from .core.errors import ConfigError, P0fError, SetupError
from .output.formatter import get_formatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


def colored(text: str, color: str, enabled: bool) -> str:
    if enabled:
        return f"{color}{text}{Style.RESET_ALL}"
    return text


def output_error(message: str, colors: bool = False) -> None:
    print(colored(message, Fore.RED, colors), file=sys.stderr)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="p0f-query",
        description="Query a running p0f daemon over its API socket",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-s', '--socket',
                        help='p0f socket file')
    parser.add_argument('-ip', '--ip', dest='ip',
                        help='IP address to query (IPv4 or IPv6)')
    parser.add_argument('-c', '--config',
                        help='JSON configuration file')
    parser.add_argument('-of', '--output-format',
                        choices=['simple', 'detailed', 'json'],
                        help='Output format')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable colored output')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    parser.add_argument('--version', action='version',
                        version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    config = ConfigManager(args.config)
    if args.config:
        try:
            config.load()
        except ConfigError as e:
            output_error(f"Error: {e}")
            return EXIT_ERROR

    level = "DEBUG" if args.verbose else config.get("general.log_level", "WARNING")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    just_fix_windows_console()
    colors = (bool(config.get("general.colors_enabled", True))
              and not args.no_color
              and sys.stdout.isatty())

    socket_file = args.socket or config.get("client.socket_path")
    if not socket_file or not args.ip:
        parser.print_usage(sys.stderr)
        output_error("Usage: p0f-query -s <socket> -ip <ip>")
        return EXIT_USAGE

    try:
        address = ipaddress.ip_address(args.ip)
    except ValueError:
        output_error(f"Error: invalid IP address: {args.ip}", colors)
        return EXIT_ERROR

    client = P0fClient(socket_file)
    try:
        client.connect()
    except SetupError as e:
        output_error(f"Can't connect to socket: {e}", colors)
        return EXIT_ERROR

    try:
        response = client.query_ip(address)
    except P0fError as e:
        logger.debug(f"Query failed with kind {e.kind.value}")
        output_error(f"Error: {e}", colors)
        return EXIT_ERROR
    finally:
        client.stop()

    formatter = get_formatter(args.output_format or config.get("general.output_format"), colors)
    print(formatter.format(response))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
