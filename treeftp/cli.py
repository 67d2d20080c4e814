import argparse
import logging
import sys
from typing import List, Optional

from treeftp.config import ClientSettings
from treeftp.core.commands import ClientCommandHandler
from treeftp.core.connection import ControlConnectionManager
from treeftp.export import export_tree
from treeftp.traversal import ROOT_PATH, TreeWalker

logger = logging.getLogger(__name__)

USAGE = "Usage: treeftp <ftp-server-address> [username] [password] [max-depth] [dfs/bfs] [--json]"
DEFAULT_USERNAME = "anonymous"
DEFAULT_PASSWORD = "anonymous@example.com"
TRAVERSAL_METHODS = ("dfs", "bfs")
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


POSITIONALS = ("server", "username", "password", "max_depth", "method")
POSITIONAL_HELP = """positional arguments:
  ftp-server-address  The address of the FTP server to connect to.
  username            Username for the FTP server. Default is 'anonymous'.
  password            Password for the FTP server. Default is 'anonymous@example.com'.
  max-depth           The maximum depth for tree traversal. Unbounded by default.
  dfs/bfs             The method of tree traversal: Depth-first (dfs) or Breadth-first (bfs).
"""


class CommandLineParser(argparse.ArgumentParser):
    """ArgumentParser that raises ValueError instead of exiting with status 2."""

    def error(self, message):
        raise ValueError(message)


def build_parser(settings: ClientSettings) -> argparse.ArgumentParser:
    # Only the flags are declared; every other token is taken by position.
    parser = CommandLineParser(
        prog="treeftp",
        usage=USAGE[len("Usage: "):],
        description="Print the directory tree of an FTP server.",
        epilog=POSITIONAL_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--json", action="store_true",
                        help="If included, also writes the tree in JSON format.")
    parser.add_argument("--output", default=settings.output_file,
                        help=f"Destination of the JSON tree (default: {settings.output_file}).")
    parser.add_argument("--port", type=int, default=settings.port,
                        help=f"Control port of the FTP server (default: {settings.port}).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol traffic.")
    parser.add_argument("--help", action="store_true", help="Show this help message and exit.")
    return parser


def parse_arguments(parser: argparse.ArgumentParser, argv: List[str]) -> argparse.Namespace:
    """
    Parses the flags, then assigns the remaining tokens to the positional
    slots in order. Tokens past the last slot are ignored.
    """
    args, rest = parser.parse_known_args(argv)
    if not rest:
        raise ValueError("the ftp-server-address argument is required")
    if len(rest) > len(POSITIONALS):
        logger.warning("Ignoring extra arguments: %s", " ".join(rest[len(POSITIONALS):]))

    values = dict(zip(POSITIONALS, rest))
    args.server = values["server"]
    args.username = values.get("username", DEFAULT_USERNAME)
    args.password = values.get("password", DEFAULT_PASSWORD)
    args.max_depth = values.get("max_depth")
    args.method = values.get("method", "dfs")
    return args


def parse_max_depth(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"max-depth must be an integer, got {raw!r}") from None


def normalize_method(raw: str) -> str:
    method = (raw or "dfs").lower()
    if method not in TRAVERSAL_METHODS:
        logger.warning("Unknown traversal method %r, falling back to dfs", raw)
        return "dfs"
    return method


def configure_logging(level: str):
    numeric = logging.getLevelName(level.upper())
    logging.basicConfig(level=numeric if isinstance(numeric, int) else logging.INFO, format=LOG_FORMAT)


def open_client(server: str, port: int, settings: ClientSettings) -> ClientCommandHandler:
    conn = ControlConnectionManager(server, port, timeout=settings.timeout, retry=settings.retry)
    conn.connect()
    return ClientCommandHandler(conn)


def run(args: argparse.Namespace, settings: ClientSettings):
    max_depth = parse_max_depth(args.max_depth)
    method = normalize_method(args.method)

    client = open_client(args.server, args.port, settings)
    try:
        client.login(args.username, args.password)
        walker = TreeWalker(client, max_depth=max_depth)
        if args.json:
            export_tree(walker.build_tree(ROOT_PATH), args.output)
        if method == "bfs":
            walker.show_bfs(ROOT_PATH)
        else:
            walker.show_dfs(ROOT_PATH)
    finally:
        client.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    try:
        settings = ClientSettings.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    parser = build_parser(settings)
    if not argv:
        print(USAGE)
        return 0
    if "--help" in argv:
        parser.print_help()
        return 0

    try:
        args = parse_arguments(parser, argv)
    except ValueError as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        run(args, settings)
    except Exception as e:
        logger.debug("Fatal error", exc_info=True)
        print(f"An unexpected error occurred. The application will close: {e}", file=sys.stderr)
        return 1
    return 0
