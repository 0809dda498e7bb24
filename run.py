"""aMaze CLI entry point.

Provides subcommands for running the Socket.IO server and for generating a
single maze in the terminal. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stdout.isatty()
except Exception:  # pragma: no cover
    _COLOR_ENABLED = False


def parse_args(argv: list[str]) -> argparse.Namespace:
    from amaze import __version__

    description = """
    aMaze generation service

    Run the Flask-SocketIO server exposing the maze factory, or generate a
    single maze and print it. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                    Bind address for the web server (default: 0.0.0.0)
          PORT                    Port for the web server (default: 5000)
          DATABASE_URL            SQLAlchemy database URI (default: sqlite:///instance/amaze.db)
          AMAZE_DEFAULT_BUILDER   dfs | prim | boruvka (default: dfs)
          AMAZE_LOG_LEVEL         debug | info | warn | error

        Examples:
          # Run the server on the default host and port
          python run.py serve

          # Generate the smallest maze with the default seed and print it
          python run.py generate

          # A skill 4 maze with rooms, Prim's algorithm, JSON summary only
          python run.py generate --skill 4 --builder prim --imperfect --seed 99 --json
        """
    )

    parser = argparse.ArgumentParser(
        prog="amaze",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Structured log level (default: env AMAZE_LOG_LEVEL or info)",
    )
    parser.add_argument("--version", action="version", version=f"aMaze {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask/Socket.IO server with the maze API",
    )
    serve_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    serve_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/amaze.db)",
    )
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    serve_parser.set_defaults(command="serve")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one maze and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate one maze in-process and print an ASCII map or JSON summary",
    )
    gen_parser.add_argument("--skill", type=int, default=0, help="Skill level 0..15 (default: 0)")
    gen_parser.add_argument(
        "--builder",
        default=None,
        help="dfs | prim | boruvka (default: env AMAZE_DEFAULT_BUILDER or dfs)",
    )
    gen_parser.add_argument("--seed", type=int, default=13, help="Random seed (default: 13)")
    gen_parser.add_argument("--imperfect", action="store_true", help="Allow rooms (and therefore loops)")
    gen_parser.add_argument("--json", action="store_true", help="Print a JSON summary instead of the map")
    gen_parser.add_argument("--timeout", type=float, default=None, help="Cancel after this many seconds")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to serve
    if len(argv) == 0 or (len(argv) == 2 and argv[0] == "--env-file"):
        argv = list(argv) + ["serve"]

    return parser.parse_args(argv)


def _paint(color: str, text) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else str(text)


def _banner(mode: str, rows: list[tuple[str, object]]) -> str:
    divider = _paint(Fore.MAGENTA, "=" * 40)
    lines = [divider, f"  {_paint(Fore.CYAN + Style.BRIGHT, 'aMaze ' + mode)}", divider]
    for label, val in rows:
        lines.append(f"  {_paint(Fore.YELLOW, label):12} {_paint(Fore.GREEN, val)}")
    lines.extend([divider, ""])
    return "\n".join(lines)


def _generate(args) -> int:
    from amaze.logging_utils import log
    from amaze.server import describe, generate_once

    builder = args.builder or os.getenv("AMAZE_DEFAULT_BUILDER", "dfs")
    if not args.json:
        print(
            _banner(
                "Generate",
                [("Skill:", args.skill), ("Builder:", builder), ("Perfect:", not args.imperfect), ("Seed:", args.seed)],
            )
        )
    try:
        factory, maze = generate_once(args.skill, builder, not args.imperfect, args.seed, timeout=args.timeout)
    except ValueError as exc:
        print(_paint(Fore.RED, f"[ERROR] {exc}"))
        return 2
    if maze is None:
        reason = factory.last_error or factory.state
        print(_paint(Fore.RED, f"[ERROR] no maze delivered ({reason})"))
        return 1
    log.info(event="generated", width=maze.width, height=maze.height, runtime_ms=maze.metrics.get("runtime_ms"))
    if args.json:
        print(json.dumps({**maze.summary(), "metrics": maze.metrics}, indent=2))
    else:
        print(describe(maze))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    if getattr(args, "log_level", None):
        from amaze.logging_utils import set_level

        set_level(args.log_level)

    mode = (getattr(args, "command", None) or "serve").lower()
    if mode == "generate":
        return _generate(args)

    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "5000"))
    # Make DATABASE_URL available to the Flask app before it is created
    if args.db_uri:
        os.environ["DATABASE_URL"] = args.db_uri
    db_banner = args.db_uri or os.getenv("DATABASE_URL") or "auto (instance/amaze.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    from amaze.logging_utils import log
    from amaze.server import start_server

    print(_banner("Server", [("Host:", host), ("Port:", port), ("Database:", db_banner), ("WebSockets:", "enabled")]))
    debug = bool(args.debug or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
