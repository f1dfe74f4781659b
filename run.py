"""layoutforge CLI entry point.

Provides subcommands for generating a layout as JSON and for running the
HTTP API server. Accepts configuration via flags and environment variables,
with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import contextlib
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from layoutforge import __version__
from layoutforge.generation import ConfigurationError, GenerationConfig, generate
from layoutforge.logging_utils import get_logger
from layoutforge.routes.layout_api import _coerce_seed

log = get_logger("layoutforge.cli")


def _color_enabled() -> bool:
    # Disable colors if output is not a real terminal (e.g., during pytest capture)
    return sys.stdout.isatty()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    layoutforge dungeon layout generator

    Generate a procedural room-and-corridor layout as JSON, or serve the same
    generator over HTTP. Configuration can be provided via CLI flags or
    LAYOUTFORGE_* environment variables. If both are present, CLI flags take
    precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                        Bind address for the web server (default: 0.0.0.0)
          PORT                        Port for the web server (default: 5000)
          LAYOUTFORGE_<FIELD>         Any generation config field, e.g. LAYOUTFORGE_NUMBER_OF_ROOMS=80
          LAYOUTFORGE_LOG_LEVEL       debug | info | warn | error (default: info)
          LAYOUTFORGE_LOG_JSON        1 to emit JSON log lines
          LAYOUTFORGE_DISABLE_CACHE   1 to disable the HTTP layout cache

        Examples:
          # Generate a layout for seed 42 and pretty-print it
          python run.py generate --seed 42 --pretty

          # Fewer, thicker-hall rooms with minimum-translation separation
          python run.py generate --seed 42 --set number_of_rooms=60 --set hall_thickness=3 --set separation=mtv

          # Colored one-screen summary instead of JSON
          python run.py generate --seed dragon --summary

          # Load variables from .env then run the server
          python run.py --env-file .env server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="layoutforge",
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
        "--version",
        action="version",
        version=f"layoutforge {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print it as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the full generation pipeline once and write the layout to stdout",
    )
    gen_parser.add_argument(
        "--seed",
        default=None,
        help="Integer seed, or any string (hashed). Default: random",
    )
    gen_parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a generation config field (repeatable)",
    )
    gen_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output",
    )
    gen_parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a short human-readable summary instead of JSON",
    )
    gen_parser.set_defaults(command="generate")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the layout HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask development server exposing /api/layout",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate
    if len(argv) == 0:
        argv = ["generate"]

    return parser.parse_args(argv)


def _parse_overrides(pairs: list[str]) -> dict:
    overrides = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(pair, "expected KEY=VALUE")
        overrides[key.strip()] = value.strip()
    return overrides


def _print_summary(layout) -> None:
    color = _color_enabled()

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if color else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if color else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    m = layout.metrics
    bounds = layout.bounds
    size = f"{bounds.width}x{bounds.height}" if bounds is not None else "empty"
    lines = [
        divider,
        f"  {label('Seed:'):18} {value(layout.seed)}",
        f"  {label('Main rooms:'):18} {value(len(layout.main_rooms))}",
        f"  {label('Secondary rooms:'):18} {value(len(layout.secondary_rooms))}",
        f"  {label('Halls:'):18} {value(len(layout.halls))}",
        f"  {label('Connections:'):18} {value(len(layout.connections))}",
        f"  {label('Bounds:'):18} {value(size)}",
        f"  {label('Dropped rooms:'):18} {value(m['rooms_dropped'])}",
        f"  {label('Runtime (ms):'):18} {value(m['runtime_ms'])}",
        divider,
    ]
    print("\n".join(lines))


def _run_generate(args: argparse.Namespace) -> int:
    try:
        config = GenerationConfig.from_mapping(_parse_overrides(args.overrides), base=GenerationConfig.from_env())
    except ConfigurationError as e:
        print(f"[ERROR] {e.field}: {e.message}", file=sys.stderr)
        return 2
    seed = _coerce_seed(args.seed)
    # Log records go to stderr so stdout stays valid JSON
    with contextlib.redirect_stdout(sys.stderr):
        layout = generate(config, seed)
    if args.summary:
        _print_summary(layout)
        return 0
    print(json.dumps(layout.to_dict(), indent=2 if args.pretty else None))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if _color_enabled():
        _color_init()
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return _run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from layoutforge.server import start_server

    color = _color_enabled()
    title = f"{Fore.CYAN}{Style.BRIGHT}layoutforge API{Style.RESET_ALL}" if color else "layoutforge API"
    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if color else "=" * 40
    print("\n".join([divider, f"  {title}", f"  Host: {host}", f"  Port: {port}", divider, ""]))
    log.info(event="startup", mode=mode, host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def cli():
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
