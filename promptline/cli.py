"""Command-line front door for promptline.

Parses CLI options, loads and validates config, resolves the working
directory, and prints either the whole prompt or one module's output.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_prompt_config, validate_config
from .errors import ConfigError
from .logging_config import setup_logging
from .modules import MODULES, Context, render_module
from .prompt import render_prompt

CONFIG_ERROR_EXIT_CODE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print a shell prompt segment describing the project in a directory."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to inspect. Defaults to current directory.")
    parser.add_argument(
        "--module",
        default=None,
        help=f"Render only this module ({', '.join(sorted(MODULES))}).",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI styling.")
    parser.add_argument("--check-config", action="store_true", help="Validate config and exit.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: $PROMPTLINE_LOG or WARNING).")
    return parser


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and print the prompt for a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. Config problems are reported once on stderr and exit
    with status 2.
    """
    args = _build_parser().parse_args()
    setup_logging(args.log_level)

    try:
        config = load_prompt_config(args.config)
        names = list(config.modules)
        if args.module in MODULES and args.module not in names:
            names.append(args.module)
        validate_config(config, names)
    except ConfigError as exc:
        sys.stderr.write(f"promptline: config error: {exc}\n")
        raise SystemExit(CONFIG_ERROR_EXIT_CODE) from exc

    if args.check_config:
        sys.stdout.write("config OK\n")
        return

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")
    if not path.is_dir():
        raise SystemExit(f"Not a directory: {path}")

    context = Context(directory=path.resolve(), config=config)
    if args.module is not None:
        if args.module not in MODULES:
            raise SystemExit(f"Unknown module: {args.module}")
        output = render_module(args.module, context)
        if output is not None:
            sys.stdout.write(output.ansi(no_color=args.no_color))
        return

    sys.stdout.write(render_prompt(context, no_color=args.no_color))


if __name__ == "__main__":
    main()
