"""CLI entrypoint for hugo-preproc."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import CONFIG_BASENAME, load_config
from .errors import PreprocError
from .logging import configure_logging, get_logger
from .orchestrator import Orchestrator

_PROG = "hugo-preproc"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=_PROG,
        description=(
            "A preprocessor for Hugo: render content from git history and run "
            "configured commands or scripts over matched files."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help=f"config file (default is {CONFIG_BASENAME}.yaml in $HOME or the current directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        "--debug",
        dest="verbose",
        action="store_true",
        default=False,
        help="Enable debug output.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for hugo-preproc."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = load_config(args.config)
        Orchestrator().run(config)
    except (PreprocError, OSError) as exc:
        logger.debug("Run aborted", exc_info=True)
        parser.exit(1, f"{_PROG}: error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
