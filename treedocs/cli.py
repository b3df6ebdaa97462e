"""CLI entrypoint for treedocs."""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator


def _version() -> str:
    try:
        return metadata.version("treedocs")
    except metadata.PackageNotFoundError:
        return "unknown"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treedocs",
        description="Generate HTML documentation from a package of source files.",
    )
    parser.add_argument(
        "--input",
        metavar="INPUT",
        help="Directory of your package.",
    )
    parser.add_argument(
        "--output",
        metavar="OUTPUT",
        default=None,
        help="Directory where your docs will be generated (defaults to 'docs').",
    )
    parser.add_argument(
        "--package-name",
        metavar="PACKAGE-NAME",
        default=None,
        help=(
            "Override for the package name seen on HTML navbars. "
            "By default, it will extract it from the input."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .treedocs.yml file (defaults to the one in the input directory).",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of worker threads used to parse and render files.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_version()}",
        help="Display version.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for treedocs."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.input:
        parser.error("the following arguments are required: --input")

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config or Path(args.input) / CONFIG_FILENAME)
        output = args.output or config.output or "docs"
        orchestrator = Orchestrator(config=config, workers=args.workers)
        outcome = orchestrator.run(args.input, output, package_name=args.package_name)
    except (FileNotFoundError, NotADirectoryError, ConfigError, ValueError) as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"treedocs failed: {exc}\nRun with --verbose for more details.\n")

    if outcome.message:
        print(outcome.message)
    else:
        print(f"Documentation generated at {_relativize(outcome.output_root)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
