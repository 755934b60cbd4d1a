"""pyfree - report physical memory and swap usage."""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import TextIO

from pyfree.errors import FreeError, MultipleUnitsError
from pyfree.meminfo import derive
from pyfree.models import Config, Unit
from pyfree.monitor import StatsSource
from pyfree.report import render
from pyfree.source import ProcMeminfoSource, default_source

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Options:
    """Flags as given on the command line."""

    human: bool = False
    bytes: bool = False
    kbytes: bool = False
    mbytes: bool = False
    gbytes: bool = False
    tbytes: bool = False
    json: bool = False


def build_config(options: Options) -> Config:
    """
    Resolve the command line flags into a display configuration.

    At most one of -b, -k, -m, -g, -t and -h may be given; with none of them
    the values are shown in kibibytes.

    Raises:
        MultipleUnitsError: If more than one unit option is set.
    """
    flags = (options.bytes, options.kbytes, options.mbytes, options.gbytes, options.tbytes, options.human)
    if sum(flags) > 1:
        raise MultipleUnitsError()

    if options.human:
        return Config(human=True, json=options.json)

    unit = Unit.KB
    for flag, candidate in zip(flags, Unit):
        if flag:
            unit = candidate
    return Config(unit=unit, json=options.json)


def run(config: Config, source: StatsSource, stdout: TextIO) -> None:
    """Read the statistics once and write the report to ``stdout``."""
    info = derive(source.read())
    stdout.write(render(info, config))


def _positive_float(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number of seconds: {value!r}") from None
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"seconds must be positive: {value!r}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser; -h selects human-readable output, not help."""
    parser = argparse.ArgumentParser(
        prog="pyfree",
        description="Report usage information for physical memory and swap space. "
        "The unit options use powers of 1024.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    units = parser.add_argument_group("units")
    units.add_argument("-b", dest="bytes", action="store_true", help="express the values in bytes")
    units.add_argument("-k", dest="kbytes", action="store_true", help="express the values in kibibytes (default)")
    units.add_argument("-m", dest="mbytes", action="store_true", help="express the values in mebibytes")
    units.add_argument("-g", dest="gbytes", action="store_true", help="express the values in gibibytes")
    units.add_argument("-t", dest="tbytes", action="store_true", help="express the values in tebibytes")
    units.add_argument(
        "-h",
        dest="human",
        action="store_true",
        help="human output: show automatically the shortest three-digits unit",
    )
    parser.add_argument(
        "-json",
        "--json",
        dest="json",
        action="store_true",
        help="use JSON for output (not available with -s)",
    )
    parser.add_argument(
        "-meminfo",
        "--meminfo",
        metavar="PATH",
        help="read statistics from a meminfo-format file instead of the live system",
    )
    parser.add_argument(
        "-s",
        "--seconds",
        metavar="SECONDS",
        type=_positive_float,
        help="open an interactive view refreshed every SECONDS",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages (to the Textual console with -s)")
    return parser


def log_handler(watch: bool) -> logging.Handler:
    """Return the handler for log records; Textual owns the terminal in watch mode."""
    if watch:
        from textual.logging import TextualHandler

        return TextualHandler()
    return logging.StreamHandler(sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the pyfree command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.seconds is not None and args.json:
        parser.error("-json cannot be combined with -s")

    logging.basicConfig(
        handlers=[log_handler(args.seconds is not None)],
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    options = Options(
        human=args.human,
        bytes=args.bytes,
        kbytes=args.kbytes,
        mbytes=args.mbytes,
        gbytes=args.gbytes,
        tbytes=args.tbytes,
        json=args.json,
    )
    try:
        config = build_config(options)
        source = ProcMeminfoSource(args.meminfo) if args.meminfo else default_source()
        logger.debug("Using %s with %s", type(source).__name__, config)

        if args.seconds is not None:
            from pyfree.app import FreeApp

            # errors in the first read end the run before the view opens
            initial = derive(source.read())
            FreeApp(config, source, poll_rate=args.seconds, initial=initial).run()
        else:
            run(config, source, sys.stdout)
    except FreeError as e:
        print(f"pyfree: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
