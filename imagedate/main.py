import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import config
from .core import ImageDateApp
from .exceptions import (
    ConfigurationError,
    DirectoryNotFoundError,
    ImageDateError,
    TerminatedError,
    UserCancelled,
)
from .models import SequenceConfig
from .scanning.filesystem import normalize_directory
from .signals import install_signal_handlers, restore_signal_handlers

DESCRIPTION = (
    "Rewrite file and metadata dates on images to increment in the order of the "
    "alphabetized filenames. Useful when a photo service will only order by date, "
    "but you want images ordered by filename. Date and time of the first image is "
    f"customizable (default {config.DEFAULT_BASE_DATE} {config.DEFAULT_BASE_TIME}) "
    f"and images are separated in increments of {config.DEFAULT_INTERVAL_MINUTES} minutes."
)


class ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit status 1 instead of argparse's 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: {message}\n")


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, to a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv=None):
    p = ArgumentParser(prog=config.PROGNAME, description=DESCRIPTION)

    p.add_argument("directory", metavar="DIR", help="Directory of images to re-date")

    p.add_argument("-q", "--quiet", action="store_true", help="Quiet mode. Accept all defaults.")
    p.add_argument("--interval", type=float, default=config.DEFAULT_INTERVAL_MINUTES,
                   help=f"Minutes between consecutive images (default: {config.DEFAULT_INTERVAL_MINUTES})")
    p.add_argument("--verify", action="store_true", help="Read the dates back and check them after writing")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("--version", action="version", version=f"%(prog)s {config.VERSION}")

    return p.parse_args(argv)


def ask(question: str) -> str:
    """Prints a question and returns the answer; EOF counts as an empty answer."""
    print(question)
    try:
        return input()
    except EOFError:
        return ""


def error_exit(message: str) -> int:
    print(f"{config.PROGNAME}: {message or 'Unknown Error'}", file=sys.stderr)
    return 1


def run(args, directory: str) -> None:
    if not Path(directory).is_dir():
        raise DirectoryNotFoundError(directory)

    date_str = time_str = None
    if not args.quiet:
        answer = ask(
            "WARNING: This script will overwrite file and metadata dates for any images "
            f"it finds in the directory {directory} -- do you want to proceed? (y/N)"
        )
        if "y" not in answer:
            raise UserCancelled()

        date_str = ask(
            "On what date do you want your images to begin incrementing "
            f"(YYYY:MM:DD, default {config.DEFAULT_BASE_DATE})?"
        )
        time_str = ask(
            "At what time do you want your images to begin incrementing "
            f"(HH:MM:SS, default {config.DEFAULT_BASE_TIME})?"
        )

    seq_config = SequenceConfig.from_strings(date_str, time_str, args.interval)

    print("Setting image dates...")
    ImageDateApp().run(directory, seq_config, verify=args.verify)
    print("                      ...done.")


def main(argv=None) -> int:
    previous = install_signal_handlers()
    try:
        args = parse_args(argv)
        try:
            setup_logging(args.verbose, args.log_file)
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file: {e}") from e

        run(args, normalize_directory(args.directory))
    except UserCancelled:
        print("Operation canceled.")
    except DirectoryNotFoundError as e:
        print(f"Error. Directory '{e.directory}' not found.")
    except TerminatedError as e:
        print(f"\n{config.PROGNAME}: Program terminated", file=sys.stderr)
        return 128 + e.signum
    except ImageDateError as e:
        logging.debug("Fatal error", exc_info=True)
        return error_exit(str(e))
    finally:
        restore_signal_handlers(previous)
    return 0


if __name__ == "__main__":
    sys.exit(main())
