# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for fontruns.

This module provides commands for inspecting the coverage of font
files and the runs a fallback chain splits text into.
"""

# Standard Library
import logging
import sys
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init
from tqdm import tqdm

# Local
from . import __version__
from .coverage import format_ranges_compact
from .exceptions import FontLoadError, TypefaceCollectionError
from .fonts import FontRun, Typeface, TypefaceCollection, load_typeface
from .unicode import get_vs_index
from .utils import setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_FILE_NOT_FOUND = 2
EXIT_LOAD_FAILED = 3

logger = logging.getLogger(__name__)

# Alternating run colors
_RUN_COLORS = (Fore.CYAN, Fore.MAGENTA, Fore.YELLOW, Fore.GREEN)


def print_success(msg: str) -> None:
    """Echoes a green check line, used for a typeface's coverage summary."""
    click.echo(f"{Fore.GREEN}✓{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Echoes a load or segmentation failure to stderr before exiting nonzero."""
    click.echo(f"{Fore.RED}✗ Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Flags a typeface whose cmap yielded no coverage at all."""
    click.echo(f"{Fore.YELLOW}⚠{Style.RESET_ALL} {msg}")


def _print_coverage(typeface: Typeface, show_variations: bool) -> None:
    """Prints the coverage summary of one typeface.

    Args:
        typeface: The loaded typeface.
        show_variations: Whether to list variation selector coverage.
    """
    ranges = typeface.coverage.ranges()
    if not ranges:
        print_warning(f"{typeface.name}: no coverage")
    else:
        print_success(
            f"{typeface.name}: {len(typeface.coverage)} code point(s) "
            f"in {len(ranges)} range(s)"
        )
        click.echo(f"  {format_ranges_compact(ranges)}")

    if show_variations:
        selectors = typeface.variation_selectors()
        if not selectors:
            click.echo("  no variation sequences")
        for selector in selectors:
            bitset = typeface.variation_coverage[get_vs_index(selector)]
            click.echo(f"  U+{selector:04X}: {len(bitset or ())} sequence(s)")


def _print_runs(units_text: str, runs: list[FontRun]) -> None:
    """Prints one line per run.

    Args:
        units_text: The segmented text.
        runs: Runs returned by compute_runs.
    """
    encoded = units_text.encode("utf-16-le", "surrogatepass")
    for i, run in enumerate(runs):
        color = _RUN_COLORS[i % len(_RUN_COLORS)]
        span = encoded[run.start * 2 : run.end * 2].decode("utf-16-le", "replace")
        click.echo(
            f"{run.start:>5} {run.end:>5}  {color}{run.typeface.name}"
            f"{Style.RESET_ALL}  {span!r}"
        )


def _load_all(paths: tuple[str, ...], progress: bool) -> list[Typeface]:
    iterator = tqdm(paths, desc="Loading fonts", unit="font") if progress else paths
    return [load_typeface(Path(p)) for p in iterator]


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Inspects font coverage and fallback runs."""
    # Initialize colorama for Windows compatibility
    init()


@main.command()
@click.argument("fonts", nargs=-1, required=True, type=click.Path())
@click.option(
    "--variations",
    is_flag=True,
    help="Also list variation sequence coverage",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
def coverage(
    fonts: tuple[str, ...], variations: bool, quiet: bool, verbose: bool
) -> None:
    """Prints the code points covered by each FONT."""
    setup_logging(verbose=verbose, quiet=quiet)
    exit_code = EXIT_SUCCESS
    try:
        typefaces = _load_all(fonts, progress=len(fonts) > 1 and not quiet)
        if not quiet:
            for typeface in typefaces:
                _print_coverage(typeface, variations)
    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except FontLoadError as e:
        print_error(str(e))
        exit_code = EXIT_LOAD_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)


@main.command()
@click.argument("fonts", nargs=-1, required=True, type=click.Path())
@click.option(
    "-t",
    "--text",
    required=True,
    help="Text to split into runs",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
def runs(fonts: tuple[str, ...], text: str, verbose: bool) -> None:
    """Splits TEXT into runs over the fallback chain of FONTS.

    FONTS are given in priority order, most preferred first.
    """
    setup_logging(verbose=verbose)
    exit_code = EXIT_SUCCESS
    try:
        collection = TypefaceCollection(_load_all(fonts, progress=False))
        _print_runs(text, collection.compute_runs(text))
    except FileNotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except (FontLoadError, TypefaceCollectionError) as e:
        print_error(str(e))
        exit_code = EXIT_LOAD_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
