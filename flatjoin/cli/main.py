"""
flatjoin CLI - sort, join and search delimited flat-text files

Usage:
    flatjoin sort FILE [options]
    flatjoin join LEFT RIGHT [options]
    flatjoin search FILE [options]
"""

import logging
import sys
import time
from typing import List, Optional, Tuple

import click
from rich.console import Console

from flatjoin import __version__
from flatjoin.cli.formatters import get_formatter
from flatjoin.core.config import DEFAULT_DELIMITER, DEFAULT_ENCODING, DEFAULT_JOIN_KEY, DEFAULT_SORT_KEY
from flatjoin.core.errors import PredicateSyntaxError
from flatjoin.core.predicate_parser import parse_filter, parse_predicate
from flatjoin.core.query import manipulate, search as search_rows
from flatjoin.core.types import Predicate
from flatjoin.operators.sort import Sorter
from flatjoin.readers.text_reader import DelimitedTextReader, write_lines

FORMATS = ["text", "table", "json", "csv"]


def _predicates(ctx, param, values: Tuple[str, ...]) -> List[Predicate]:
    """Click callback: parse repeated predicate options"""
    try:
        return [parse_predicate(value) for value in values]
    except (PredicateSyntaxError, TypeError, ValueError) as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def _columns(ctx, param, value: Optional[str]) -> Optional[List[int]]:
    """Click callback: parse a comma separated column list like '0,2,3'"""
    if value is None:
        return None
    if value.strip() == "":
        return []
    try:
        columns = [int(part) for part in value.split(",")]
    except ValueError:
        raise click.BadParameter(f"Expected comma separated column numbers, got {value!r}")
    if any(c < 0 for c in columns):
        raise click.BadParameter(f"Column numbers must be non-negative, got {value!r}")
    return columns


def _unescape(delimiter: str) -> str:
    """Allow '\\t' on the command line for a tab delimiter"""
    return delimiter.encode("utf-8").decode("unicode_escape") if "\\" in delimiter else delimiter


def _emit(
    rows: List[str],
    fmt: str,
    output: Optional[str],
    delimiter: str,
    no_color: bool,
    start_time: Optional[float] = None,
    encoding: str = DEFAULT_ENCODING,
) -> None:
    """Format rows and write them to stdout or a file"""
    if output and fmt == "text":
        count = write_lines(output, rows, encoding=encoding)
        click.echo(f"Results written to {output} ({count} rows)", err=True)
    else:
        formatter = get_formatter(fmt)
        output_text = formatter.format(
            rows,
            delimiter=delimiter,
            no_color=no_color or (not sys.stdout.isatty()),
            show_footer=not output,
        )
        if output:
            with open(output, "w", encoding=encoding) as f:
                f.write(output_text)
            click.echo(f"Results written to {output} ({fmt} format)", err=True)
        elif output_text:
            click.echo(output_text)

    if start_time is not None:
        elapsed = time.time() - start_time
        time_text = f"Processed {len(rows)} rows in {elapsed:.3f}s"
        if no_color:
            click.echo(time_text, err=True)
        else:
            console = Console(stderr=True)
            console.print(f"[dim]{time_text}[/dim]")


def _fail(e: Exception, debug: bool) -> None:
    if isinstance(e, FileNotFoundError):
        click.echo(f"Error: File not found - {e}", err=True)
    else:
        click.echo(f"Error: {e}", err=True)
    if debug:
        raise e
    sys.exit(1)


common_output_options = [
    click.option(
        "--format",
        "-f",
        "fmt",
        type=click.Choice(FORMATS, case_sensitive=False),
        default="text",
        help="Output format (default: text)",
    ),
    click.option(
        "--output",
        "-o",
        type=click.Path(),
        default=None,
        help="Write output to file instead of stdout",
    ),
    click.option("--no-color", is_flag=True, help="Disable colored output"),
    click.option("--time", "-t", "show_time", is_flag=True, help="Show execution time"),
    click.option("--debug", is_flag=True, help="Re-raise errors with a traceback"),
]


def output_options(func):
    for option in reversed(common_output_options):
        func = option(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="flatjoin")
@click.option("--verbose", "-v", count=True, help="Log progress (-v info, -vv debug)")
def cli(verbose: int):
    """
    flatjoin - sort-merge join for delimited flat-text files

    Columns are 0-based. Predicates are written 'COL OP VALUE' (e.g. '1 >= 2000',
    "6 = 'Tokyo'") or 'COL:OP:VALUE' (e.g. '1:GTE:2000'). A bare integer value
    compares numerically, anything else (or a quoted value) as text.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


@cli.command()
@click.argument("file", type=str)
@click.option("--key", "-k", type=int, default=DEFAULT_SORT_KEY, show_default=True, help="Sort key column")
@click.option("--delimiter", "-d", default=DEFAULT_DELIMITER, help="Column delimiter (default: space)")
@click.option("--where", "-w", multiple=True, callback=_predicates, help="Keep only matching rows (repeatable)")
@click.option("--encoding", default=DEFAULT_ENCODING, show_default=True, help="File encoding")
@output_options
def sort(file, key, delimiter, where, encoding, fmt, output, no_color, show_time, debug):
    """
    Sort FILE by a key column

    Examples:

        \b
        $ flatjoin sort orders.txt -k 1
        $ flatjoin sort orders.txt -k 0 -w '2 >= 100' -o orders.sorted
    """
    try:
        start_time = time.time() if show_time else None
        delimiter = _unescape(delimiter)
        sorter = Sorter(file, key_column=key, delimiter=delimiter, encoding=encoding)
        for predicate in where:
            sorter.add_predicate(predicate.column, predicate.operator, predicate.value)
        _emit(sorter.sort(), fmt, output, delimiter, no_color, start_time, encoding)
    except Exception as e:
        _fail(e, debug)


@cli.command()
@click.argument("left", type=str)
@click.argument("right", type=str)
@click.option("--key", "-k", type=int, default=None, help="Join key column for both files (default: 1)")
@click.option("--left-key", type=int, default=None, help="Left join key column")
@click.option("--right-key", type=int, default=None, help="Right join key column")
@click.option("--delimiter", "-d", default=DEFAULT_DELIMITER, help="Column delimiter (default: space)")
@click.option("--left-columns", callback=_columns, help="Left output columns, e.g. '0,2,3'")
@click.option("--right-columns", callback=_columns, help="Right output columns")
@click.option("--left-omit", callback=_columns, help="Left columns omitted by default (default: none)")
@click.option("--right-omit", callback=_columns, help="Right columns omitted by default (default: 0,1)")
@click.option("--left-where", multiple=True, callback=_predicates, help="Pre-sort predicate on LEFT (repeatable)")
@click.option("--right-where", multiple=True, callback=_predicates, help="Pre-sort predicate on RIGHT (repeatable)")
@click.option("--where", "-w", multiple=True, callback=_predicates, help="Predicate on joined rows (repeatable)")
@click.option(
    "--presorted",
    type=click.Choice(["none", "left", "right", "both"], case_sensitive=False),
    default="none",
    help="Skip sorting files that are already sorted by their key",
)
@click.option("--temp-dir", type=click.Path(file_okay=False), default=None, help="Directory for sorted temporary files")
@click.option("--encoding", default=DEFAULT_ENCODING, show_default=True, help="File encoding")
@click.option("--explain", is_flag=True, help="Show the execution plan instead of results")
@output_options
def join(
    left,
    right,
    key,
    left_key,
    right_key,
    delimiter,
    left_columns,
    right_columns,
    left_omit,
    right_omit,
    left_where,
    right_where,
    where,
    presorted,
    temp_dir,
    encoding,
    explain,
    fmt,
    output,
    no_color,
    show_time,
    debug,
):
    """
    Join LEFT and RIGHT on a key column

    Both files are sorted (in parallel) unless --presorted says otherwise,
    then merge joined. Only keys present in both files produce output.

    Examples:

        \b
        $ flatjoin join customers.txt orders.txt -k 0
        $ flatjoin join a.txt b.txt --left-key 0 --right-key 2 --right-columns 3,4
        $ flatjoin join a.txt b.txt --left-where "6 = 'Tokyo'" -w '1:GTE:1250053' -f table
    """
    try:
        start_time = time.time() if show_time else None
        delimiter = _unescape(delimiter)
        default_key = DEFAULT_JOIN_KEY if key is None else key

        with manipulate(
            left,
            right,
            delimiter=delimiter,
            left_key=default_key if left_key is None else left_key,
            right_key=default_key if right_key is None else right_key,
            left_columns=left_columns,
            right_columns=right_columns,
            left_omit=left_omit,
            right_omit=right_omit,
            encoding=encoding,
            temp_dir=temp_dir,
        ) as m:
            for p in left_where:
                m.left_sort_filter(p.column, p.operator, p.value)
            for p in right_where:
                m.right_sort_filter(p.column, p.operator, p.value)
            for p in where:
                m.search_filter(p.column, p.operator, p.value)

            if explain:
                click.echo(m.explain())
                return

            m.sort(left=presorted not in ("left", "both"), right=presorted not in ("right", "both"))
            m.join()
            rows = m.search().to_list()

        _emit(rows, fmt, output, delimiter, no_color, start_time, encoding)
    except Exception as e:
        _fail(e, debug)


@cli.command()
@click.argument("file", type=str)
@click.option("--delimiter", "-d", default=DEFAULT_DELIMITER, help="Column delimiter (default: space)")
@click.option("--where", "-w", multiple=True, help="Keep only matching rows (repeatable)")
@click.option("--encoding", default=DEFAULT_ENCODING, show_default=True, help="File encoding")
@output_options
def search(file, delimiter, where, encoding, fmt, output, no_color, show_time, debug):
    """
    Filter the rows of FILE (for example a saved join result)

    Examples:

        \b
        $ flatjoin search joined.txt -w '1 = 1250053'
    """
    try:
        start_time = time.time() if show_time else None
        delimiter = _unescape(delimiter)
        row_filter = parse_filter(where, delimiter)
        rows = search_rows(DelimitedTextReader(file, encoding=encoding), row_filter)
        _emit(rows, fmt, output, delimiter, no_color, start_time, encoding)
    except PredicateSyntaxError as e:
        raise click.BadParameter(str(e), param_hint="'--where'")
    except Exception as e:
        _fail(e, debug)


if __name__ == "__main__":
    cli()
