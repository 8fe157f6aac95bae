"""Command line entry point for Beth Yw?.

Parses the dataset, area, measure and year arguments, imports the requested
datasets from a directory and prints them as tables or JSON.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

from . import ImportMetrics, logger
from .areas import Areas
from .datasets import AREAS, DATASETS, InputFileSource, get_dataset
from .errors import BethYwError, InvalidArgument
from .input import InputFile
from .parsers import ALL_YEARS, StringFilterSet, YearFilterTuple, is_four_digit_year

YEARS_ERROR = "Invalid input for years argument"


def split_list(value: str) -> List[str]:
    """Split a comma separated argument into its non-empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bethyw",
        description="Parse official Welsh Government statistics data files.",
    )
    parser.add_argument(
        "--dir",
        default="datasets",
        help="Directory for input data passed in as files",
    )
    parser.add_argument(
        "-d",
        "--datasets",
        type=split_list,
        action="extend",
        help=(
            "The dataset(s) to import and analyse as a comma-separated list of codes "
            "(omit or set to 'all' to import and analyse all datasets)"
        ),
    )
    parser.add_argument(
        "-a",
        "--areas",
        type=split_list,
        action="extend",
        help=(
            "The areas(s) to import and analyse as a comma-separated list of "
            "authority codes (omit or set to 'all' to import and analyse all areas)"
        ),
    )
    parser.add_argument(
        "-m",
        "--measures",
        type=split_list,
        action="extend",
        help=(
            "Select a subset of measures from the dataset(s) "
            "(omit or set to 'all' to import and analyse all measures)"
        ),
    )
    parser.add_argument(
        "-y",
        "--years",
        default="0",
        help="Focus on a particular year (YYYY) or inclusive range of years (YYYY-ZZZZ)",
    )
    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Print the output as JSON instead of tables.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output while importing.",
    )
    return parser


def _contains_all(values: Iterable[str]) -> bool:
    return any(value.lower() == "all" for value in values)


def parse_datasets_arg(values: Optional[Sequence[str]]) -> List[InputFileSource]:
    """Resolve dataset codes, returning every dataset for none or ``all``.

    Raises:
        InvalidArgument: If a code matches no known dataset.
    """
    if not values or _contains_all(values):
        return list(DATASETS)
    return [get_dataset(value) for value in values]


def parse_areas_arg(values: Optional[Sequence[str]]) -> Set[str]:
    """Authority codes to import, or an empty set for every area."""
    if not values or _contains_all(values):
        return set()
    return {value.upper() for value in values}


def parse_measures_arg(values: Optional[Sequence[str]]) -> Set[str]:
    """Measure codes to import, or an empty set for every measure."""
    if not values or _contains_all(values):
        return set()
    return {value.lower() for value in values}


def _parse_year(text: str) -> int:
    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidArgument(YEARS_ERROR)
    year = int(text)
    if year != 0 and not is_four_digit_year(year):
        raise InvalidArgument(YEARS_ERROR)
    return year


def parse_years_arg(value: Optional[str]) -> YearFilterTuple:
    """Parse ``YYYY`` or ``YYYY-ZZZZ`` into an inclusive range.

    ``0`` (or a range with a 0 bound) means every year, returned as ``(0, 0)``.

    Raises:
        InvalidArgument: If the value is not a year or a range of years.
    """
    if value is None:
        return ALL_YEARS

    parts = value.split("-")
    if len(parts) == 1:
        start = end = _parse_year(parts[0])
    elif len(parts) == 2:
        start, end = _parse_year(parts[0]), _parse_year(parts[1])
    else:
        raise InvalidArgument(YEARS_ERROR)

    if start == 0 or end == 0:
        return ALL_YEARS
    if start > end:
        raise InvalidArgument(YEARS_ERROR)
    return start, end


def load_areas(
    areas: Areas,
    directory: str | Path,
    areas_filter: StringFilterSet,
    metrics: ImportMetrics | None = None,
) -> None:
    """Import the area names file from ``directory`` into ``areas``."""
    with InputFile(Path(directory) / AREAS.file).open() as stream:
        areas.populate(stream, AREAS.type, AREAS.cols, areas_filter, metrics=metrics)


def load_datasets(
    areas: Areas,
    directory: str | Path,
    datasets: Iterable[InputFileSource],
    areas_filter: StringFilterSet,
    measures_filter: StringFilterSet,
    years_filter: YearFilterTuple,
    metrics: ImportMetrics | None = None,
) -> None:
    """Import each dataset into ``areas``, reporting failures and moving on.

    Each dataset is parsed into its own store first and merged into
    ``areas`` only once it has been read completely, so a dataset that fails
    halfway leaves ``areas`` untouched.
    """
    for dataset in datasets:
        path = Path(directory) / dataset.file
        staged = Areas()
        try:
            with InputFile(path).open() as stream:
                staged.populate(
                    stream,
                    dataset.type,
                    dataset.cols,
                    areas_filter,
                    measures_filter,
                    years_filter,
                    single_measure=dataset.single_measure,
                    string_values=dataset.string_values,
                    metrics=metrics,
                )
        except BethYwError as exc:
            logger.error("Failed to import dataset %s from %s: %s", dataset.code, path, exc)
            print(f"Error importing dataset:\n{dataset.file}: {exc}", file=sys.stderr)
            if metrics:
                metrics.mark_dataset_failed()
            continue

        areas.merge(staged)
        if metrics:
            metrics.mark_dataset_loaded()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        datasets = parse_datasets_arg(args.datasets)
        areas_filter = parse_areas_arg(args.areas)
        measures_filter = parse_measures_arg(args.measures)
        years_filter = parse_years_arg(args.years)
    except InvalidArgument as exc:
        parser.error(str(exc))

    metrics = ImportMetrics()
    data = Areas()
    try:
        load_areas(data, args.dir, areas_filter, metrics)
    except BethYwError as exc:
        logger.error("Failed to import areas: %s", exc)
        print(f"Error importing areas:\n{exc}", file=sys.stderr)
        return 1

    load_datasets(data, args.dir, datasets, areas_filter, measures_filter, years_filter, metrics)
    logger.info(
        "Imported %s datasets (%s failed), %s rows",
        metrics.datasets_loaded,
        metrics.datasets_failed,
        metrics.rows_processed,
    )

    if args.json:
        print(data.to_json())
    else:
        print(data)
    return 0


if __name__ == "__main__":
    sys.exit(main())
