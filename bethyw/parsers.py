"""Parsers for the StatsWales source formats.

Every parser reads a text stream and yields fresh :class:`Area` records.
Records are never updated in place once yielded; the caller merges them into
its store with :meth:`Areas.set_area`.
"""

import csv
import json
import math
from typing import AbstractSet, Any, Dict, Iterable, Iterator, List, Optional, TextIO, Tuple

from . import ImportMetrics, logger
from .area import Area
from .datasets import SourceColumn, SourceColumnMapping
from .errors import MalformedInput
from .measure import Measure

StringFilterSet = AbstractSet[str]
YearFilterTuple = Tuple[int, int]

ALL_YEARS: YearFilterTuple = (0, 0)


def is_four_digit_year(year: int) -> bool:
    return 999 < year < 10000


def parse_number(text: str) -> float:
    """Parse a finite decimal number.

    Raises:
        ValueError: For text ``float`` rejects, digit grouping such as
            ``1_000``, NaN and infinities.
    """
    if "_" in text:
        raise ValueError(f"Digit grouping is not allowed: {text!r}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Value is not finite: {text!r}")
    return value


def _column(cols: SourceColumnMapping, role: SourceColumn) -> str:
    try:
        return cols[role]
    except KeyError:
        raise MalformedInput(f"Column mapping has no entry for {role.name}") from None


def _check_column_count(cols: SourceColumnMapping, expected: int) -> None:
    if len(cols) != expected:
        raise MalformedInput(
            f"Expected {expected} columns in the column mapping, got {len(cols)}"
        )


def _normalize_filter(values: Optional[StringFilterSet], transform) -> frozenset:
    return frozenset(transform(value) for value in values or ())


def _year_in_range(years_filter: Optional[YearFilterTuple], year: int) -> bool:
    if not years_filter or tuple(years_filter) == ALL_YEARS:
        return True
    start, end = years_filter
    return start <= year <= end


def _csv_rows(stream: TextIO) -> Iterator[List[str]]:
    """Yield CSV rows with line endings stripped, skipping blank lines."""
    lines = (line.rstrip("\r\n") for line in stream)
    for row in csv.reader(lines):
        if not row:
            continue
        yield row


def parse_authority_code_csv(
    stream: TextIO,
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilterSet] = None,
    metrics: ImportMetrics | None = None,
) -> Iterator[Area]:
    """Parse a CSV of authority codes with their English and Welsh names.

    Args:
        stream: Readable text stream positioned at the header row.
        cols: Column mapping; must hold exactly three entries.
        areas_filter: Authority codes to keep (exact match), or empty for all.
        metrics: Optional metrics collector.

    Yields:
        One :class:`Area` per accepted row, with ``eng`` and ``cym`` names.

    Raises:
        MalformedInput: If the mapping is the wrong size or a row has an
            empty or missing field.
    """

    _check_column_count(cols, 3)
    wanted = frozenset(areas_filter or ())

    logger.info("Parsing authority code CSV")
    rows = _csv_rows(stream)
    next(rows, None)

    count = 0
    for line_number, row in enumerate(rows, start=2):
        count += 1
        fields = (row + ["", "", ""])[:3]
        if any(not value for value in fields):
            raise MalformedInput(
                f"Line {line_number} does not have three comma separated values"
            )
        code, english_name, welsh_name = fields

        if wanted and code not in wanted:
            continue

        area = Area(code)
        area.set_name("eng", english_name)
        area.set_name("cym", welsh_name)
        yield area

    logger.info("Processed %s authority code rows", count)
    if metrics:
        metrics.add_rows(count)


def _parse_year_headers(headers: Iterable[str]) -> List[int]:
    years = []
    for header in headers:
        try:
            year = int(header)
        except ValueError:
            raise MalformedInput(f"Year column header is not a number: {header!r}") from None
        if not is_four_digit_year(year):
            raise MalformedInput(f"Year column header is not a four digit year: {header!r}")
        years.append(year)
    return years


def parse_authority_by_year_csv(
    stream: TextIO,
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilterSet] = None,
    measures_filter: Optional[StringFilterSet] = None,
    years_filter: Optional[YearFilterTuple] = None,
    metrics: ImportMetrics | None = None,
) -> Iterator[Area]:
    """Parse a wide CSV holding one measure with a column per year.

    The first row is the authority code header followed by years. Each
    following row is an authority code and one value per year. Cells that do
    not hold a number are skipped, which leaves gaps in sparse datasets.

    Raises:
        MalformedInput: If the mapping is the wrong size, a year header is
            not a four digit integer, or a row is shorter than the header.
    """

    _check_column_count(cols, 3)
    measure_code = _column(cols, SourceColumn.SINGLE_MEASURE_CODE).lower()
    measure_label = _column(cols, SourceColumn.SINGLE_MEASURE_NAME)

    wanted_measures = _normalize_filter(measures_filter, str.lower)
    if wanted_measures and measure_code not in wanted_measures:
        logger.debug("Skipping measure %s excluded by filter", measure_code)
        return

    wanted_areas = _normalize_filter(areas_filter, str.upper)

    logger.info("Parsing authority by year CSV for measure %s", measure_code)
    rows = _csv_rows(stream)
    header = next(rows, None)
    if header is None:
        raise MalformedInput("Missing header row")
    years = _parse_year_headers(header[1:])
    columns = [
        (index, year)
        for index, year in enumerate(years, start=1)
        if _year_in_range(years_filter, year)
    ]

    count = 0
    for line_number, row in enumerate(rows, start=2):
        count += 1
        if len(row) < len(years) + 1:
            raise MalformedInput(f"Line {line_number} is missing values")
        code = row[0].strip()
        if not code:
            raise MalformedInput(f"Line {line_number} has no authority code")

        if wanted_areas and code.upper() not in wanted_areas:
            continue

        measure = Measure(measure_code, measure_label)
        for index, year in columns:
            cell = row[index]
            try:
                value = parse_number(cell)
            except ValueError:
                logger.debug("Skipping non-numeric cell %r for %s in %s", cell, code, year)
                if metrics:
                    metrics.mark_cell_skipped()
                continue
            measure.set_value(year, value)

        area = Area(code)
        area.set_measure(measure_code, measure)
        yield area

    logger.info("Processed %s rows for measure %s", count, measure_code)
    if metrics:
        metrics.add_rows(count)


def _field(record: Dict[str, Any], name: str) -> Any:
    try:
        return record[name]
    except KeyError:
        raise MalformedInput(f"Missing field {name}") from None


def _parse_json_year(raw: Any) -> int:
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()):
        raise MalformedInput(f"Year is not a whole number: {raw!r}")
    return int(text)


def _parse_json_value(raw: Any, string_values: bool) -> float:
    if string_values:
        try:
            return parse_number(str(raw))
        except ValueError:
            raise MalformedInput(f"Value is not a number: {raw!r}") from None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedInput(f"Value is not a number: {raw!r}")
    if not math.isfinite(raw):
        raise MalformedInput(f"Value is not finite: {raw!r}")
    return float(raw)


def parse_welsh_stats_json(
    stream: TextIO,
    cols: SourceColumnMapping,
    areas_filter: Optional[StringFilterSet] = None,
    measures_filter: Optional[StringFilterSet] = None,
    years_filter: Optional[YearFilterTuple] = None,
    *,
    single_measure: bool = False,
    string_values: bool = False,
    metrics: ImportMetrics | None = None,
) -> Iterator[Area]:
    """Parse a StatsWales JSON export.

    The export holds its rows under a top-level ``value`` array. Each row is
    one value for one area, measure and year, with field names given by
    ``cols``.

    Args:
        stream: Readable text stream holding the JSON document.
        cols: Column mapping from column roles to field names.
        areas_filter: Authority codes to keep (case-insensitive).
        measures_filter: Measure codes to keep (case-insensitive).
        years_filter: Inclusive year range, ``(0, 0)`` for every year.
        single_measure: Take the measure code and label from the mapping's
            ``SINGLE_MEASURE_CODE``/``SINGLE_MEASURE_NAME`` entries.
        string_values: The value field holds a number encoded as a string.
        metrics: Optional metrics collector.

    Yields:
        One single-value :class:`Area` per accepted row.

    Raises:
        MalformedInput: On invalid JSON, a missing field, a non-numeric year
            or a value that is not a number.
    """

    try:
        document = json.load(stream)
    except json.JSONDecodeError as exc:
        raise MalformedInput(f"Invalid JSON: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("value"), list):
        raise MalformedInput("Expected an object with a 'value' array")

    code_field = _column(cols, SourceColumn.AUTH_CODE)
    name_field = _column(cols, SourceColumn.AUTH_NAME_ENG)
    year_field = _column(cols, SourceColumn.YEAR)
    value_field = _column(cols, SourceColumn.VALUE)
    if single_measure:
        fixed_code = _column(cols, SourceColumn.SINGLE_MEASURE_CODE)
        fixed_label = _column(cols, SourceColumn.SINGLE_MEASURE_NAME)
    else:
        measure_code_field = _column(cols, SourceColumn.MEASURE_CODE)
        measure_name_field = _column(cols, SourceColumn.MEASURE_NAME)

    wanted_areas = _normalize_filter(areas_filter, str.upper)
    wanted_measures = _normalize_filter(measures_filter, str.lower)

    logger.info("Parsing StatsWales JSON with %s rows", len(document["value"]))
    count = 0
    for record in document["value"]:
        count += 1
        if not isinstance(record, dict):
            raise MalformedInput(f"Row {count} is not an object")

        code = str(_field(record, code_field))
        if wanted_areas and code.upper() not in wanted_areas:
            continue

        if single_measure:
            measure_code, measure_label = fixed_code, fixed_label
        else:
            measure_code = str(_field(record, measure_code_field))
            measure_label = str(_field(record, measure_name_field))
        if wanted_measures and measure_code.lower() not in wanted_measures:
            continue

        year = _parse_json_year(_field(record, year_field))
        if not _year_in_range(years_filter, year):
            continue

        value = _parse_json_value(_field(record, value_field), string_values)
        measure = Measure(measure_code, measure_label)
        measure.set_value(year, value)

        area = Area(code)
        area.set_name("eng", str(_field(record, name_field)))
        area.set_measure(measure_code, measure)
        yield area

    logger.info("Processed %s JSON rows", count)
    if metrics:
        metrics.add_rows(count)
