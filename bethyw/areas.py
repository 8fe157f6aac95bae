"""The top level container of every imported area.

``Areas`` owns all :class:`Area` objects, keyed by local authority code, and
hands the parsing of a source stream off to the matching parser in
:mod:`bethyw.parsers` based on its :class:`SourceDataType`.
"""

import json
from typing import Dict, Iterable, Iterator, Optional, TextIO, Tuple

from . import ImportMetrics, logger
from .area import Area
from .datasets import SourceColumnMapping, SourceDataType
from .errors import InvalidArgument, InvalidInput, NotFound
from .parsers import (
    ALL_YEARS,
    StringFilterSet,
    YearFilterTuple,
    parse_authority_by_year_csv,
    parse_authority_code_csv,
    parse_welsh_stats_json,
)


class Areas:
    """Every imported area, keyed by local authority code."""

    def __init__(self) -> None:
        self._areas: Dict[str, Area] = {}

    def set_area(self, code: str, area: Area) -> None:
        """Add an area, merging it into any area already stored under ``code``.

        Names from ``area`` replace names with the same language code and its
        measures are merged year by year into the stored measures.
        """
        existing = self._areas.get(code)
        if existing is None:
            existing = Area(code)
            self._areas[code] = existing
        existing.merge(area)

    def get_area(self, code: str) -> Area:
        try:
            return self._areas[code]
        except KeyError:
            raise NotFound(f"No area found matching {code}") from None

    def __contains__(self, code: object) -> bool:
        return code in self._areas

    def __len__(self) -> int:
        return len(self._areas)

    def items(self) -> Iterator[Tuple[str, Area]]:
        """Yield ``(code, area)`` pairs ordered by authority code."""
        for code in sorted(self._areas):
            yield code, self._areas[code]

    def merge(self, other: "Areas") -> "Areas":
        for code, area in other.items():
            self.set_area(code, area)
        return self

    def _merge_all(self, areas: Iterable[Area], metrics: ImportMetrics | None) -> int:
        # Parse to the end before merging so a malformed row leaves the store as it was.
        records = list(areas)
        for area in records:
            self.set_area(area.authority_code, area)
        count = len(records)
        if metrics:
            metrics.add_merged(count)
        return count

    def populate_from_authority_code_csv(
        self,
        stream: TextIO,
        cols: SourceColumnMapping,
        areas_filter: Optional[StringFilterSet] = None,
        metrics: ImportMetrics | None = None,
    ) -> None:
        self._merge_all(parse_authority_code_csv(stream, cols, areas_filter, metrics), metrics)

    def populate_from_authority_by_year_csv(
        self,
        stream: TextIO,
        cols: SourceColumnMapping,
        areas_filter: Optional[StringFilterSet] = None,
        measures_filter: Optional[StringFilterSet] = None,
        years_filter: Optional[YearFilterTuple] = None,
        metrics: ImportMetrics | None = None,
    ) -> None:
        self._merge_all(
            parse_authority_by_year_csv(
                stream, cols, areas_filter, measures_filter, years_filter, metrics
            ),
            metrics,
        )

    def populate_from_welsh_stats_json(
        self,
        stream: TextIO,
        cols: SourceColumnMapping,
        areas_filter: Optional[StringFilterSet] = None,
        measures_filter: Optional[StringFilterSet] = None,
        years_filter: Optional[YearFilterTuple] = None,
        *,
        single_measure: bool = False,
        string_values: bool = False,
        metrics: ImportMetrics | None = None,
    ) -> None:
        self._merge_all(
            parse_welsh_stats_json(
                stream,
                cols,
                areas_filter,
                measures_filter,
                years_filter,
                single_measure=single_measure,
                string_values=string_values,
                metrics=metrics,
            ),
            metrics,
        )

    def populate(
        self,
        stream: TextIO,
        source_type: SourceDataType,
        cols: SourceColumnMapping,
        areas_filter: Optional[StringFilterSet] = None,
        measures_filter: Optional[StringFilterSet] = None,
        years_filter: Optional[YearFilterTuple] = None,
        *,
        single_measure: bool = False,
        string_values: bool = False,
        metrics: ImportMetrics | None = None,
    ) -> None:
        """Parse ``stream`` as ``source_type`` and merge the result.

        Args:
            stream: Open, readable text stream.
            source_type: Layout of the data in ``stream``.
            cols: Column mapping for the source file.
            areas_filter: Authority codes to import, empty for all.
            measures_filter: Measure codes to import, empty for all.
            years_filter: Inclusive year range, ``(0, 0)`` for all years.
            single_measure: JSON only, see :func:`parse_welsh_stats_json`.
            string_values: JSON only, see :func:`parse_welsh_stats_json`.
            metrics: Optional metrics collector.

        Raises:
            InvalidInput: If the stream is missing, closed or not readable.
            InvalidArgument: If ``source_type`` is not a known type.
            MalformedInput: If the data does not match the source layout.
        """

        if stream is None or getattr(stream, "closed", False) or not stream.readable():
            raise InvalidInput("Areas.populate: Stream is not open or not readable")

        areas_filter = areas_filter if areas_filter is not None else set()
        measures_filter = measures_filter if measures_filter is not None else set()
        years_filter = years_filter if years_filter is not None else ALL_YEARS

        before = len(self)
        if source_type is SourceDataType.AUTHORITY_CODE_CSV:
            self.populate_from_authority_code_csv(stream, cols, areas_filter, metrics)
        elif source_type is SourceDataType.AUTHORITY_BY_YEAR_CSV:
            self.populate_from_authority_by_year_csv(
                stream, cols, areas_filter, measures_filter, years_filter, metrics
            )
        elif source_type is SourceDataType.WELSH_STATS_JSON:
            self.populate_from_welsh_stats_json(
                stream,
                cols,
                areas_filter,
                measures_filter,
                years_filter,
                single_measure=single_measure,
                string_values=string_values,
                metrics=metrics,
            )
        else:
            raise InvalidArgument(f"Areas.populate: Unexpected data type {source_type!r}")

        logger.info("Store holds %s areas (%s new)", len(self), len(self) - before)

    def to_dict(self) -> Dict[str, Dict]:
        return {code: area.to_dict() for code, area in self.items()}

    def to_json(self) -> str:
        if not self._areas:
            return "{}"
        return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False)

    def __str__(self) -> str:
        return "".join(f"{area}\n" for _, area in self.items())
