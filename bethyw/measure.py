"""A single measure for an area, e.g. population, indexed by year."""

from typing import Dict, Iterator, Tuple

from .errors import NotFound

STAT_HEADINGS = ("Average", "Diff.", "% Diff.")


def _value_width(value: float) -> int:
    """Width of ``value`` printed with six decimal digits."""
    return len(f"{value:.6f}")


class Measure:
    """Values for one named metric, keyed by year.

    The codename is lowercased on construction and never changes. Values are
    stored one per year and always iterated in ascending year order.
    """

    def __init__(self, code: str, label: str) -> None:
        self._code = code.lower()
        self.label = label
        self._values: Dict[int, float] = {}

    @property
    def code(self) -> str:
        return self._code

    def get_value(self, year: int) -> float:
        try:
            return self._values[year]
        except KeyError:
            raise NotFound(f"No value found for year {year}") from None

    def set_value(self, year: int, value: float) -> None:
        self._values[int(year)] = float(value)

    def items(self) -> Iterator[Tuple[int, float]]:
        """Yield ``(year, value)`` pairs in ascending year order."""
        for year in sorted(self._values):
            yield year, self._values[year]

    @property
    def values(self) -> Dict[int, float]:
        return dict(self.items())

    def __len__(self) -> int:
        return len(self._values)

    def get_average(self) -> float:
        if not self._values:
            return 0.0
        return sum(self._values.values()) / len(self._values)

    def get_difference(self) -> float:
        """Difference between the last and the first year's value."""
        if not self._values:
            return 0.0
        first = self._values[min(self._values)]
        last = self._values[max(self._values)]
        return last - first

    def get_difference_as_percentage(self) -> float:
        """Difference as a percentage of the first year's value.

        Returns 0 when there are no values or the first value is 0.
        """
        if not self._values:
            return 0.0
        first = self._values[min(self._values)]
        if first == 0:
            return 0.0
        return self.get_difference() / first * 100

    def merge(self, other: "Measure") -> "Measure":
        """Copy every year of ``other`` into this measure.

        Years present in both take the value from ``other``; years only held
        by this measure are kept.
        """
        for year, value in other.items():
            self._values[year] = value
        return self

    def to_dict(self) -> Dict[str, float]:
        return {str(year): value for year, value in self.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Measure):
            return NotImplemented
        return (
            self.code == other.code
            and self.label == other.label
            and self._values == other._values
        )

    def __repr__(self) -> str:
        return f"Measure(code={self.code!r}, label={self.label!r}, years={len(self)})"

    def __str__(self) -> str:
        lines = [f"{self.label} ({self.code}) "]
        if not self._values:
            return lines[0] + "\n"

        stats = (
            self.get_average(),
            self.get_difference(),
            self.get_difference_as_percentage(),
        )

        header = []
        row = []
        for year, value in self.items():
            width = _value_width(value)
            header.append(f"{year:>{width}d} ")
            row.append(f"{value:>{width}.6f} ")
        for heading, value in zip(STAT_HEADINGS, stats):
            width = _value_width(value)
            header.append(f"{heading:>{width}} ")
            row.append(f"{value:>{width}.6f} ")

        lines.append("".join(header))
        lines.append("".join(row))
        return "\n".join(lines) + "\n"
