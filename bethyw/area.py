"""A single local authority area with its names and measures."""

from typing import Dict, Iterator, Tuple

from .errors import InvalidArgument, NotFound
from .measure import Measure


class Area:
    """An area identified by its local authority code.

    Names are keyed by three letter ISO 639-3 language codes (e.g. ``eng``,
    ``cym``). Measures are keyed by their lowercased codename.
    """

    def __init__(self, authority_code: str) -> None:
        self._authority_code = authority_code
        self._names: Dict[str, str] = {}
        self._measures: Dict[str, Measure] = {}

    @property
    def authority_code(self) -> str:
        return self._authority_code

    @property
    def names(self) -> Dict[str, str]:
        return dict(self._names)

    def get_name(self, lang: str) -> str:
        try:
            return self._names[lang.lower()]
        except KeyError:
            raise NotFound(f"No name found for language {lang}") from None

    def has_name(self, lang: str) -> bool:
        return lang.lower() in self._names

    def set_name(self, lang: str, name: str) -> None:
        if len(lang) != 3 or not lang.isalpha():
            raise InvalidArgument(
                "Area.set_name: Language code must be three alphabetical letters only"
            )
        self._names[lang.lower()] = name

    def get_measure(self, code: str) -> Measure:
        try:
            return self._measures[code]
        except KeyError:
            raise NotFound(f"No measure found matching {code}") from None

    def has_measure(self, code: str) -> bool:
        return code in self._measures

    def set_measure(self, code: str, measure: Measure) -> None:
        """Add a measure, merging it into any measure with the same code."""
        key = code.lower()
        existing = self._measures.get(key)
        if existing is None:
            existing = Measure(key, measure.label)
            self._measures[key] = existing
        existing.merge(measure)

    def measures(self) -> Iterator[Tuple[str, Measure]]:
        """Yield ``(code, measure)`` pairs in alphabetical code order."""
        for code in sorted(self._measures):
            yield code, self._measures[code]

    def __len__(self) -> int:
        return len(self._measures)

    def merge(self, other: "Area") -> "Area":
        """Copy every name and measure of ``other`` into this area."""
        self._names.update(other._names)
        for code, measure in other.measures():
            self.set_measure(code, measure)
        return self

    def display_name(self) -> str:
        if "eng" in self._names and "cym" in self._names:
            return f"{self._names['eng']} / {self._names['cym']}"
        if "eng" in self._names:
            return self._names["eng"]
        if "cym" in self._names:
            return self._names["cym"]
        return "Unnamed"

    def to_dict(self) -> Dict[str, Dict]:
        return {
            "names": dict(self._names),
            "measures": {code: measure.to_dict() for code, measure in self.measures()},
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Area):
            return NotImplemented
        return (
            self.authority_code == other.authority_code
            and self._names == other._names
            and self._measures == other._measures
        )

    def __repr__(self) -> str:
        return f"Area(authority_code={self.authority_code!r}, measures={len(self)})"

    def __str__(self) -> str:
        parts = [f"{self.display_name()} ({self.authority_code})\n"]
        for _, measure in self.measures():
            parts.append(f"{measure}\n")
        return "".join(parts)
