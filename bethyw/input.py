"""Input sources that open readable text streams for the parsers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TextIO

from . import logger
from .errors import InvalidInput


class InputSource(ABC):
    """A named location that data can be read from."""

    def __init__(self, source: str) -> None:
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    @abstractmethod
    def open(self) -> TextIO:
        """Open and return a readable text stream; the caller closes it."""


class InputFile(InputSource):
    """Source data held in a file on disk."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(str(path))
        self.path = Path(path)

    def open(self) -> TextIO:
        logger.info("Opening input file: %s", self.path)
        try:
            return self.path.open(newline="", encoding="utf-8")
        except OSError as exc:
            raise InvalidInput(f"InputFile.open: Failed to open file {self.source}") from exc
