"""Beth Yw? importer for Welsh government statistics."""

import logging
from dataclasses import dataclass

logger = logging.getLogger("bethyw")
if not logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@dataclass
class ImportMetrics:
    """Track import statistics across parser runs."""

    rows_processed: int = 0
    records_merged: int = 0
    cells_skipped: int = 0
    datasets_loaded: int = 0
    datasets_failed: int = 0

    def add_rows(self, count: int) -> None:
        self.rows_processed += count
        logger.debug("Added %s rows; total=%s", count, self.rows_processed)

    def add_merged(self, count: int = 1) -> None:
        self.records_merged += count
        logger.debug("Merged %s records; total=%s", count, self.records_merged)

    def mark_cell_skipped(self) -> None:
        self.cells_skipped += 1
        logger.debug("Marked skipped cell; total=%s", self.cells_skipped)

    def mark_dataset_loaded(self) -> None:
        self.datasets_loaded += 1
        logger.debug("Marked dataset loaded; total=%s", self.datasets_loaded)

    def mark_dataset_failed(self) -> None:
        self.datasets_failed += 1
        logger.debug("Marked dataset failure; total=%s", self.datasets_failed)


__all__ = ["ImportMetrics", "logger"]
