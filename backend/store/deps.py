"""Store dependencies for FastAPI routes."""

from functools import lru_cache
from pathlib import Path
import os

from fastapi import HTTPException, status

from bethyw import logger
from bethyw.errors import BethYwError
from bethyw.areas import Areas
from bethyw.cli import load_areas, load_datasets
from bethyw.datasets import DATASETS
from bethyw.parsers import ALL_YEARS

DATA_DIR_ENV_VAR = "BETHYW_DATA_DIR"
DEFAULT_DATA_DIR = Path("datasets")


def get_data_dir() -> Path:
    """Resolve the datasets directory using the env override."""
    env_override = os.environ.get(DATA_DIR_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser()
    return DEFAULT_DATA_DIR


@lru_cache(maxsize=1)
def _load_store(data_dir: Path) -> Areas:
    logger.info("Loading datasets for the API from %s", data_dir)
    areas = Areas()
    load_areas(areas, data_dir, set())
    load_datasets(areas, data_dir, DATASETS, set(), set(), ALL_YEARS)
    return areas


def get_areas() -> Areas:
    """Return the store loaded from the datasets directory."""
    data_dir = get_data_dir()
    if not data_dir.is_dir():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=(
                f"Datasets directory not found at {data_dir}. "
                f"Set {DATA_DIR_ENV_VAR} to override the location."
            ),
        )
    try:
        return _load_store(data_dir)
    except BethYwError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Could not load datasets from {data_dir}: {exc}",
        ) from exc
