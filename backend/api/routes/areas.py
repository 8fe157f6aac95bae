"""API routes for browsing imported areas and their measures."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bethyw.area import Area
from bethyw.areas import Areas
from bethyw.errors import NotFound
from backend.models.area import AreaDetail, AreaSummary, MeasureDetail
from backend.models.pagination import Page, PaginationMeta
from backend.store.deps import get_areas

router = APIRouter()


@router.get("/", response_model=Page[AreaSummary])
def list_areas(
    search: str | None = Query(None, description="Match authority code or any name, case-insensitive"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum areas to return"),
    offset: int = Query(0, ge=0, description="Number of areas to skip"),
    areas: Areas = Depends(get_areas),
) -> Page[AreaSummary]:
    """Return paginated area summaries ordered by authority code."""

    matches = [area for _, area in areas.items() if _matches(area, search)]
    data = [AreaSummary.from_area(area) for area in matches[offset:offset + limit]]

    meta = PaginationMeta(
        total=len(matches),
        limit=limit,
        offset=offset,
        has_more=(offset + len(data)) < len(matches),
    )

    return Page[AreaSummary](data=data, meta=meta)


@router.get("/{code}", response_model=AreaDetail)
def get_area(code: str, areas: Areas = Depends(get_areas)) -> AreaDetail:
    """Return one area with every measure it holds."""
    return AreaDetail.from_area(_lookup_area(areas, code))


@router.get("/{code}/measures/{measure}", response_model=MeasureDetail)
def get_area_measure(code: str, measure: str, areas: Areas = Depends(get_areas)) -> MeasureDetail:
    area = _lookup_area(areas, code)
    try:
        found = area.get_measure(measure.lower())
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MeasureDetail.from_measure(found)


def _lookup_area(areas: Areas, code: str) -> Area:
    try:
        return areas.get_area(code.upper())
    except NotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def _matches(area: Area, search: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    candidates = [area.authority_code, *area.names.values()]
    return any(needle in candidate.lower() for candidate in candidates)
