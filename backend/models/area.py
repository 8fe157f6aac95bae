"""Pydantic schemas representing areas and their measures."""

from pydantic import BaseModel

from bethyw.area import Area
from bethyw.measure import Measure


class AreaSummary(BaseModel):
    """An area with its names and how many measures it holds."""

    authority_code: str
    names: dict[str, str]
    measure_count: int

    @classmethod
    def from_area(cls, area: Area) -> "AreaSummary":
        return cls(
            authority_code=area.authority_code,
            names=area.names,
            measure_count=len(area),
        )


class MeasureDetail(BaseModel):
    """Every value of a measure with its summary statistics."""

    code: str
    label: str
    values: dict[int, float]
    average: float
    difference: float
    difference_percentage: float

    @classmethod
    def from_measure(cls, measure: Measure) -> "MeasureDetail":
        return cls(
            code=measure.code,
            label=measure.label,
            values=measure.values,
            average=measure.get_average(),
            difference=measure.get_difference(),
            difference_percentage=measure.get_difference_as_percentage(),
        )


class AreaDetail(BaseModel):
    authority_code: str
    names: dict[str, str]
    measures: list[MeasureDetail]

    @classmethod
    def from_area(cls, area: Area) -> "AreaDetail":
        return cls(
            authority_code=area.authority_code,
            names=area.names,
            measures=[MeasureDetail.from_measure(m) for _, m in area.measures()],
        )
