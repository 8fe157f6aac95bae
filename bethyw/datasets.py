"""Registry of the StatsWales datasets the importer understands.

Each dataset names its file, the parser that reads it and a column mapping
from logical column roles to the literal header/field names in the file.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import InvalidArgument


class SourceDataType(Enum):
    AUTHORITY_CODE_CSV = "authority_code_csv"
    WELSH_STATS_JSON = "welsh_stats_json"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"


class SourceColumn(Enum):
    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


SourceColumnMapping = Dict[SourceColumn, str]


@dataclass(frozen=True)
class InputFileSource:
    """A dataset file and how to parse it.

    ``single_measure`` marks JSON exports whose measure code and label come
    from the column mapping rather than from each record. ``string_values``
    marks JSON exports that encode the numeric value as a string.
    """

    name: str
    code: str
    file: str
    type: SourceDataType
    cols: SourceColumnMapping = field(default_factory=dict)
    single_measure: bool = False
    string_values: bool = False


AREAS = InputFileSource(
    name="Areas",
    code="areas",
    file="areas.csv",
    type=SourceDataType.AUTHORITY_CODE_CSV,
    cols={
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.AUTH_NAME_ENG: "Name (eng)",
        SourceColumn.AUTH_NAME_CYM: "Name (cym)",
    },
)

POPDEN = InputFileSource(
    name="Population density",
    code="popden",
    file="popu1009.json",
    type=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Localauthority_Code",
        SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Measure_Code",
        SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

BIZ = InputFileSource(
    name="Active Businesses",
    code="biz",
    file="econ0080.json",
    type=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Variable_Code",
        SourceColumn.MEASURE_NAME: "Variable_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
)

AQI = InputFileSource(
    name="Air Quality Indicators",
    code="aqi",
    file="envi0201.json",
    type=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "Area_Code",
        SourceColumn.AUTH_NAME_ENG: "Area_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Pollutant_ItemName_ENG",
        SourceColumn.MEASURE_NAME: "Pollutant_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    },
    string_values=True,
)

TRAINS = InputFileSource(
    name="Rail passenger journeys",
    code="trains",
    file="tran0152.json",
    type=SourceDataType.WELSH_STATS_JSON,
    cols={
        SourceColumn.AUTH_CODE: "LocalAuthority_Code",
        SourceColumn.AUTH_NAME_ENG: "LocalAuthority_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
        SourceColumn.SINGLE_MEASURE_CODE: "rail",
        SourceColumn.SINGLE_MEASURE_NAME: "Rail passenger journeys",
    },
    single_measure=True,
)


def _complete_popu1009(code: str, name: str, suffix: str, measure: str) -> InputFileSource:
    return InputFileSource(
        name=name,
        code=code,
        file=f"complete-popu1009-{suffix}.csv",
        type=SourceDataType.AUTHORITY_BY_YEAR_CSV,
        cols={
            SourceColumn.AUTH_CODE: "AuthorityCode",
            SourceColumn.SINGLE_MEASURE_CODE: measure,
            SourceColumn.SINGLE_MEASURE_NAME: name,
        },
    )


COMPLETE_POPDEN = _complete_popu1009("complete-popden", "Population density", "popden", "dens")
COMPLETE_POP = _complete_popu1009("complete-pop", "Population", "pop", "pop")
COMPLETE_AREA = _complete_popu1009("complete-area", "Land area", "area", "area")

DATASETS: Tuple[InputFileSource, ...] = (
    POPDEN,
    BIZ,
    AQI,
    TRAINS,
    COMPLETE_POPDEN,
    COMPLETE_POP,
    COMPLETE_AREA,
)


def find_dataset(code: str) -> Optional[InputFileSource]:
    for dataset in DATASETS:
        if dataset.code == code:
            return dataset
    return None


def get_dataset(code: str) -> InputFileSource:
    dataset = find_dataset(code)
    if dataset is None:
        raise InvalidArgument(f"No dataset matches key: {code}")
    return dataset
