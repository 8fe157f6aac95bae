import io
import json

import pytest

from bethyw.area import Area
from bethyw.areas import Areas
from bethyw.datasets import AREAS, COMPLETE_POP, SourceColumn, SourceDataType
from bethyw.errors import InvalidArgument, InvalidInput, MalformedInput, NotFound
from bethyw.measure import Measure

AREAS_CSV = "Local authority code,Name (eng),Name (cym)\nW06000011,Swansea,Abertawe\nW06000015,Cardiff,Caerdydd\n"
POP_CSV = "AuthorityCode,2010,2011\nW06000011,239000,240100\nW06000015,341000,\n"


def _area_with_measure(code, measure_code, year, value):
    area = Area(code)
    measure = Measure(measure_code, measure_code.title())
    measure.set_value(year, value)
    area.set_measure(measure_code, measure)
    return area


def test_set_area_merges_measures():
    areas = Areas()
    areas.set_area("W1", _area_with_measure("W1", "pop", 2010, 1))
    areas.set_area("W1", _area_with_measure("W1", "dens", 2010, 2))
    area = areas.get_area("W1")
    assert len(areas) == 1
    assert area.has_measure("pop")
    assert area.has_measure("dens")


def test_get_area_missing():
    with pytest.raises(NotFound) as excinfo:
        Areas().get_area("W9")
    assert str(excinfo.value) == "No area found matching W9"


def test_items_are_ordered_by_code():
    areas = Areas()
    for code in ("W3", "W1", "W2"):
        areas.set_area(code, Area(code))
    assert [code for code, _ in areas.items()] == ["W1", "W2", "W3"]
    assert "W2" in areas


def test_populate_dispatches_on_type():
    areas = Areas()
    areas.populate(io.StringIO(AREAS_CSV), AREAS.type, AREAS.cols)
    areas.populate(io.StringIO(POP_CSV), COMPLETE_POP.type, COMPLETE_POP.cols)
    swansea = areas.get_area("W06000011")
    assert swansea.get_name("cym") == "Abertawe"
    assert swansea.get_measure("pop").values == {2010: 239000.0, 2011: 240100.0}
    assert areas.get_area("W06000015").get_measure("pop").values == {2010: 341000.0}


def test_populate_welsh_stats_json_accumulates_records():
    cols = {
        SourceColumn.AUTH_CODE: "code",
        SourceColumn.AUTH_NAME_ENG: "name",
        SourceColumn.MEASURE_CODE: "measure",
        SourceColumn.MEASURE_NAME: "label",
        SourceColumn.YEAR: "year",
        SourceColumn.VALUE: "val",
    }
    doc = json.dumps(
        {
            "value": [
                {"code": "W1", "name": "Foo", "measure": "pop", "label": "P", "year": str(year), "val": year - 2000}
                for year in range(2010, 2015)
            ]
        }
    )
    areas = Areas()
    areas.populate(io.StringIO(doc), SourceDataType.WELSH_STATS_JSON, cols)
    assert len(areas.get_area("W1").get_measure("pop")) == 5


def test_populate_rejects_closed_stream():
    stream = io.StringIO(AREAS_CSV)
    stream.close()
    with pytest.raises(InvalidInput):
        Areas().populate(stream, AREAS.type, AREAS.cols)


def test_populate_rejects_missing_stream():
    with pytest.raises(InvalidInput):
        Areas().populate(None, AREAS.type, AREAS.cols)


def test_populate_rejects_unknown_type():
    with pytest.raises(InvalidArgument):
        Areas().populate(io.StringIO(AREAS_CSV), "csv", AREAS.cols)


def test_populate_propagates_malformed_rows():
    with pytest.raises(MalformedInput):
        Areas().populate(io.StringIO("a,b,c\nW1,,x\n"), AREAS.type, AREAS.cols)


def test_render_orders_areas():
    areas = Areas()
    areas.populate(io.StringIO(AREAS_CSV), AREAS.type, AREAS.cols)
    assert str(areas) == "Swansea / Abertawe (W06000011)\n\nCardiff / Caerdydd (W06000015)\n\n"


def test_empty_store_json():
    assert Areas().to_json() == "{}"


def test_json_round_trip():
    areas = Areas()
    areas.populate(io.StringIO(AREAS_CSV), AREAS.type, AREAS.cols)
    areas.populate(io.StringIO(POP_CSV), COMPLETE_POP.type, COMPLETE_POP.cols)
    document = json.loads(areas.to_json())
    assert document["W06000011"] == {
        "names": {"eng": "Swansea", "cym": "Abertawe"},
        "measures": {"pop": {"2010": 239000.0, "2011": 240100.0}},
    }
    assert list(document) == ["W06000011", "W06000015"]


def test_json_keeps_welsh_characters():
    areas = Areas()
    area = Area("W06000001")
    area.set_name("cym", "Ynys Môn")
    areas.set_area("W06000001", area)
    assert "Ynys Môn" in areas.to_json()


def test_merge_stores():
    first = Areas()
    first.set_area("W1", _area_with_measure("W1", "pop", 2010, 1))
    second = Areas()
    second.set_area("W1", _area_with_measure("W1", "pop", 2011, 2))
    second.set_area("W2", Area("W2"))
    first.merge(second)
    assert len(first) == 2
    assert first.get_area("W1").get_measure("pop").values == {2010: 1.0, 2011: 2.0}


def test_json_output_is_strict_with_non_finite_cells():
    areas = Areas()
    areas.populate(
        io.StringIO("AuthorityCode,2010,2011,2012\nW1,nan,inf,3\n"),
        COMPLETE_POP.type,
        COMPLETE_POP.cols,
    )

    def reject(constant):
        raise ValueError(constant)

    document = json.loads(areas.to_json(), parse_constant=reject)
    assert document["W1"]["measures"]["pop"] == {"2012": 3.0}


def test_to_json_refuses_non_finite_values():
    areas = Areas()
    areas.set_area("W1", _area_with_measure("W1", "pop", 2010, float("nan")))
    with pytest.raises(ValueError):
        areas.to_json()


def test_malformed_row_leaves_store_unchanged():
    areas = Areas()
    areas.populate(io.StringIO(AREAS_CSV), AREAS.type, AREAS.cols)
    before = areas.to_json()
    with pytest.raises(MalformedInput):
        areas.populate(
            io.StringIO("AuthorityCode,2010\nW06000011,5\nW06000015\n"),
            COMPLETE_POP.type,
            COMPLETE_POP.cols,
        )
    assert areas.to_json() == before
    assert not areas.get_area("W06000011").has_measure("pop")
