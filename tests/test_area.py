import pytest

from bethyw.area import Area
from bethyw.errors import InvalidArgument, NotFound
from bethyw.measure import Measure


def _measure(code, values, label="Label"):
    measure = Measure(code, label)
    for year, value in values.items():
        measure.set_value(year, value)
    return measure


def test_set_name_lowercases_language():
    area = Area("W06000011")
    area.set_name("ENG", "Swansea")
    assert area.get_name("eng") == "Swansea"
    assert area.has_name("eng")
    assert area.names == {"eng": "Swansea"}


@pytest.mark.parametrize("lang", ["en", "engl", "e1g", ""])
def test_set_name_rejects_bad_language_codes(lang):
    with pytest.raises(InvalidArgument):
        Area("W1").set_name(lang, "Name")


def test_get_name_missing():
    with pytest.raises(NotFound):
        Area("W1").get_name("cym")


def test_get_measure_missing_names_code():
    with pytest.raises(NotFound) as excinfo:
        Area("W1").get_measure("pop")
    assert str(excinfo.value) == "No measure found matching pop"


def test_set_measure_lowercases_code():
    area = Area("W1")
    area.set_measure("POP", _measure("POP", {2010: 1}))
    assert area.has_measure("pop")
    assert not area.has_measure("POP")
    assert area.get_measure("pop").get_value(2010) == 1


def test_set_measure_merges_existing():
    area = Area("W1")
    area.set_measure("pop", _measure("pop", {2010: 1, 2011: 2}))
    area.set_measure("pop", _measure("pop", {2011: 5, 2012: 3}))
    assert area.get_measure("pop").values == {2010: 1, 2011: 5, 2012: 3}
    assert len(area) == 1


def test_set_measure_stores_its_own_copy():
    area = Area("W1")
    measure = _measure("pop", {2010: 1})
    area.set_measure("pop", measure)
    measure.set_value(2011, 2)
    assert len(area.get_measure("pop")) == 1


def test_merge_combines_names_and_measures():
    a = Area("W1")
    a.set_name("eng", "Old")
    a.set_measure("pop", _measure("pop", {2010: 1}))

    b = Area("W1")
    b.set_name("eng", "New")
    b.set_name("cym", "Newydd")
    b.set_measure("pop", _measure("pop", {2011: 2}))
    b.set_measure("dens", _measure("dens", {2010: 3}))

    a.merge(b)
    assert a.names == {"eng": "New", "cym": "Newydd"}
    assert a.get_measure("pop").values == {2010: 1, 2011: 2}
    assert a.get_measure("dens").values == {2010: 3}


@pytest.mark.parametrize(
    "names,expected",
    [
        ({"eng": "Swansea", "cym": "Abertawe"}, "Swansea / Abertawe (W06000011)\n"),
        ({"eng": "Swansea"}, "Swansea (W06000011)\n"),
        ({"cym": "Abertawe"}, "Abertawe (W06000011)\n"),
        ({}, "Unnamed (W06000011)\n"),
    ],
)
def test_render_names(names, expected):
    area = Area("W06000011")
    for lang, name in names.items():
        area.set_name(lang, name)
    assert str(area) == expected


def test_render_measures_in_code_order():
    area = Area("W1")
    area.set_measure("pop", _measure("pop", {2010: 1}, "Population"))
    area.set_measure("area", _measure("area", {2010: 2}, "Land area"))
    rendered = str(area)
    assert rendered.startswith("Unnamed (W1)\nLand area (area) \n")
    assert rendered.index("Land area") < rendered.index("Population")
    assert rendered.endswith("\n\n")


def test_equality():
    a = Area("W1")
    b = Area("W1")
    a.set_name("eng", "Foo")
    assert a != b
    b.set_name("eng", "Foo")
    assert a == b
    assert a != Area("W2")


def test_to_dict():
    area = Area("W1")
    area.set_name("eng", "Foo")
    area.set_measure("pop", _measure("pop", {2020: 5}))
    assert area.to_dict() == {"names": {"eng": "Foo"}, "measures": {"pop": {"2020": 5.0}}}


def test_render_keeps_empty_name():
    area = Area("W1")
    area.set_name("eng", "")
    area.set_name("cym", "Bar")
    assert str(area) == " / Bar (W1)\n"
