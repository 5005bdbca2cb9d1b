"""Tests for typed XML attribute decoding."""

import math

import pytest
from lxml import etree

from indoormap.core.models import PolygonMethod, WallMaterial
from indoormap.parsers.xml_attributes import (
    bool_attribute,
    enum_attribute,
    float_attribute,
    int_attribute,
    str_attribute,
)


def _element(xml: str) -> etree._Element:
    return etree.fromstring(xml)


def test_missing_attributes_use_defaults():
    el = _element("<wall/>")

    assert float_attribute(el, "x1") == 0.0
    assert float_attribute(el, "height", 2.5) == 2.5
    assert math.isnan(float_attribute(el, "thickness", math.nan))
    assert int_attribute(el, "id") == 0
    assert int_attribute(el, "id", 7) == 7
    assert bool_attribute(el, "lr") is False
    assert bool_attribute(el, "lr", True) is True
    assert str_attribute(el, "name") == ""
    assert str_attribute(el, "name", "x") == "x"


def test_float_attribute_decoding():
    el = _element('<wall a="1.25" b=" -3 " c="nan" d="abc" e=""/>')

    assert float_attribute(el, "a") == pytest.approx(1.25)
    assert float_attribute(el, "b") == pytest.approx(-3.0)
    assert math.isnan(float_attribute(el, "c"))
    assert float_attribute(el, "d", 9.0) == 9.0
    assert float_attribute(el, "e", 4.0) == 4.0


def test_int_attribute_decoding():
    el = _element('<gtpoint a="42" b="2.0" c="2.5" d="x" e="nan"/>')

    assert int_attribute(el, "a") == 42
    assert int_attribute(el, "b") == 2
    assert int_attribute(el, "c", -1) == -1
    assert int_attribute(el, "d", -1) == -1
    assert int_attribute(el, "e", -1) == -1


@pytest.mark.parametrize("raw,expected", [
    ("true", True), ("TRUE", True), ("1", True),
    ("false", False), ("False", False), ("0", False),
])
def test_bool_attribute_decoding(raw, expected):
    el = _element(f'<door lr="{raw}"/>')

    assert bool_attribute(el, "lr", not expected) is expected


def test_bool_attribute_invalid_uses_default():
    el = _element('<door lr="maybe"/>')

    assert bool_attribute(el, "lr", True) is True


def test_str_attribute_is_not_stripped():
    el = _element('<floor name=" EG "/>')

    assert str_attribute(el, "name") == " EG "


def test_enum_attribute_decoding():
    el = _element('<wall material="4" method="1" bad="99"/>')

    assert enum_attribute(el, "material", WallMaterial, WallMaterial.UNKNOWN) is WallMaterial.GLASS
    assert enum_attribute(el, "method", PolygonMethod, PolygonMethod.ADD) is PolygonMethod.REMOVE
    assert enum_attribute(el, "bad", WallMaterial, WallMaterial.UNKNOWN) is WallMaterial.UNKNOWN
    assert enum_attribute(el, "missing", PolygonMethod, PolygonMethod.ADD) is PolygonMethod.ADD
