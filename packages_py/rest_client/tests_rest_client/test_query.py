"""
Tests for query parameter flattening and serialization.
"""
from dataclasses import dataclass
from enum import Enum

import pytest
from pydantic import BaseModel

from rest_client.query import build_query_string, encode_component, flatten_value, to_js_string


@dataclass
class Page:
    offset: int
    limit: int


class Color(Enum):
    RED = "red"


def test_flatten_value():
    assert flatten_value({"x": 1, "y": 2}) == [1, 2]
    assert flatten_value([3, 4]) == [3, 4]
    assert flatten_value((5,)) == [5]
    assert flatten_value(Page(offset=10, limit=25)) == [10, 25]
    assert flatten_value("abc") == ["abc"]
    assert flatten_value(7) == [7]


def test_to_js_string():
    assert to_js_string(True) == "true"
    assert to_js_string(False) == "false"
    assert to_js_string(None) == ""
    assert to_js_string(1.0) == "1"
    assert to_js_string(1.5) == "1.5"
    assert to_js_string([1, None, "b"]) == "1,,b"
    assert to_js_string({"a": 1}) == "[object Object]"
    assert to_js_string(Color.RED) == "red"


def test_encode_component():
    assert encode_component("a b&c=d/e") == "a%20b%26c%3Dd%2Fe"
    assert encode_component("-_.!~*'()") == "-_.!~*'()"
    assert encode_component("1,2") == "1%2C2"
    assert encode_component("é") == "%C3%A9"


def test_empty_parameters():
    assert build_query_string(None) == ""
    assert build_query_string({}) == ""


def test_joined_format_single_values():
    params = {"active": [True], "q": ["john doe"]}
    assert build_query_string(params) == "?active=true&q=john%20doe"


def test_joined_format_multiple_values():
    """Several values for one name collapse into one comma-joined entry."""
    assert build_query_string({"a": [1, 2]}) == "?a=1%2C2"


def test_repeated_format_multiple_values():
    assert build_query_string({"a": [1, 2], "b": ["x"]}, "repeated") == "?a=1&a=2&b=x"


def test_repeated_format_skips_empty_value_lists():
    assert build_query_string({"a": []}, "repeated") == ""
    assert build_query_string({"a": [], "b": [1]}, "repeated") == "?b=1"


def test_names_are_not_encoded():
    assert build_query_string({"filter[name]": ["x y"]}) == "?filter[name]=x%20y"


@dataclass(slots=True)
class SlotPage:
    offset: int
    limit: int


class Filter:
    def __init__(self, status, owner):
        self.status = status
        self.owner = owner


class Window(BaseModel):
    start: int
    end: int


def test_flatten_slots_dataclass():
    assert flatten_value(SlotPage(offset=1, limit=2)) == [1, 2]


def test_flatten_plain_object():
    assert flatten_value(Filter("active", "u1")) == ["active", "u1"]


def test_flatten_pydantic_model():
    assert flatten_value(Window(start=5, end=9)) == [5, 9]


def test_flatten_keeps_scalars_whole():
    assert flatten_value(Color.RED) == [Color.RED]
    assert flatten_value(b"raw") == [b"raw"]


def test_query_string_from_objects():
    params = {"page": flatten_value(SlotPage(1, 2)), "f": flatten_value(Filter("active", None))}
    assert build_query_string(params, "repeated") == "?page=1&page=2&f=active&f="


@pytest.mark.parametrize("value,expected", [
    (1e-7, "1e-7"),
    (2.5e-8, "2.5e-8"),
    (-1e-7, "-1e-7"),
    (1e-6, "0.000001"),
    (1e-5, "0.00001"),
    (1e16, "10000000000000000"),
    (1.2345678901234568e20, "123456789012345680000"),
    (1e21, "1e+21"),
    (3.0, "3"),
    (-0.0, "0"),
    (0.1, "0.1"),
])
def test_float_rendering(value, expected):
    assert to_js_string(value) == expected
