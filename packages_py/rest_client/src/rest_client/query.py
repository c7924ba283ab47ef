"""
Query parameter flattening and query string serialization.

Two formats are supported for parameters holding several values:

- ``joined``: the legacy wire format. All values of a name are joined with
  commas and percent-encoded as one value, so ``a=[1, 2]`` becomes ``a=1%2C2``.
- ``repeated``: one ``name=value`` pair per value, so ``a=[1, 2]`` becomes
  ``a=1&a=2``.
"""
import dataclasses
import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from pydantic import BaseModel

from .types import QueryFormat

# Characters left untouched when encoding a single query component
COMPONENT_SAFE_CHARS = "-_.!~*'()"

def flatten_value(value: Any) -> List[Any]:
    """
    Split a parameter value into the individual values it contributes.

    Mappings contribute their values, lists and tuples their items,
    dataclass and pydantic instances their field values and other objects
    exposing ``__dict__`` their attribute values, all in declaration order.
    Strings, bytes, enum members and other scalars are a single value.
    """
    if isinstance(value, (str, bytes, bytearray, Enum, type)):
        return [value]
    if isinstance(value, Mapping):
        return list(value.values())
    if isinstance(value, (list, tuple)):
        return list(value)
    if dataclasses.is_dataclass(value):
        return [getattr(value, f.name) for f in dataclasses.fields(value)]
    if isinstance(value, BaseModel):
        return [getattr(value, name) for name in type(value).model_fields]
    if hasattr(value, "__dict__"):
        return list(vars(value).values())
    return [value]

def _js_number(value: float) -> str:
    """Shortest round-trip digits, in fixed form for 1e-6 <= |x| < 1e21."""
    if value == 0:
        return "0"
    text = repr(value)
    if 1e-6 <= abs(value) < 1e21:
        fixed = format(Decimal(text), "f")
        if "." in fixed:
            fixed = fixed.rstrip("0").rstrip(".")
        return fixed
    mantissa, _, exponent = text.partition("e")
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"

def to_js_string(value: Any) -> str:
    """Render a value the way it appears on the wire in the legacy format."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return to_js_string(value.value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _js_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(to_js_string(item) for item in value)
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)

def encode_component(text: str) -> str:
    """Percent-encode a single query component."""
    return quote(text, safe=COMPONENT_SAFE_CHARS)

def build_query_string(
    parameters: Optional[Dict[str, List[Any]]],
    query_format: QueryFormat = "joined",
) -> str:
    """
    Serialize accumulated parameters into a query string starting with '?'.

    Names are written verbatim in insertion order. Returns an empty string
    when there is nothing to serialize.
    """
    if not parameters:
        return ""

    pairs: List[str] = []
    for name, values in parameters.items():
        if query_format == "repeated":
            for value in values:
                pairs.append(f"{name}={encode_component(to_js_string(value))}")
        else:
            pairs.append(f"{name}={encode_component(to_js_string(values))}")

    if not pairs:
        return ""
    return "?" + "&".join(pairs)
