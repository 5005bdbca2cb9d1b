"""
Typed attribute accessors for map XML elements.

Every accessor returns its default when the attribute is missing. Values that
cannot be decoded also fall back to the default, with a warning.
"""

import math
from enum import IntEnum
from typing import Optional, Type, TypeVar
from loguru import logger
from lxml import etree

E = TypeVar("E", bound=IntEnum)

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def _raw(element: etree._Element, name: str) -> Optional[str]:
    value = element.get(name)
    if value is None:
        return None
    return value.strip()


def _warn(element: etree._Element, name: str, value: str, default: object) -> None:
    logger.warning(
        f"Cannot decode attribute {name}={value!r} on <{element.tag}> "
        f"(line {element.sourceline}), using {default!r}"
    )


def float_attribute(element: etree._Element, name: str, default: float = 0.0) -> float:
    """Float attribute value. Accepts 'nan' and 'inf'."""
    value = _raw(element, name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        _warn(element, name, value, default)
        return default


def int_attribute(element: etree._Element, name: str, default: int = 0) -> int:
    """Integer attribute value. Integral float text like '2.0' is accepted."""
    value = _raw(element, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        pass

    try:
        number = float(value)
    except ValueError:
        number = math.nan

    if math.isfinite(number) and number.is_integer():
        return int(number)

    _warn(element, name, value, default)
    return default


def bool_attribute(element: etree._Element, name: str, default: bool = False) -> bool:
    """Boolean attribute value: true/false or 1/0, case-insensitive."""
    value = _raw(element, name)
    if value is None:
        return default

    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False

    _warn(element, name, value, default)
    return default


def str_attribute(element: etree._Element, name: str, default: str = "") -> str:
    """String attribute value, unmodified."""
    value = element.get(name)
    if value is None:
        return default
    return value


def enum_attribute(element: etree._Element, name: str, enum_cls: Type[E], default: E) -> E:
    """Integer-coded enum attribute. Unknown codes fall back to `default`."""
    code = int_attribute(element, name, int(default))
    try:
        return enum_cls(code)
    except ValueError:
        _warn(element, name, str(code), default)
        return default
