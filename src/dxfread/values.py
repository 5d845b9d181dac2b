from __future__ import annotations

import logging

from .errors import TypeMismatchError

logger = logging.getLogger(__name__)

GroupValue = str | float | int | bool

# Group code ranges and their value types, AutoCAD 2012 DXF reference pp. 3-10.
GROUP_VALUE_TYPES: tuple[tuple[int, int, type], ...] = (
    (0, 9, str),
    (10, 59, float),
    (60, 99, int),
    (100, 109, str),
    (110, 149, float),
    (160, 179, int),
    (210, 239, float),
    (270, 289, int),
    (290, 299, bool),
    (300, 369, str),
    (370, 389, int),
    (390, 399, str),
    (400, 409, int),
    (410, 419, str),
    (420, 429, int),
    (430, 439, str),
    (440, 459, int),
    (460, 469, float),
    (470, 481, str),
    (999, 999, str),
    (1000, 1009, str),
    (1010, 1059, float),
    (1060, 1071, int),
)


def group_value_type(code: int) -> type | None:
    for low, high, value_type in GROUP_VALUE_TYPES:
        if low <= code <= high:
            return value_type
    return None


def parse_group_value(code: int, value: str) -> GroupValue:
    """Cast the raw text of a group to the type its code range defines.

    Codes outside every documented range are logged and returned as text.
    """
    value_type = group_value_type(code)
    if value_type is None:
        logger.warning("group code %d does not have a defined type, keeping %r as text", code, value)
        return value
    if value_type is str:
        return value
    if value_type is bool:
        return parse_boolean(value, code)
    if value_type is float:
        return _parse_float(value, code)
    return _parse_int(value, code)


def parse_boolean(value: str, code: int = 290) -> bool:
    if value == "0":
        return False
    if value == "1":
        return True
    raise TypeMismatchError(code, value, "bool")


def _parse_float(value: str, code: int) -> float:
    try:
        return float(value)
    except ValueError:
        raise TypeMismatchError(code, value, "float") from None


def _parse_int(value: str, code: int) -> int:
    try:
        return int(value)
    except ValueError:
        pass
    # Some writers emit integer groups as "1.0".
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        raise TypeMismatchError(code, value, "int") from None
