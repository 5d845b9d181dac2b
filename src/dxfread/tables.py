from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .colors import get_acad_color
from .scanner import GroupCursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layer:
    name: str
    color: int | None = None
    color_index: int | None = None
    hidden: bool = False
    line_type: str | None = None
    flags: int = 0

    @property
    def frozen(self) -> bool:
        return bool(self.flags & 1)

    @property
    def locked(self) -> bool:
        return bool(self.flags & 4)


@dataclass(frozen=True)
class LineType:
    name: str
    description: str | None = None
    pattern: tuple[float, ...] | None = None
    pattern_length: float | None = None

    @property
    def is_continuous(self) -> bool:
        return not self.pattern


def parse_layer_table(cursor: GroupCursor) -> dict[str, Layer]:
    """Read LAYER records up to the table's ENDTAB.

    Called with the cursor on the ``2/LAYER`` table name group; returns with
    the cursor on the group following ENDTAB.
    """
    layers: dict[str, Layer] = {}
    record: dict[str, Any] | None = None
    cursor.advance()
    while not _table_ended(cursor):
        group = cursor.current
        if group.is_(0, "LAYER"):
            _flush_layer(layers, record)
            record = {}
            cursor.advance()
        elif group.code == 0:
            _flush_layer(layers, record)
            record = None
            logger.warning("unexpected record %s in LAYER table", group)
            cursor.skip_record()
        else:
            if record is not None:
                _apply_layer_group(record, group.code, group.value)
            cursor.advance()
    _flush_layer(layers, record)
    _finish_table(cursor)
    return layers


def parse_line_type_table(cursor: GroupCursor) -> dict[str, LineType]:
    """Read LTYPE records up to the table's ENDTAB.

    Same cursor contract as ``parse_layer_table``.
    """
    line_types: dict[str, LineType] = {}
    record: dict[str, Any] | None = None
    cursor.advance()
    while not _table_ended(cursor):
        group = cursor.current
        if group.is_(0, "LTYPE"):
            _flush_line_type(line_types, record)
            record = {"elements": []}
            cursor.advance()
        elif group.code == 0:
            _flush_line_type(line_types, record)
            record = None
            logger.warning("unexpected record %s in LTYPE table", group)
            cursor.skip_record()
        else:
            if record is not None:
                _apply_line_type_group(record, group.code, group.value)
            cursor.advance()
    _flush_line_type(line_types, record)
    _finish_table(cursor)
    return line_types


def skip_table(cursor: GroupCursor) -> None:
    while not _table_ended(cursor):
        cursor.advance()
    _finish_table(cursor)


def _table_ended(cursor: GroupCursor) -> bool:
    return cursor.is_(0, "ENDTAB") or cursor.is_(0, "ENDSEC") or cursor.at_eof()


def _finish_table(cursor: GroupCursor) -> None:
    if cursor.is_(0, "ENDTAB"):
        cursor.advance()


def _apply_layer_group(record: dict[str, Any], code: int, value: Any) -> None:
    if code == 2:
        record["name"] = value
    elif code == 6:
        record["line_type"] = value
    elif code == 62:
        # Negative color index: layer is off.
        record["color_index"] = value
    elif code == 70:
        record["flags"] = value
    elif code == 420:
        record["true_color"] = value


def _flush_layer(layers: dict[str, Layer], record: dict[str, Any] | None) -> None:
    if record is None:
        return
    name = record.get("name")
    if name is None:
        logger.warning("dropping LAYER record without a name")
        return

    raw_index = record.get("color_index")
    color = record.get("true_color")
    if color is None and raw_index is not None:
        color = get_acad_color(abs(raw_index))
    layers[name] = Layer(
        name=name,
        color=color,
        color_index=abs(raw_index) if raw_index is not None else None,
        hidden=raw_index is not None and raw_index <= 0,
        line_type=record.get("line_type"),
        flags=record.get("flags", 0),
    )


def _apply_line_type_group(record: dict[str, Any], code: int, value: Any) -> None:
    if code == 2:
        record["name"] = value
    elif code == 3:
        record["description"] = value
    elif code == 73:
        record["element_count"] = value
    elif code == 40:
        record["pattern_length"] = value
    elif code == 49:
        # Positive: dash length, negative: gap length.
        record["elements"].append(value)


def _flush_line_type(line_types: dict[str, LineType], record: dict[str, Any] | None) -> None:
    if record is None:
        return
    name = record.get("name")
    if name is None:
        logger.warning("dropping LTYPE record without a name")
        return

    pattern = None
    element_count = record.get("element_count", 0)
    if element_count > 0:
        pattern = tuple(record["elements"])
        if len(pattern) != element_count:
            logger.warning(
                "LTYPE %r declares %d pattern elements but %d were read",
                name,
                element_count,
                len(pattern),
            )
    line_types[name] = LineType(
        name=name,
        description=record.get("description"),
        pattern=pattern,
        pattern_length=record.get("pattern_length"),
    )
