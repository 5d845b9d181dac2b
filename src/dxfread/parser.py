from __future__ import annotations

import logging
import re
from os import PathLike
from pathlib import Path
from typing import Any

from .document import Block, Document, Tables
from .entities import parse_entity, parse_point
from .entity import Entity
from .errors import EmptyFileError
from .scanner import DxfArrayScanner, GroupCursor
from .tables import Layer, LineType, parse_layer_table, parse_line_type_table, skip_table

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

# Only CR, LF and CRLF end a line; U+2028, \x85 and the like may occur in values.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def read(path: str | PathLike[str], *, encoding: str = DEFAULT_ENCODING) -> Document:
    return parse(Path(path).read_bytes(), encoding=encoding)


def parse(source: str | bytes, *, encoding: str = DEFAULT_ENCODING) -> Document:
    if isinstance(source, (bytes, bytearray)):
        source = bytes(source).decode(encoding, errors="replace")
    return DxfParser().parse(source)


class DxfParser:
    """Builds a ``Document`` from the text of an ASCII DXF file in one pass.

    Each call to ``parse`` uses its own scanner and cursor, so one parser may
    be reused.
    """

    def parse(self, text: str) -> Document:
        lines = _LINE_BREAK.split(text)
        if lines and not lines[-1]:
            lines.pop()
        scanner = DxfArrayScanner(lines)
        if not scanner.has_next():
            raise EmptyFileError("empty file: a DXF file needs at least one group")
        return _DocumentBuilder(GroupCursor(scanner)).build()


class _DocumentBuilder:
    def __init__(self, cursor: GroupCursor) -> None:
        self.cursor = cursor
        self.header: dict[str, Any] = {}
        self.tables: Tables | None = None
        self.blocks: dict[str, Block] = {}
        self.entities: list[Entity] = []

    def build(self) -> Document:
        cursor = self.cursor
        cursor.advance()
        while not cursor.at_eof():
            if not cursor.is_(0, "SECTION"):
                cursor.advance()
                continue

            group = cursor.advance()
            if group.code != 2:
                logger.error("unexpected group %s after 0/SECTION", group)
                continue

            name = group.value
            if name == "HEADER":
                self._parse_header()
            elif name == "TABLES":
                self._parse_tables()
            elif name == "BLOCKS":
                self._parse_blocks()
            elif name == "ENTITIES":
                cursor.advance()
                self.entities.extend(self._parse_entities("ENDSEC"))
            else:
                logger.info("skipping section %r", name)
                self._skip_section()

        return Document(
            header=self.header,
            tables=self.tables,
            blocks=self.blocks,
            entities=tuple(self.entities),
        )

    def _skip_section(self) -> None:
        group = self.cursor.skip_until(lambda group: group.is_(0, "ENDSEC"))
        if group.is_(0, "ENDSEC"):
            self.cursor.advance()

    def _section_ended(self) -> bool:
        return self.cursor.is_(0, "ENDSEC") or self.cursor.at_eof()

    def _parse_header(self) -> None:
        """Variables are committed when the next ``9`` group or ENDSEC is read."""
        cursor = self.cursor
        name: str | None = None
        value: Any = None
        cursor.advance()
        while not self._section_ended():
            group = cursor.current
            if group.code == 9:
                if name is not None:
                    self.header[name] = value
                name = str(group.value)
                value = None
                cursor.advance()
            elif group.code == 10:
                value = parse_point(cursor)
            elif group.code == 0:
                logger.warning("unexpected group %s in HEADER section", group)
                cursor.advance()
            else:
                value = group.value
                cursor.advance()
        if name is not None:
            self.header[name] = value
        if cursor.is_(0, "ENDSEC"):
            cursor.advance()

    def _parse_tables(self) -> None:
        cursor = self.cursor
        layers: dict[str, Layer] = {}
        line_types: dict[str, LineType] = {}
        cursor.advance()
        while not self._section_ended():
            if not cursor.is_(0, "TABLE"):
                cursor.advance()
                continue
            group = cursor.advance()
            if group.is_(2, "LAYER"):
                layers.update(parse_layer_table(cursor))
            elif group.is_(2, "LTYPE"):
                line_types.update(parse_line_type_table(cursor))
            else:
                logger.info("skipping table %s", group.value if group.code == 2 else group)
                skip_table(cursor)
        self.tables = Tables(layers=layers, line_types=line_types)
        if cursor.is_(0, "ENDSEC"):
            cursor.advance()

    def _parse_blocks(self) -> None:
        cursor = self.cursor
        cursor.advance()
        while not self._section_ended():
            if cursor.is_(0, "BLOCK"):
                block = self._parse_block()
                if block is not None:
                    self.blocks[block.name] = block
            else:
                cursor.advance()
        if cursor.is_(0, "ENDSEC"):
            cursor.advance()

    def _parse_block(self) -> Block | None:
        """Read a BLOCK record and its entities; stops on the ENDBLK group."""
        cursor = self.cursor
        attrs: dict[str, Any] = {}
        entities: list[Entity] = []
        cursor.advance()
        while not cursor.at_eof():
            group = cursor.current
            if group.code == 0:
                entities = self._parse_entities("ENDBLK")
                break
            if group.code == 10:
                point = parse_point(cursor)
                if point is not None:
                    attrs["position"] = point
                continue
            if group.code == 2:
                attrs["name"] = group.value
            elif group.code == 8:
                attrs["layer"] = group.value
            elif group.code == 70:
                attrs["flags"] = group.value
            elif group.code == 1 and group.value:
                attrs["xref_path"] = group.value
            cursor.advance()

        name = attrs.pop("name", None)
        if name is None:
            logger.warning("dropping BLOCK without a name (%d entities)", len(entities))
            return None
        return Block(name=name, entities=tuple(entities), **attrs)

    def _parse_entities(self, end_marker: str) -> list[Entity]:
        """Parse entity records until ``0/<end_marker>``, which is consumed.

        Called with the cursor on the first record of the list.
        """
        cursor = self.cursor
        entities: list[Entity] = []
        while not cursor.at_eof():
            group = cursor.current
            if group.code != 0:
                cursor.advance()
                continue
            if group.value == end_marker:
                cursor.advance()
                break
            if group.value == "ENDSEC" or (end_marker == "ENDBLK" and group.value == "BLOCK"):
                logger.warning("0/%s read before 0/%s", group.value, end_marker)
                break

            entity = parse_entity(cursor)
            if entity is None:
                continue
            if entity.dxftype == "DIMENSION" and "block" not in entity.dxf:
                logger.warning("DIMENSION %s has no block reference", entity.handle or "?")
            entities.append(entity)
        return entities
