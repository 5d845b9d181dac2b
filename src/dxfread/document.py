from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from .entity import SUPPORTED_ENTITY_TYPES, Entity, Point
from .tables import Layer, LineType

TYPE_ALIASES = {
    "POLYLINE_2D": "POLYLINE",
    "POLYLINE_3D": "POLYLINE",
    "DIM_LINEAR": "DIMENSION",
    "DIM_RADIUS": "DIMENSION",
    "DIM_DIAMETER": "DIMENSION",
    "DIM_ALIGNED": "DIMENSION",
}


@dataclass(frozen=True)
class Tables:
    layers: dict[str, Layer] = field(default_factory=dict)
    line_types: dict[str, LineType] = field(default_factory=dict)


@dataclass(frozen=True)
class Block:
    name: str
    layer: str | None = None
    position: Point | None = None
    entities: tuple[Entity, ...] = ()
    flags: int = 0
    xref_path: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return bool(self.flags & 1) or self.name.startswith("*")

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)


@dataclass(frozen=True)
class Document:
    header: dict[str, Any] = field(default_factory=dict)
    tables: Tables | None = None
    blocks: dict[str, Block] = field(default_factory=dict)
    entities: tuple[Entity, ...] = ()

    @property
    def version(self) -> str | None:
        return self.header.get("$ACADVER")

    @property
    def layers(self) -> dict[str, Layer]:
        return self.tables.layers if self.tables is not None else {}

    @property
    def line_types(self) -> dict[str, LineType]:
        return self.tables.line_types if self.tables is not None else {}

    def extents(self) -> tuple[Point, Point] | None:
        """Drawing bounds recorded in the header ($EXTMIN/$EXTMAX), if any."""
        low = self.header.get("$EXTMIN")
        high = self.header.get("$EXTMAX")
        if isinstance(low, Point) and isinstance(high, Point):
            return low, high
        return None

    def query(self, types: str | Iterable[str] | None = None) -> Iterator[Entity]:
        type_set = set(_normalize_types(types))
        for entity in self.entities:
            if entity.dxftype in type_set:
                yield entity

    def get_block(self, name: str) -> Block | None:
        return self.blocks.get(name)


def _normalize_types(types: str | Iterable[str] | None) -> list[str]:
    """Resolve type names, aliases and glob patterns to supported entity types.

    Names that match nothing are ignored; no names, ``*`` or ``ALL`` select
    every supported type.
    """
    tokens = re.split(r"[,\s]+", types) if isinstance(types, str) else list(types or ())
    patterns = [token.strip().upper() for token in tokens if token and token.strip()]
    patterns = [TYPE_ALIASES.get(pattern, pattern) for pattern in patterns]
    if not patterns or "*" in patterns or "ALL" in patterns:
        return list(SUPPORTED_ENTITY_TYPES)

    selected: list[str] = []
    for pattern in patterns:
        for dxftype in SUPPORTED_ENTITY_TYPES:
            if dxftype not in selected and fnmatch.fnmatchcase(dxftype, pattern):
                selected.append(dxftype)
    return selected
