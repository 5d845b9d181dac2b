from typing import Sequence

from .document import Block, Document, Tables
from .entity import Entity, Point, Vertex
from .errors import (
    DxfError,
    EmptyFileError,
    EndOfInputError,
    GroupCodeError,
    TypeMismatchError,
    UnexpectedEofError,
)
from .parser import DxfParser, parse, read
from .tables import Layer, LineType

__all__ = [
    "read",
    "parse",
    "DxfParser",
    "Document",
    "Tables",
    "Block",
    "Layer",
    "LineType",
    "Entity",
    "Point",
    "Vertex",
    "DxfError",
    "EmptyFileError",
    "EndOfInputError",
    "GroupCodeError",
    "TypeMismatchError",
    "UnexpectedEofError",
]


def main(argv: Sequence[str] | None = None) -> int:
    from dxfread.cli import main as cli_main

    return cli_main(argv)
