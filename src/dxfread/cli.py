from __future__ import annotations

import argparse
import logging
import sys
from collections import OrderedDict
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Sequence

from .colors import resolve_color, to_hex
from .entity import SUPPORTED_ENTITY_TYPES
from .errors import DxfError
from .parser import DEFAULT_ENCODING, read


def _package_version() -> str:
    try:
        return version("dxfread")
    except PackageNotFoundError:
        return "0.0.0"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dxfread", description="Inspect ASCII DXF files.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    subparsers = parser.add_subparsers(dest="command")

    inspect_parser = subparsers.add_parser("inspect", help="Show basic DXF information.")
    inspect_parser.add_argument("path", help="Path to DXF file.")
    inspect_parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help=f"Text encoding of the file (default: {DEFAULT_ENCODING}).",
    )
    inspect_parser.add_argument(
        "--verbose",
        action="store_true",
        help="List layers, line types and blocks, and log skipped records.",
    )
    return parser


def _run_inspect(path: str, *, encoding: str = DEFAULT_ENCODING, verbose: bool = False) -> int:
    file_path = Path(path)
    if not file_path.exists():
        print(f"error: file not found: {file_path}", file=sys.stderr)
        return 2

    try:
        doc = read(file_path, encoding=encoding)
    except (DxfError, OSError) as exc:
        print(f"error: failed to read DXF: {exc}", file=sys.stderr)
        return 2

    counts: OrderedDict[str, int] = OrderedDict()
    for entity in doc.entities:
        counts[entity.dxftype] = counts.get(entity.dxftype, 0) + 1

    print(f"file: {file_path}")
    print(f"version: {doc.version or 'unknown'}")
    print(f"total_entities: {len(doc.entities)}")
    for dxftype in SUPPORTED_ENTITY_TYPES:
        count = counts.get(dxftype, 0)
        if count > 0:
            print(f"{dxftype}: {count}")

    extents = doc.extents()
    if extents is not None:
        low, high = extents
        print(f"extents: ({low.x:g}, {low.y:g}) - ({high.x:g}, {high.y:g})")

    if doc.tables is None:
        print("tables: none")
    else:
        print(f"layers: {len(doc.layers)}")
        print(f"line_types: {len(doc.line_types)}")
    print(f"blocks: {len(doc.blocks)}")

    if not verbose:
        return 0

    for name, layer in doc.layers.items():
        color = to_hex(layer.color) if layer.color is not None else "none"
        state = " hidden" if layer.hidden else ""
        print(f"layer[{name}]: color={color}{state}")
    for name, line_type in doc.line_types.items():
        pattern = ", ".join(f"{element:g}" for element in line_type.pattern or ())
        print(f"line_type[{name}]: {line_type.description or ''} [{pattern}]")
    for name, block in doc.blocks.items():
        print(f"block[{name}]: entities={len(block)}")
    drawn_colors: OrderedDict[str, int] = OrderedDict()
    for entity in doc.entities:
        hex_color = to_hex(resolve_color(entity, doc))
        drawn_colors[hex_color] = drawn_colors.get(hex_color, 0) + 1
    for hex_color, count in drawn_colors.items():
        print(f"color[{hex_color}]: {count}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "inspect":
        logging.basicConfig(
            level=logging.INFO if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        return _run_inspect(args.path, encoding=args.encoding, verbose=bool(args.verbose))

    parser.print_help()
    return 0
