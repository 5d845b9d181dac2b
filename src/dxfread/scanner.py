from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from .errors import EndOfInputError, GroupCodeError, UnexpectedEofError
from .values import GroupValue, parse_group_value


@dataclass(frozen=True)
class Group:
    code: int
    value: GroupValue

    def is_(self, code: int, value: GroupValue | None = None) -> bool:
        if self.code != code:
            return False
        return value is None or self.value == value

    def __str__(self) -> str:
        return f"{self.code}:{self.value}"


class DxfArrayScanner:
    """Reads (code, value) groups from the lines of an ASCII DXF file.

    A group is two consecutive lines: the group code, then its value. The
    value is cast according to the code (see ``values.parse_group_value``).
    """

    def __init__(self, lines: Sequence[str]) -> None:
        self._lines = lines
        self._pointer = 0
        self._eof = False

    def next(self) -> Group:
        if not self.has_next():
            if self._eof:
                raise EndOfInputError("cannot read a group after the EOF group has been read")
            raise UnexpectedEofError("unexpected end of input: EOF group not read before end of file")

        line_number = self._pointer + 1
        code_text = self._lines[self._pointer].strip()
        try:
            code = int(code_text)
        except ValueError:
            raise GroupCodeError(line_number, code_text) from None
        value = parse_group_value(code, self._lines[self._pointer + 1].strip())
        self._pointer += 2

        if code == 0 and value == "EOF":
            self._eof = True
        return Group(code, value)

    def has_next(self) -> bool:
        if self._eof:
            return False
        return self._pointer <= len(self._lines) - 2

    def is_eof(self) -> bool:
        return self._eof

    @property
    def line_number(self) -> int:
        return self._pointer


class GroupCursor:
    """The group the parser is positioned on, shared by every sub-parser.

    Sub-parsers receive the cursor on the first group of their record and
    return with it on the first group they did not consume.
    """

    def __init__(self, scanner: DxfArrayScanner) -> None:
        self._scanner = scanner
        self._current: Group | None = None

    @property
    def current(self) -> Group:
        if self._current is None:
            raise RuntimeError("cursor has not read a group yet")
        return self._current

    @property
    def code(self) -> int:
        return self.current.code

    @property
    def value(self) -> GroupValue:
        return self.current.value

    def advance(self) -> Group:
        self._current = self._scanner.next()
        return self._current

    def is_(self, code: int, value: GroupValue | None = None) -> bool:
        return self.current.is_(code, value)

    def at_eof(self) -> bool:
        return self._scanner.is_eof()

    def skip_until(self, predicate: Callable[[Group], bool]) -> Group:
        """Advance at least once, stopping on the first group matching ``predicate``.

        The EOF group always stops the skip.
        """
        group = self.advance()
        while not predicate(group) and not self._scanner.is_eof():
            group = self.advance()
        return group

    def skip_record(self) -> Group:
        return self.skip_until(lambda group: group.code == 0)
