from __future__ import annotations


class DxfError(Exception):
    """Base class for unrecoverable DXF read errors."""


class EmptyFileError(DxfError, ValueError):
    pass


class EndOfInputError(DxfError, EOFError):
    """Raised when the scanner is asked for a group after the EOF group."""


class UnexpectedEofError(DxfError, EOFError):
    """Raised when the input runs out before an EOF group was read."""


class TypeMismatchError(DxfError, TypeError):
    def __init__(self, code: int, value: str, expected: str) -> None:
        super().__init__(f"group {code}: cannot cast {value!r} to {expected}")
        self.code = code
        self.value = value
        self.expected = expected


class GroupCodeError(DxfError, ValueError):
    def __init__(self, line_number: int, text: str) -> None:
        super().__init__(f"line {line_number}: group code {text!r} is not an integer")
        self.line_number = line_number
        self.text = text
