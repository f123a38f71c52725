"""
Fixed-column field access and a seekable line stream for SP3 files.

Columns are 0-based, half-open [start, stop) ranges into a line with its line
terminator removed. Trailing blanks are often stripped from SP3 lines, so a
column that lies (partly) beyond the end of a line reads as blank.
"""
import gzip
import math
from typing import NamedTuple, Optional

from sp3kit.errors import Sp3FieldError


class Column(NamedTuple):
    start: int
    stop: int
    name: str


def column_text(line: str, col: Column) -> str:
    return line[col.start:col.stop]


def is_blank(line: str, col: Column) -> bool:
    return column_text(line, col).strip() == ""


def read_text(line: str, col: Column) -> str:
    """Return the stripped text of a column ('' if beyond the line)."""
    return column_text(line, col).strip()


def read_char(line: str, index: int) -> str:
    """Return the character at index, or a blank if the line is shorter."""
    return line[index] if index < len(line) else " "


def read_int(line: str, col: Column) -> int:
    """
    Resolve an integer field.

    Raises:
        Sp3FieldError: if the column is blank or not an integer
    """
    text = read_text(line, col)
    if not text:
        raise Sp3FieldError(col.name, col.start, col.stop, line, "missing value")
    try:
        return int(text)
    except ValueError:
        raise Sp3FieldError(col.name, col.start, col.stop, line) from None


def read_float(line: str, col: Column) -> float:
    """
    Resolve a floating point field.

    Raises:
        Sp3FieldError: if the column is blank, not a number, or not finite
    """
    text = read_text(line, col)
    if not text:
        raise Sp3FieldError(col.name, col.start, col.stop, line, "missing value")
    try:
        value = float(text)
    except ValueError:
        raise Sp3FieldError(col.name, col.start, col.stop, line) from None
    if not math.isfinite(value):
        raise Sp3FieldError(col.name, col.start, col.stop, line, "value out of range")
    return value


def open_sp3(filename: str):
    """Open an SP3 file for reading; '.gz' files are decompressed on the fly."""
    if str(filename).endswith(".gz"):
        return gzip.open(filename, "rt", encoding="utf-8", errors="replace")
    return open(filename, "r", encoding="utf-8", errors="replace")


class LineStream:
    """
    Line reader over an open text stream that can remember and restore its
    position. Lines are returned without their terminator; None marks the
    physical end of the file.
    """

    def __init__(self, stream):
        self._stream = stream

    def tell(self):
        return self._stream.tell()

    def seek(self, pos) -> None:
        self._stream.seek(pos)

    def readline(self) -> Optional[str]:
        line = self._stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    def peek(self) -> Optional[str]:
        """Return the next line without consuming it."""
        pos = self._stream.tell()
        try:
            return self.readline()
        finally:
            self._stream.seek(pos)

    def close(self) -> None:
        self._stream.close()

    @property
    def closed(self) -> bool:
        return self._stream.closed
