# mocat/catalog/errors.py
from __future__ import annotations


class CatalogError(Exception):
    """Base class for everything the catalog core raises."""


class FormatError(CatalogError):
    """The catalog bytes (or its metadata) cannot be turned into a catalog."""


class BadMagicError(FormatError):
    def __init__(self, magic: int):
        super().__init__(f"Invalid magic number 0x{magic:08x}")
        self.magic = magic


class TruncatedError(FormatError):
    def __init__(self, what: str, offset: int, size: int, available: int):
        super().__init__(
            f"Truncated catalog: {what} needs {size} bytes at offset {offset}, "
            f"buffer holds {available}"
        )
        self.offset = offset
        self.size = size


class InvalidEncodingError(FormatError):
    def __init__(self, index: int, side: str, reason: str):
        super().__init__(f"Entry {index} ({side}) is not valid UTF-8: {reason}")
        self.index = index
        self.side = side


class InvalidPluralHeaderError(FormatError):
    def __init__(self, header: str, reason: str):
        super().__init__(f"Invalid Plural-Forms header {header!r}: {reason}")
        self.header = header


class EvalError(CatalogError):
    """A compiled plural expression failed for a particular n."""


class DivisionByZeroError(EvalError):
    def __init__(self, n: int):
        super().__init__(f"Division by zero while evaluating plural rule for n={n}")
        self.n = n
