# mocat/catalog/decoder.py
"""
Decoder for compiled gettext catalogs (.mo).

Layout (little-endian, offsets absolute from the start of the file):

    0   u32  magic 0x950412de
    4   u16  major version
    6   u16  minor version
    8   u32  number of strings N
    12  u32  offset of the original-string index table
    16  u32  offset of the translated-string index table
    20  u32  hash table size
    24  u32  hash table offset

Each index table holds N (length, offset) u32 pairs. Every blob is followed by
a NUL that is not counted in its length; interior NULs separate plural forms.
"""
from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from .errors import BadMagicError, InvalidEncodingError, TruncatedError

log = logging.getLogger(__name__)

MAGIC = 0x950412DE

_HEADER = struct.Struct("<IHHIIIII")
_INDEX = struct.Struct("<II")

HEADER_SIZE = _HEADER.size  # 28

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class ContainerHeader:
    magic: int
    major_version: int
    minor_version: int
    count: int
    originals_offset: int
    translations_offset: int
    hash_size: int
    hash_offset: int

    @property
    def version(self) -> str:
        return f"{self.major_version}.{self.minor_version}"


@dataclass(frozen=True)
class IndexEntry:
    length: int
    offset: int


@dataclass(frozen=True)
class DecodedCatalog:
    header: ContainerHeader
    originals: List[Tuple[str, ...]]
    translations: List[Tuple[str, ...]]

    def __len__(self) -> int:
        return len(self.originals)

    def pairs(self):
        return zip(self.originals, self.translations)


def _as_bytes(source: Any) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)
    read = getattr(source, "read", None)
    if read is None:
        raise TypeError(f"Expected bytes or a readable stream, got {type(source).__name__}")
    data = read()
    if isinstance(data, str):
        raise TypeError("Catalog stream must be opened in binary mode")
    return bytes(data)


def _require(data: bytes, what: str, offset: int, size: int) -> None:
    if offset < 0 or offset + size > len(data):
        raise TruncatedError(what, offset, size, len(data))


def read_header(data: BytesLike) -> ContainerHeader:
    """Parse the fixed 28-byte header; the magic check also rejects big-endian files."""
    _require(data, "header", 0, HEADER_SIZE)
    header = ContainerHeader(*_HEADER.unpack_from(data, 0))
    if header.magic != MAGIC:
        raise BadMagicError(header.magic)
    return header


def read_index_table(data: BytesLike, offset: int, count: int, what: str) -> List[IndexEntry]:
    _require(data, what, offset, count * _INDEX.size)
    return [
        IndexEntry(*_INDEX.unpack_from(data, offset + i * _INDEX.size))
        for i in range(count)
    ]


def read_blob(data: BytesLike, entry: IndexEntry, index: int, side: str) -> Tuple[str, ...]:
    # length + 1: the trailing NUL is guaranteed by the format
    _require(data, f"{side} string #{index}", entry.offset, entry.length + 1)
    raw = bytes(data[entry.offset : entry.offset + entry.length])
    parts = []
    for chunk in raw.split(b"\0"):
        try:
            parts.append(chunk.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidEncodingError(index, side, str(e)) from e
    return tuple(parts)


def decode(source: Any) -> DecodedCatalog:
    """
    Decode a .mo buffer into N original/translated sub-string tuples.

    ``source`` may be bytes-like or any object with ``read()``.
    Raises BadMagicError, TruncatedError or InvalidEncodingError; never returns
    a partial result.
    """
    data = _as_bytes(source)
    header = read_header(data)

    originals_index = read_index_table(data, header.originals_offset, header.count, "original index table")
    translations_index = read_index_table(data, header.translations_offset, header.count, "translation index table")

    originals = [read_blob(data, e, i, "original") for i, e in enumerate(originals_index)]
    translations = [read_blob(data, e, i, "translation") for i, e in enumerate(translations_index)]

    log.debug(
        "Decoded catalog v%s with %d strings (hash table: %d slots at %d)",
        header.version,
        header.count,
        header.hash_size,
        header.hash_offset,
    )
    return DecodedCatalog(header=header, originals=originals, translations=translations)
