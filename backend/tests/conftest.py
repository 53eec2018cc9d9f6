import struct
from typing import List, Tuple, Union

import pytest

from mocat.catalog import policy

MAGIC = 0x950412DE

Text = Union[str, bytes]

PL_PLURAL_FORMS = (
    "nplurals=3; plural=(n%10==1 && n%100!=11) ? 0 : "
    "((n%10>=2 && n%10<=4 && (n%100<12 || n%100>15)) ? 1 : 2);"
)


def _b(value: Text) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def build_mo(
    entries: List[Tuple[Text, Text]],
    magic: int = MAGIC,
    hash_size: int = 0,
    big_endian: bool = False,
) -> bytes:
    """
    Lay out a .mo file by hand: header, both index tables, then the blobs.
    Plural originals/translations are passed with their NUL separators.
    """
    order = ">" if big_endian else "<"
    count = len(entries)
    originals_offset = 28
    translations_offset = originals_offset + 8 * count
    data_offset = translations_offset + 8 * count

    blobs = bytearray()
    orig_index = []
    trans_index = []
    for original, _ in entries:
        raw = _b(original)
        orig_index.append((len(raw), data_offset + len(blobs)))
        blobs += raw + b"\0"
    for _, translated in entries:
        raw = _b(translated)
        trans_index.append((len(raw), data_offset + len(blobs)))
        blobs += raw + b"\0"

    out = bytearray(
        struct.pack(
            order + "IHHIIIII",
            magic, 0, 0, count, originals_offset, translations_offset, hash_size, data_offset,
        )
    )
    for length, offset in orig_index + trans_index:
        out += struct.pack(order + "II", length, offset)
    out += blobs
    return bytes(out)


def header_entry(**headers: str) -> Tuple[str, str]:
    lines = "".join(f"{k.replace('_', '-')}: {v}\n" for k, v in headers.items())
    return ("", lines)


@pytest.fixture(autouse=True)
def _reset_policy():
    previous = policy.is_strict()
    policy.set_strict(False)
    yield
    policy.set_strict(previous)


@pytest.fixture
def minimal_mo() -> bytes:
    # one plain entry, one singular/plural pair with two translated forms
    return build_mo([
        ("Hello", "Hallo"),
        ("{0} file\0{0} files", "{0} Datei\0{0} Dateien"),
    ])


@pytest.fixture
def polish_mo() -> bytes:
    return build_mo([
        header_entry(Language="pl", Plural_Forms=PL_PLURAL_FORMS, Content_Type="text/plain; charset=UTF-8"),
        ("This is a test.", "To jest test."),
        ("{0} file\0{0} files", "{0} plik\0{0} pliki\0{0} plików"),
    ])
