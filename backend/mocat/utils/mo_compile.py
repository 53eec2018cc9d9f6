from __future__ import annotations

import logging
import os
import tempfile

import polib

log = logging.getLogger(__name__)


def parse_po_text(text: str) -> polib.POFile:
    try:
        return polib.pofile(text)
    except Exception as e:
        raise ValueError(f"Invalid PO file: {e}") from e


def catalog_to_mo_bytes(catalog: polib.POFile) -> bytes:
    with tempfile.TemporaryDirectory() as td:
        mo_tmp = os.path.join(td, "messages.mo")
        catalog.save_as_mofile(mo_tmp)
        with open(mo_tmp, "rb") as f:
            return f.read()


def compile_po_text(text: str) -> bytes:
    """Compile PO source into .mo bytes; untranslated and obsolete entries are left out."""
    catalog = parse_po_text(text)
    data = catalog_to_mo_bytes(catalog)
    log.debug("Compiled PO with %d entries into %d bytes", len(catalog), len(data))
    return data
