"""Catalogs produced by polib must load through the runtime decoder."""

import polib
import pytest

from conftest import PL_PLURAL_FORMS
from mocat.catalog.catalog import TranslationCatalog
from mocat.utils.mo_compile import catalog_to_mo_bytes, compile_po_text

PO_TEXT = f'''
msgid ""
msgstr ""
"Language: pl\\n"
"Content-Type: text/plain; charset=UTF-8\\n"
"Plural-Forms: {PL_PLURAL_FORMS}\\n"

msgid "This is a test."
msgstr "To jest test."

msgid "{{0}} file"
msgid_plural "{{0}} files"
msgstr[0] "{{0}} plik"
msgstr[1] "{{0}} pliki"
msgstr[2] "{{0}} plików"

msgid "Untranslated"
msgstr ""
'''


def test_compile_po_text_round_trip():
    catalog = TranslationCatalog.from_bytes(compile_po_text(PO_TEXT))

    assert catalog.headers["Language"] == "pl"
    assert catalog.plural_rule.nplurals == 3
    assert catalog.get("This is a test.") == "To jest test."
    assert catalog.get("Untranslated") == "Untranslated"
    assert [catalog.get_plural("{0} file", "{0} files", n) for n in (1, 3, 5, 21)] == [
        "1 plik",
        "3 pliki",
        "5 plików",
        "21 plik",
    ]


def test_polib_catalog_to_mo_bytes():
    po = polib.POFile()
    po.metadata = {
        "Content-Type": "text/plain; charset=UTF-8",
        "Plural-Forms": "nplurals=2; plural=(n != 1);",
    }
    po.append(polib.POEntry(msgid="Save", msgstr="Speichern"))
    po.append(polib.POEntry(
        msgid="{0} item",
        msgid_plural="{0} items",
        msgstr_plural={0: "{0} Element", 1: "{0} Elemente"},
    ))

    catalog = TranslationCatalog.from_bytes(catalog_to_mo_bytes(po))
    assert catalog.container.count == 3
    assert catalog.get("Save") == "Speichern"
    assert catalog.get_plural("{0} item", "{0} items", 1) == "1 Element"
    assert catalog.get_plural("{0} item", "{0} items", 0) == "0 Elemente"


def test_compile_po_text_rejects_garbage():
    with pytest.raises(ValueError):
        compile_po_text('msgid "a"\nmsgstr "b"\nthis is not gettext\n')
