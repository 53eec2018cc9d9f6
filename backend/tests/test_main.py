"""Service tests through FastAPI's TestClient."""

import pytest
from fastapi.testclient import TestClient

from conftest import build_mo, header_entry
from mocat import main
from mocat.catalog import policy


@pytest.fixture
def client():
    main.registry.clear()
    with TestClient(main.app) as c:
        yield c
    main.registry.clear()


def _upload(client, name, data):
    return client.post("/catalog", files={"catalog": (name, data, "application/octet-stream")})


def test_translate_without_catalog(client):
    r = client.post("/translate", json={"text": "Hello"})
    assert r.status_code == 200
    assert r.json() == {"text": "Hello", "translation": "Hello", "active": False}

    r = client.post("/translate/plural", json={"singular": "{0} file", "plural": "{0} files", "n": 4})
    assert r.json()["translation"] == "4 files"


def test_upload_mo_and_translate(client, polish_mo):
    r = _upload(client, "pl.mo", polish_mo)
    assert r.status_code == 200
    body = r.json()
    assert body["keys"] == 4
    assert body["nplurals"] == 3
    assert body["headers"]["Language"] == "pl"

    r = client.post("/translate", json={"text": "This is a test."})
    assert r.json() == {"text": "This is a test.", "translation": "To jest test.", "active": True}

    r = client.post("/translate/plural", json={"singular": "{0} file", "plural": "{0} files", "n": 22})
    assert r.json()["translation"] == "22 pliki"
    assert r.json()["text"] == "{0} files"


def test_upload_po(client):
    po = (
        'msgid ""\nmsgstr ""\n"Plural-Forms: nplurals=2; plural=(n != 1);\\n"\n\n'
        'msgid "Save"\nmsgstr "Speichern"\n'
    )
    r = _upload(client, "de.po", po.encode("utf-8"))
    assert r.status_code == 200
    assert r.json()["nplurals"] == 2
    assert client.post("/translate", json={"text": "Save"}).json()["translation"] == "Speichern"


def test_upload_rejects_bad_magic(client, polish_mo):
    r = _upload(client, "pl.mo", b"\x00\x00\x00\x00" + polish_mo[4:])
    assert r.status_code == 400
    assert "magic" in r.json()["detail"]
    assert main.registry.active is None


def test_upload_rejects_other_files(client):
    r = _upload(client, "notes.txt", b"hello")
    assert r.status_code == 400


def test_inspect_catalog(client, polish_mo):
    assert client.get("/catalog").status_code == 404

    _upload(client, "pl.mo", polish_mo)
    report = client.get("/catalog").json()
    assert report["container"]["strings"] == 3
    assert report["plural"]["nplurals"] == 3
    assert report["strings"]

    assert client.get("/catalog", params={"strings": False}).json()["strings"] == []


def test_delete_catalog(client, polish_mo):
    _upload(client, "pl.mo", polish_mo)
    assert client.delete("/catalog").json() == {"ok": True, "cleared": True}
    assert client.delete("/catalog").json() == {"ok": True, "cleared": False}
    assert client.post("/translate", json={"text": "This is a test."}).json()["active"] is False


def test_settings_toggle_strict_mode(client):
    data = build_mo([
        header_entry(Plural_Forms="nplurals=2; plural=n/0;"),
        ("{0} file\0{0} files", "{0} Datei\0{0} Dateien"),
    ])
    _upload(client, "de.mo", data)
    payload = {"singular": "{0} file", "plural": "{0} files", "n": 3}

    assert client.post("/translate/plural", json=payload).json()["translation"] == "3 Datei"

    r = client.post("/settings", json={"strict": True})
    assert r.json()["settings"]["strict"] is True
    assert policy.is_strict()
    r = client.post("/translate/plural", json=payload)
    assert r.status_code == 400
    assert "Division by zero" in r.json()["detail"]

    client.post("/settings", json={"strict": False})
    assert client.get("/settings").json()["settings"]["strict"] is False


def test_strict_upload_rejects_bad_plural_header(client):
    data = build_mo([header_entry(Plural_Forms="nplurals=2; plural=n or 1;"), ("a", "b")])
    client.post("/settings", json={"strict": True})
    assert _upload(client, "x.mo", data).status_code == 400
    client.post("/settings", json={"strict": False})
    assert _upload(client, "x.mo", data).json()["nplurals"] == 1


def test_upload_with_deeply_nested_plural_header(client):
    header = "nplurals=2; plural=" + "(" * 300 + "n" + ")" * 300 + ";"
    data = build_mo([header_entry(Plural_Forms=header), ("a", "b")])
    client.post("/settings", json={"strict": True})
    r = _upload(client, "deep.mo", data)
    assert r.status_code == 400
    assert "nested too deeply" in r.json()["detail"]
    client.post("/settings", json={"strict": False})
    r = _upload(client, "deep.mo", data)
    assert r.status_code == 200
    assert r.json()["nplurals"] == 1


def test_plural_preview(client):
    r = client.post(
        "/plural/preview",
        json={"header": "nplurals=2; plural=n==0 ? 0 : 1/(n-3);", "numbers": [0, 1, 3, 4]},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["nplurals"] == 2
    assert body["forms"] == {"0": 0, "1": 0, "3": None, "4": 1}
    assert list(body["errors"]) == ["3"]


def test_plural_preview_rejects_bad_header(client):
    r = client.post("/plural/preview", json={"header": "plural=n;"})
    assert r.status_code == 400
