from __future__ import annotations

import logging
from typing import Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from mocat.analyzers.mo_inspect import inspect_catalog
from .catalog import policy
from .catalog.catalog import TranslationCatalog
from .catalog.errors import CatalogError, EvalError, InvalidPluralHeaderError
from .catalog.plural import compile_plural_forms
from .catalog.registry import CatalogRegistry
from .schemas import (
    CatalogOut,
    PluralPreviewIn,
    PluralPreviewOut,
    Settings,
    SettingsIn,
    SettingsOut,
    TranslateIn,
    TranslateOut,
    TranslatePluralIn,
)
from .utils.logging_config import setup_logging
from .utils.mo_compile import compile_po_text

# -----------------------------------------------------------------------------
# Bootstrap
# -----------------------------------------------------------------------------
load_dotenv()
SETTINGS = Settings.from_env()
setup_logging(SETTINGS.log_level, SETTINGS.log_dir)
log = logging.getLogger("mocat")

policy.set_strict(SETTINGS.strict)

app = FastAPI(title="MO Catalog Runtime", version="0.1.0")

registry = CatalogRegistry()

if SETTINGS.catalog_path:
    registry.load(SETTINGS.catalog_path)

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _catalog_summary(catalog: TranslationCatalog) -> CatalogOut:
    rule = catalog.plural_rule
    return CatalogOut(
        ok=True,
        keys=len(catalog),
        nplurals=rule.nplurals if rule else None,
        headers=dict(catalog.headers),
    )


def _upload_to_mo_bytes(filename: str, content: bytes) -> bytes:
    name = (filename or "").lower()
    if name.endswith(".po"):
        try:
            return compile_po_text(content.decode("utf-8", errors="replace"))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if name.endswith(".mo"):
        return content
    raise HTTPException(status_code=400, detail="Only .mo and .po files are accepted")


def _settings_out() -> SettingsOut:
    s = SETTINGS.model_copy(update={"strict": policy.is_strict()})
    return SettingsOut(ok=True, settings=s.model_dump())

# -----------------------------------------------------------------------------
# Settings endpoints
# -----------------------------------------------------------------------------
@app.get("/settings", response_model=SettingsOut)
def get_settings():
    return _settings_out()


@app.post("/settings", response_model=SettingsOut)
def set_settings(payload: SettingsIn):
    policy.set_strict(payload.strict)
    log.info("Failure policy set to %s", "strict" if payload.strict else "permissive")
    return _settings_out()

# -----------------------------------------------------------------------------
# Catalog endpoints
# -----------------------------------------------------------------------------
@app.post("/catalog", response_model=CatalogOut)
async def upload_catalog(catalog: UploadFile = File(...)):
    content = await catalog.read()
    data = _upload_to_mo_bytes(catalog.filename, content)

    # build first, publish only a complete catalog
    try:
        built = TranslationCatalog.from_bytes(data)
    except CatalogError as e:
        raise HTTPException(status_code=400, detail=f"Invalid catalog: {e}")

    registry.activate(built)
    log.info("Activated catalog %s (%d keys)", catalog.filename, len(built))
    return _catalog_summary(built)


@app.get("/catalog")
def get_catalog(strings: bool = True):
    active = registry.active
    if active is None:
        raise HTTPException(status_code=404, detail="No active catalog")
    return JSONResponse(inspect_catalog(active, include_strings=strings))


@app.delete("/catalog")
def delete_catalog():
    previous = registry.clear()
    return {"ok": True, "cleared": previous is not None}

# -----------------------------------------------------------------------------
# Lookups
# -----------------------------------------------------------------------------
@app.post("/translate", response_model=TranslateOut)
def translate(payload: TranslateIn):
    return TranslateOut(
        text=payload.text,
        translation=registry.translate(payload.text),
        active=registry.active is not None,
    )


@app.post("/translate/plural", response_model=TranslateOut)
def translate_plural(payload: TranslatePluralIn):
    try:
        out = registry.translate_plural(payload.singular, payload.plural, payload.n)
    except EvalError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TranslateOut(
        text=payload.singular if payload.n == 1 else payload.plural,
        translation=out,
        active=registry.active is not None,
    )


@app.post("/plural/preview", response_model=PluralPreviewOut)
def plural_preview(payload: PluralPreviewIn):
    """Evaluate a Plural-Forms header for a list of numbers without loading a catalog."""
    try:
        rule = compile_plural_forms(payload.header)
    except InvalidPluralHeaderError as e:
        raise HTTPException(status_code=400, detail=str(e))

    forms: Dict[str, Optional[int]] = {}
    errors: Dict[str, str] = {}
    for n in payload.numbers:
        try:
            forms[str(n)] = rule.index(n)
        except EvalError as e:
            forms[str(n)] = None
            errors[str(n)] = str(e)
    return PluralPreviewOut(nplurals=rule.nplurals, expression=rule.expression, forms=forms, errors=errors)
