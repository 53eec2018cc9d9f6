# mocat/schemas.py
from __future__ import annotations
import os
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # strict: construction and plural evaluation errors propagate
    strict: bool = False

    # Catalog published at startup, if any
    catalog_path: Optional[str] = None

    log_level: str = "INFO"
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            strict=_env_flag("MOCAT_STRICT"),
            catalog_path=os.getenv("MOCAT_CATALOG_PATH") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR") or None,
        ).normalized()

    def normalized(self) -> "Settings":
        s = self.model_copy(deep=True)
        s.log_level = (s.log_level or "INFO").upper()
        s.catalog_path = (s.catalog_path or "").strip() or None
        return s


class SettingsIn(BaseModel):
    strict: bool


class SettingsOut(BaseModel):
    ok: bool = True
    settings: Dict[str, Any] = Field(default_factory=dict)


class CatalogOut(BaseModel):
    ok: bool = True
    keys: int = 0
    nplurals: Optional[int] = None
    headers: Dict[str, str] = Field(default_factory=dict)


class TranslateIn(BaseModel):
    text: str


class TranslatePluralIn(BaseModel):
    singular: str
    plural: str
    n: int


class TranslateOut(BaseModel):
    text: str
    translation: str
    active: bool = False


class PluralPreviewIn(BaseModel):
    header: str
    numbers: List[int] = Field(default_factory=lambda: list(range(0, 11)))


class PluralPreviewOut(BaseModel):
    nplurals: int
    expression: str
    forms: Dict[str, Optional[int]] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
