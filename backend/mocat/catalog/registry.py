# mocat/catalog/registry.py
from __future__ import annotations

import logging
from typing import Any, Optional

from ..utils.placeholders import substitute_numeral
from .catalog import TranslationCatalog, load_catalog

log = logging.getLogger(__name__)


class CatalogRegistry:
    """
    Holds the active catalog for callers that want an ambient lookup point.

    Publishing a catalog is a single reference store; every lookup reads the
    reference once, so an in-flight call keeps using the snapshot it saw even
    if another thread swaps catalogs meanwhile.
    """

    def __init__(self, catalog: Optional[TranslationCatalog] = None):
        self._active: Optional[TranslationCatalog] = catalog

    @property
    def active(self) -> Optional[TranslationCatalog]:
        return self._active

    def activate(self, catalog: Optional[TranslationCatalog]) -> Optional[TranslationCatalog]:
        """Publish ``catalog`` and return the one it replaces."""
        previous, self._active = self._active, catalog
        return previous

    def clear(self) -> Optional[TranslationCatalog]:
        return self.activate(None)

    def load(self, source: Any, *, strict: Optional[bool] = None) -> Optional[TranslationCatalog]:
        """
        Build a catalog and publish it. A permissive failure publishes nothing,
        so whatever was active before keeps serving lookups.
        """
        catalog = load_catalog(source, strict=strict)
        if catalog is None:
            log.warning("Catalog not loaded; keeping %r", self._active)
            return None
        self.activate(catalog)
        return catalog

    def translate(self, text: str) -> str:
        catalog = self._active
        if catalog is None:
            return text
        return catalog.get(text)

    def translate_plural(self, singular: str, plural: str, n: int, *, strict: Optional[bool] = None) -> str:
        catalog = self._active
        if catalog is None:
            return substitute_numeral(singular if n == 1 else plural, n)
        return catalog.get_plural(singular, plural, n, strict=strict)


# -----------------------------------------------------------------------------
# Module-level convenience; the core never reaches for this.
# -----------------------------------------------------------------------------
default_registry = CatalogRegistry()


def gettext(text: str) -> str:
    return default_registry.translate(text)


def ngettext(singular: str, plural: str, n: int) -> str:
    return default_registry.translate_plural(singular, plural, n)
