# mocat/catalog/catalog.py
from __future__ import annotations

import logging
import os
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Set, Tuple

from ..utils.placeholders import substitute_numeral
from . import policy
from .decoder import ContainerHeader, DecodedCatalog, decode
from .errors import CatalogError, InvalidPluralHeaderError
from .plural import PluralRule, compile_plural_forms, constant_rule

log = logging.getLogger(__name__)

PLURAL_FORMS_HEADER = "Plural-Forms"


def parse_metadata(text: str) -> Dict[str, str]:
    """
    Parse the header message stored under the empty key.
    One ``Key: Value`` per line; the first colon splits; lines without one are
    ignored and the first occurrence of a key wins.
    """
    headers: Dict[str, str] = {}
    for line in (text or "").split("\n"):
        if not line.strip():
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        headers.setdefault(key.strip(), value.strip())
    return headers


def _build_lookup(decoded: DecodedCatalog) -> Tuple[Dict[str, Tuple[str, ...]], Set[str]]:
    strings: Dict[str, Tuple[str, ...]] = {}
    plural_keys: Set[str] = set()

    def _add(key: str, variants: Tuple[str, ...]) -> bool:
        # first insert wins: a plural key must not be narrowed by a later singular
        if key in strings:
            log.debug("Duplicate catalog key %r ignored", key)
            return False
        strings[key] = variants
        return True

    for index, (original, translated) in enumerate(decoded.pairs()):
        if len(original) == 1:
            _add(original[0], translated)
        elif len(original) == 2:
            _add(original[0], translated[:1])
            if _add(original[1], translated):
                plural_keys.add(original[1])
        else:
            log.debug("Entry %d has %d original parts, skipped", index, len(original))
    return strings, plural_keys


class TranslationCatalog:
    """
    Immutable snapshot of one compiled catalog.

    The lookup map is a read-only mapping of tuples built completely before
    the instance is returned, so any number of threads may call get() and
    get_plural() concurrently.
    """

    def __init__(
        self,
        strings: Mapping[str, Tuple[str, ...]],
        headers: Optional[Mapping[str, str]] = None,
        plural_rule: Optional[PluralRule] = None,
        container: Optional[ContainerHeader] = None,
        plural_keys: Iterable[str] = (),
    ):
        self._strings: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {str(k): tuple(v) for k, v in strings.items()}
        )
        self._headers: Mapping[str, str] = MappingProxyType(dict(headers or {}))
        self._plural_rule = plural_rule
        self._container = container
        self._plural_keys: FrozenSet[str] = frozenset(k for k in plural_keys if k in self._strings)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------
    @classmethod
    def build(cls, decoded: DecodedCatalog, *, strict: Optional[bool] = None) -> "TranslationCatalog":
        strings, plural_keys = _build_lookup(decoded)
        header_variants = strings.get("", ())
        headers = parse_metadata(header_variants[0] if header_variants else "")

        rule: Optional[PluralRule] = None
        plural_forms = headers.get(PLURAL_FORMS_HEADER)
        if plural_forms is not None:
            try:
                rule = compile_plural_forms(plural_forms)
            except InvalidPluralHeaderError as e:
                if policy.resolve(strict):
                    raise
                log.warning("%s; every plural lookup will use form 0", e)
                rule = constant_rule(0)

        return cls(
            strings,
            headers=headers,
            plural_rule=rule,
            container=decoded.header,
            plural_keys=plural_keys,
        )

    @classmethod
    def from_bytes(cls, source: Any, *, strict: Optional[bool] = None) -> "TranslationCatalog":
        """Decode and build; format errors always propagate from here."""
        return cls.build(decode(source), strict=strict)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    def variants(self, text: str) -> Tuple[str, ...]:
        return self._strings.get(text, ())

    def get(self, text: str) -> str:
        variants = self._strings.get(text)
        if variants and variants[0]:
            return variants[0]
        return text

    def get_plural(self, singular: str, plural: str, n: int, *, strict: Optional[bool] = None) -> str:
        if n == 1:
            return substitute_numeral(self.get(singular), n)

        rule = self._plural_rule
        if rule is None:
            return substitute_numeral(plural, n)

        index = rule.select(n, strict=strict)
        variants = self._strings.get(plural, ())
        chosen = variants[index] if index < len(variants) and variants[index] else plural
        return substitute_numeral(chosen, n)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------
    @property
    def headers(self) -> Mapping[str, str]:
        return self._headers

    @property
    def plural_rule(self) -> Optional[PluralRule]:
        return self._plural_rule

    @property
    def container(self) -> Optional[ContainerHeader]:
        return self._container

    @property
    def plural_keys(self) -> FrozenSet[str]:
        """Keys published from the plural side of a two-part original."""
        return self._plural_keys

    def items(self) -> Iterator[Tuple[str, Tuple[str, ...]]]:
        return iter(self._strings.items())

    def __len__(self) -> int:
        return len(self._strings)

    def __contains__(self, text: object) -> bool:
        return text in self._strings

    def __repr__(self) -> str:
        nplurals = self._plural_rule.nplurals if self._plural_rule else None
        return f"<TranslationCatalog keys={len(self)} nplurals={nplurals}>"


def load_catalog(source: Any, *, strict: Optional[bool] = None) -> Optional[TranslationCatalog]:
    """
    Build a catalog from bytes, a binary stream or a filesystem path.

    Strict: failures propagate. Permissive: they are logged and None comes back,
    meaning "no catalog"; lookups then fall back to the source text.
    """
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                catalog = TranslationCatalog.from_bytes(f, strict=strict)
        else:
            catalog = TranslationCatalog.from_bytes(source, strict=strict)
    except (CatalogError, OSError) as e:
        if policy.resolve(strict):
            raise
        log.warning("Failed to load catalog: %s", e)
        return None

    log.info(
        "Loaded catalog: %d keys, language=%s, nplurals=%s",
        len(catalog),
        catalog.headers.get("Language") or "?",
        catalog.plural_rule.nplurals if catalog.plural_rule else "-",
    )
    return catalog
