# mocat/analyzers/mo_inspect.py
from __future__ import annotations

from typing import Any, Dict, List

from mocat.catalog.catalog import TranslationCatalog
from mocat.catalog.decoder import ContainerHeader
from mocat.utils.placeholders import has_numeral


def _container_info(header: ContainerHeader) -> Dict[str, Any]:
    return {
        "magic": f"0x{header.magic:08x}",
        "version": header.version,
        "strings": header.count,
        "originals_offset": header.originals_offset,
        "translations_offset": header.translations_offset,
        "hash_size": header.hash_size,
        "hash_offset": header.hash_offset,
    }


def inspect_catalog(catalog: TranslationCatalog, *, include_strings: bool = True) -> Dict[str, Any]:
    """
    Describe a loaded catalog: container header, metadata, plural rule, string
    table and a list of informational issues. Nothing here rejects a catalog;
    lookups tolerate every condition reported below.
    """
    rule = catalog.plural_rule
    nplurals = rule.nplurals if rule else None

    issues: List[Dict[str, Any]] = []
    plural_keys = 0
    strings: List[Dict[str, Any]] = []

    for key, variants in catalog.items():
        if key in catalog.plural_keys:
            plural_keys += 1
            if nplurals is not None and len(variants) != nplurals:
                issues.append({
                    "type": "plural_count",
                    "key": key,
                    "detail": f"{len(variants)} translated forms, header declares {nplurals}.",
                })
        if key and any(v == "" for v in variants):
            issues.append({
                "type": "empty_translation",
                "key": key,
                "detail": "Empty translated form; lookups fall back to the source text.",
            })
        if key and has_numeral(key) and not all(has_numeral(v) for v in variants if v):
            issues.append({
                "type": "numeral_placeholder",
                "key": key,
                "detail": "Source has {0} but a translated form does not.",
            })
        if include_strings and key:
            strings.append({"key": key, "translations": list(variants)})

    return {
        "container": _container_info(catalog.container) if catalog.container else None,
        "headers": dict(catalog.headers),
        "plural": {"nplurals": nplurals, "expression": rule.expression} if rule else None,
        "counts": {"keys": len(catalog), "plural_keys": plural_keys, "issues": len(issues)},
        "issues": issues,
        "strings": strings,
    }
