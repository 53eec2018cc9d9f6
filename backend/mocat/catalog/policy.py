# mocat/catalog/policy.py
"""
Process-wide failure policy.

Permissive (the default) means construction and plural evaluation failures are
logged and degraded to a fallback; strict means they propagate to the caller.
Every API that consults this also takes an explicit ``strict=`` override.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional

_TRUE = {"1", "true", "yes", "on"}

_strict: bool = os.getenv("MOCAT_STRICT", "").strip().lower() in _TRUE


def is_strict() -> bool:
    return _strict


def set_strict(value: bool) -> None:
    global _strict
    _strict = bool(value)


def resolve(strict: Optional[bool]) -> bool:
    return _strict if strict is None else bool(strict)


@contextmanager
def strict_mode(value: bool = True) -> Iterator[None]:
    previous = _strict
    set_strict(value)
    try:
        yield
    finally:
        set_strict(previous)
