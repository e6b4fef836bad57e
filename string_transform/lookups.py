"""Lookup sources for variable expansion.

A lookup maps a variable name to ``(value, found)``. Sources are tried in
order and the first one reporting ``found`` wins:

    lookups = [lookup_map({"NAME": "Ada"}), lookup_env()]
    value, found = resolve("NAME", lookups)
"""

import os
from collections.abc import Iterable, Mapping

from string_transform.types import LookupFunc

__all__ = [
    "lookup_env",
    "lookup_map",
    "lookup_static",
    "resolve",
]


def lookup_map(mapping: Mapping[str, str] | None) -> LookupFunc:
    """Use the given mapping as data source.

    A key that is present counts as found, even when its value is empty.
    """
    if mapping is None:
        mapping = {}

    def lookup(name: str) -> tuple[str, bool]:
        if name in mapping:
            return mapping[name], True
        return "", False

    return lookup


def lookup_env(environ: Mapping[str, str] | None = None) -> LookupFunc:
    """Use the process environment as data source.

    The environment is read on every call. Unset and empty variables are
    both reported as not found.

    Args:
        environ: Mapping to read instead of os.environ (for testing)
    """

    def lookup(name: str) -> tuple[str, bool]:
        source = os.environ if environ is None else environ
        value = source.get(name, "")
        if value:
            return value, True
        return "", False

    return lookup


def lookup_static(value: str) -> LookupFunc:
    """Resolve every name to the given value.

    Each ``%s`` in the value is replaced by the name being looked up, so
    ``lookup_static("<%s>")`` turns ``HOME`` into ``<HOME>``.
    """

    def lookup(name: str) -> tuple[str, bool]:
        return value.replace("%s", name), True

    return lookup


def resolve(key: str, lookups: Iterable[LookupFunc]) -> tuple[str, bool]:
    """Query each lookup in order and stop at the first hit."""
    for lookup in lookups:
        value, found = lookup(key)
        if found:
            return value, True
    return "", False
