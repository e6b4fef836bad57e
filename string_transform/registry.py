"""Handler registry and built-in transformations.

This module provides the tag -> function table consulted when parsing
string rules. Tags are case-insensitive and stored lowercase. Handlers can
be registered directly or with the @registry.handler decorator.
"""

import logging
from collections.abc import Callable

from string_transform.types import TransformFunc

logger = logging.getLogger(__name__)


# =============================================================================
# Built-in handlers
# =============================================================================


def nop(s: str) -> str:
    """Return the string unchanged."""
    return s


def trim(s: str) -> str:
    """Return the string with leading and trailing whitespace removed."""
    return s.strip()


def downcase(s: str) -> str:
    """Return a lowercased version of the string."""
    return s.lower()


def upcase(s: str) -> str:
    """Return an uppercased version of the string."""
    return s.upper()


def capitalize(s: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    if not s:
        return ""
    return s[0].upper() + s[1:].lower()


BUILTIN_HANDLERS: dict[str, TransformFunc] = {
    "": nop,
    "nop": nop,
    "trim": trim,
    "downcase": downcase,
    "upcase": upcase,
    "capitalize": capitalize,
}


# =============================================================================
# Registry
# =============================================================================


class HandlerRegistry:
    """Mutable mapping from lowercase tag to transformation function.

    A fresh registry holds the built-in handlers. Registering a tag twice
    replaces the earlier entry; registering None removes it.

    Not thread-safe: callers mutating a registry shared between threads
    must synchronize access themselves.

    Usage:
        registry = HandlerRegistry()

        @registry.handler("slug")
        def slugify(s: str) -> str:
            return s.strip().lower().replace(" ", "-")

        registry.get("SLUG")("Hello World")  # "hello-world"
    """

    def __init__(self) -> None:
        self._handlers: dict[str, TransformFunc] = {}
        self.reset()

    def reset(self) -> None:
        """Reinstall exactly the built-in handlers."""
        self._handlers = dict(BUILTIN_HANDLERS)

    def register(self, tag: str, func: TransformFunc | None) -> None:
        """Register a handler under a tag, or remove the tag if func is None.

        An empty tag is ignored; the empty-tag identity handler is only
        installed by reset().
        """
        if not tag:
            return

        tag = tag.lower()
        if func is None:
            if self._handlers.pop(tag, None) is not None:
                logger.debug("[REGISTRY] Removed handler: %s", tag)
            return

        if tag in self._handlers:
            logger.debug("[REGISTRY] Handler '%s' already registered, overwriting", tag)
        self._handlers[tag] = func
        logger.debug("[REGISTRY] Registered handler: %s", tag)

    def handler(self, tag: str) -> Callable[[TransformFunc], TransformFunc]:
        """Decorator to register a transformation function under a tag."""

        def decorator(func: TransformFunc) -> TransformFunc:
            self.register(tag, func)
            return func

        return decorator

    def get(self, tag: str) -> TransformFunc | None:
        """Get the handler for a tag (case-insensitive)."""
        return self._handlers.get(tag.lower())

    def tags(self) -> list[str]:
        """Get all registered tags, sorted."""
        return sorted(self._handlers)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag.lower() in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
