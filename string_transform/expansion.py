"""Pattern-based variable expansion.

An Expansion scans a string for every match of a regular expression and
replaces each whole match with the value of its ``key`` group as resolved
by a chain of lookups:

    exp = Expansion.build(SHELL_VAR, [lookup_map({"NAME": "Ada"})])
    exp("Hello ${NAME}!")  # "Hello Ada!"

Expansion is a single left-to-right pass; substituted values are never
rescanned.
"""

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from string_transform.exceptions import MissingKeyGroupError, ResolutionError
from string_transform.lookups import resolve
from string_transform.types import LookupFunc

logger = logging.getLogger(__name__)

# Matches ${KEY}
SHELL_VAR = r"(?i)\$\{\s*(?P<key>[A-Z0-9_]+)\s*\}"

KEY_GROUP = "key"


@dataclass(frozen=True)
class Expansion:
    """A compiled expand rule.

    Attributes:
        pattern: Compiled expression with a named ``key`` group
        key_index: Group index of ``key`` within the pattern
        lookups: Explicit lookup chain; empty means use default_lookups
        default_lookups: Returns the fallback chain at call time
        allow_empty: Substitute found empty values instead of failing
    """

    pattern: re.Pattern[str]
    key_index: int
    lookups: tuple[LookupFunc, ...] = ()
    default_lookups: Callable[[], Sequence[LookupFunc]] = field(
        default=lambda: (), repr=False
    )
    allow_empty: bool = False

    @classmethod
    def build(
        cls,
        pattern: str | re.Pattern[str],
        lookups: Sequence[LookupFunc] = (),
        *,
        default_lookups: Callable[[], Sequence[LookupFunc]] | None = None,
        allow_empty: bool = False,
    ) -> "Expansion":
        """Compile a pattern and check that it declares a ``key`` group.

        Raises:
            re.error: If a pattern string fails to compile
            MissingKeyGroupError: If the pattern has no ``key`` group
        """
        if isinstance(pattern, str):
            pattern = re.compile(pattern)

        key_index = pattern.groupindex.get(KEY_GROUP)
        if key_index is None:
            raise MissingKeyGroupError(pattern.pattern)

        return cls(
            pattern=pattern,
            key_index=key_index,
            lookups=tuple(lookups),
            default_lookups=default_lookups or (lambda: ()),
            allow_empty=allow_empty,
        )

    def __call__(self, s: str) -> str:
        matches = list(self.pattern.finditer(s))
        if not matches:
            return s

        lookups = self.lookups or tuple(self.default_lookups())

        parts: list[str] = []
        pos = 0
        for match in matches:
            key = match.group(self.key_index) or ""
            value, found = resolve(key, lookups)
            if not found or (not value and not self.allow_empty):
                logger.debug("[EXPAND] Unresolved variable: %s", key)
                raise ResolutionError(key)
            parts.append(s[pos : match.start()])
            parts.append(value)
            pos = match.end()
        parts.append(s[pos:])
        return "".join(parts)
