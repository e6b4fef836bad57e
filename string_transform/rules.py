"""String rule parsing.

Rules are declared as ``tag`` or ``tag:argument``. Several rules can share
one string separated by commas:

    "trim, upcase"
    "expand:(?i)\\$\\{(?P<key>[A-Z_]+)\\}"

The tag is case-insensitive. Registered handlers ignore the argument; the
special ``expand`` tag requires it as a regular expression with a named
``key`` group.
"""

import logging
import re
from collections.abc import Callable, Iterator

from string_transform.exceptions import (
    InvalidPatternError,
    MissingRegexError,
    UnknownTransformError,
)
from string_transform.registry import HandlerRegistry
from string_transform.types import TransformFunc

logger = logging.getLogger(__name__)

EXPAND_TAG = "expand"

# Builds the expand function from a compiled pattern
ExpansionFactory = Callable[[re.Pattern[str]], TransformFunc]


def split_rule(rule: str) -> tuple[str, str | None]:
    """Split a rule into its normalized tag and optional argument."""
    tag, sep, argument = rule.partition(":")
    return tag.strip().lower(), (argument if sep else None)


def split_rules(*specs: str) -> Iterator[str]:
    """Yield every non-empty comma-separated rule, in declaration order."""
    for spec in specs:
        for rule in spec.split(","):
            rule = rule.strip()
            if rule:
                yield rule


def parse_string_rule(
    rule: str,
    handlers: HandlerRegistry | None,
    expansion_factory: ExpansionFactory,
) -> TransformFunc:
    """Parse a string rule into a transformation function.

    Args:
        rule: Rule in ``tag[:argument]`` form
        handlers: Registry consulted first; None behaves as empty
        expansion_factory: Builds the function for ``expand`` rules

    Returns:
        The registered handler, or a new expansion function

    Raises:
        MissingRegexError: ``expand`` without an argument
        InvalidPatternError: ``expand`` argument is not a valid expression
        MissingKeyGroupError: ``expand`` argument has no ``key`` group
        UnknownTransformError: tag is neither registered nor ``expand``
    """
    tag, argument = split_rule(rule)

    func = handlers.get(tag) if handlers is not None else None
    if func is not None:
        return func

    if tag == EXPAND_TAG:
        if argument is None:
            raise MissingRegexError()
        try:
            pattern = re.compile(argument)
        except re.error as e:
            raise InvalidPatternError(argument, str(e)) from e
        logger.debug("[RULES] Compiled expand pattern: %s", argument)
        return expansion_factory(pattern)

    raise UnknownTransformError(tag)
