"""Transformation pipeline.

A Transform owns three independently resettable pieces of state:

- handlers: tag -> function registry consulted by string rules
- lookups: ordered variable sources used by expand rules
- rules: ordered default pipeline run by transform()
"""

import logging
import re
from collections.abc import Callable, Mapping

from string_transform.config import TransformConfig
from string_transform.exceptions import ConfigurationError, RuleError
from string_transform.expansion import SHELL_VAR, Expansion
from string_transform.lookups import lookup_env, lookup_map
from string_transform.registry import HandlerRegistry
from string_transform.rules import parse_string_rule, split_rules
from string_transform.types import LookupFunc, TransformFunc

logger = logging.getLogger(__name__)


class Transform:
    """Transformation configuration and pipeline.

    Every instance is independent; there is no shared default instance.
    Instances are not thread-safe. Concurrent transform() calls are safe
    only while no thread mutates the handlers, lookups or rules, so
    callers sharing an instance must synchronize configuration changes.

    Usage:
        t = Transform(TransformConfig(values={"NAME": "Ada"}))
        t.add_string_rules("trim", "expand:(?i)\\$\\{(?P<key>[A-Z_]+)\\}")
        t.transform("  Hello ${NAME}!  ")  # "Hello Ada!"
    """

    def __init__(self, *configs: TransformConfig) -> None:
        self.handlers = HandlerRegistry()
        self.lookups: list[LookupFunc] = []
        self.rules: list[TransformFunc | None] = []
        self.reset(*configs)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def reset(self, *configs: TransformConfig) -> "Transform":
        """Reset to the default state, then apply the given configs in order."""
        self.reset_handlers()
        self.reset_lookups()
        self.reset_rules()
        for config in configs:
            config.apply(self)
        return self

    def reset_handlers(self) -> "Transform":
        """Reset registered handlers to the built-ins."""
        self.handlers.reset()
        return self

    def reset_lookups(self, *lookups: LookupFunc) -> "Transform":
        """Replace the lookup sources with the given ones."""
        self.lookups = list(lookups)
        return self

    def reset_rules(self, *rules: TransformFunc | None) -> "Transform":
        """Replace the default rules with the given ones."""
        self.rules = list(rules)
        return self

    # =========================================================================
    # Configuration
    # =========================================================================

    def register_handler(self, tag: str, func: TransformFunc | None) -> "Transform":
        """Register a handler for a tag; None removes the tag."""
        self.handlers.register(tag, func)
        return self

    def handler(self, tag: str) -> Callable[[TransformFunc], TransformFunc]:
        """Decorator to register a transformation function under a tag."""
        return self.handlers.handler(tag)

    def add_lookups(self, *lookups: LookupFunc) -> "Transform":
        """Append lookup sources, lowest precedence last."""
        self.lookups.extend(lookups)
        return self

    def add_rules(self, *rules: TransformFunc | None) -> "Transform":
        """Append functions to the default rules."""
        self.rules.extend(rules)
        return self

    def parse_string_rule(self, rule: str) -> TransformFunc:
        """Parse a ``tag[:argument]`` rule into a transformation function.

        Raises:
            ConfigurationError: If the tag is unknown or the expand pattern
                is missing or invalid
        """
        return parse_string_rule(rule, self.handlers, self.expand)

    def add_string_rules(self, *specs: str) -> "Transform":
        """Parse comma-separated rule specs and append them to the rules.

        Rules are appended as they are parsed; when one fails, the ones
        before it stay appended.

        Raises:
            ConfigurationError: On the first rule that can not be parsed
        """
        for rule in split_rules(*specs):
            self.rules.append(self.parse_string_rule(rule))
            logger.debug("[RULES] Added rule: %s", rule)
        return self

    def expand(
        self,
        pattern: str | re.Pattern[str],
        *lookups: LookupFunc,
        allow_empty: bool = False,
    ) -> Expansion:
        """Build a function that expands ``key`` matches of a pattern.

        Without explicit lookups the expansion resolves against this
        transform's lookups as they are when it runs.

        Raises:
            MissingKeyGroupError: If the pattern has no ``key`` group
        """
        return Expansion.build(
            pattern,
            lookups,
            default_lookups=lambda: self.lookups,
            allow_empty=allow_empty,
        )

    def expand_env(self) -> "Transform":
        """Add a ${KEY} expansion rule backed by the environment."""
        try:
            func = self.parse_string_rule("expand:" + SHELL_VAR)
        except ConfigurationError as e:
            raise RuntimeError(f"invalid environment expansion rule: {e}") from e
        self.rules.append(func)
        self.lookups.append(lookup_env())
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    def transform(self, s: str, *funcs: TransformFunc | None) -> str:
        """Apply transformation functions to a string, in order.

        Uses the default rules when no functions are given. None entries
        are skipped.

        Raises:
            RuleError: If a function fails; the failure is its __cause__
        """
        for func in funcs or self.rules:
            if func is None:
                continue
            try:
                s = func(s)
            except Exception as e:
                logger.debug("[TRANSFORM] Rule failed: %s", e)
                raise RuleError(e) from e
        return s

    __call__ = transform


def new(*configs: TransformConfig) -> Transform:
    """Return a new transformation configuration."""
    return Transform(*configs)


def transform(
    s: str,
    *specs: str,
    values: Mapping[str, str] | None = None,
    env: bool = False,
) -> str:
    """Transform a string with one-off rule specs.

    Builds a throwaway Transform, so nothing is shared between calls.

    Args:
        s: Input string
        specs: Rule specs, e.g. "trim, upcase"
        values: Static variable values for expand rules
        env: Also expand ${KEY} from the environment

    Raises:
        ConfigurationError: If a rule spec can not be parsed
        RuleError: If a rule fails
    """
    t = Transform()
    if values:
        t.add_lookups(lookup_map(dict(values)))
    t.add_string_rules(*specs)
    if env:
        t.expand_env()
    return t.transform(s)

