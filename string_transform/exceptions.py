"""Exceptions raised by the transformation engine.

All errors derive from TransformError, which is a ValueError so callers
that only care about bad input can catch the builtin.

- ConfigurationError: a rule or pattern could not be built
- ResolutionError: a variable reference could not be resolved
- RuleError: a pipeline stage failed
"""


class TransformError(ValueError):
    """Base exception for all transformation errors."""


class ConfigurationError(TransformError):
    """A rule, handler or pattern is invalid."""


class UnknownTransformError(ConfigurationError):
    """No handler is registered for a tag and the tag is not special."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"unknown transform: {tag}")


class MissingRegexError(ConfigurationError):
    """An expand rule was declared without a pattern argument."""

    def __init__(self) -> None:
        super().__init__("expand: missing regex")


class InvalidPatternError(ConfigurationError):
    """An expand pattern failed to compile."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"regexp: {pattern}: {reason}")


class MissingKeyGroupError(ConfigurationError):
    """An expand pattern has no named ``key`` group."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        super().__init__(
            "regexp is missing named parenthesized subexpression (?P<key>...): "
            + pattern
        )


class ResolutionError(TransformError):
    """A matched variable resolved to nothing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"could not resolve variable: {key}")


class RuleError(TransformError):
    """A rule in the pipeline failed.

    The failing rule's exception is chained as ``__cause__``.
    """

    def __init__(self, reason: Exception):
        self.reason = reason
        super().__init__(f"rule: {reason}")
