"""Composable string transformation engine.

Threads a string through an ordered pipeline of named transformations:
trimming, case changes and pattern-based variable expansion.

Usage:
    from string_transform import Transform, TransformConfig

    t = Transform(TransformConfig(values={"NAME": "Ada"}, expand_env=True))
    t.add_string_rules("trim, capitalize")
    result = t.transform("  hello ${NAME}  ")

Rules are declared as ``tag[:argument]`` strings, several per string
separated by commas. Tags resolve through the handler registry; the
special ``expand`` tag takes a regular expression with a named ``key``
group whose matches are replaced by lookup values.
"""

from string_transform.config import TransformConfig
from string_transform.exceptions import (
    ConfigurationError,
    InvalidPatternError,
    MissingKeyGroupError,
    MissingRegexError,
    ResolutionError,
    RuleError,
    TransformError,
    UnknownTransformError,
)
from string_transform.expansion import SHELL_VAR, Expansion
from string_transform.lookups import lookup_env, lookup_map, lookup_static, resolve
from string_transform.pipeline import Transform, new, transform
from string_transform.registry import (
    BUILTIN_HANDLERS,
    HandlerRegistry,
    capitalize,
    downcase,
    nop,
    trim,
    upcase,
)
from string_transform.rules import parse_string_rule, split_rules
from string_transform.types import LookupFunc, TransformFunc

__all__ = [
    # Main API
    "Transform",
    "TransformConfig",
    "new",
    "transform",
    # Types
    "LookupFunc",
    "TransformFunc",
    # Handlers
    "BUILTIN_HANDLERS",
    "HandlerRegistry",
    "capitalize",
    "downcase",
    "nop",
    "trim",
    "upcase",
    # Rules and expansion
    "Expansion",
    "SHELL_VAR",
    "parse_string_rule",
    "split_rules",
    # Lookups
    "lookup_env",
    "lookup_map",
    "lookup_static",
    "resolve",
    # Errors
    "ConfigurationError",
    "InvalidPatternError",
    "MissingKeyGroupError",
    "MissingRegexError",
    "ResolutionError",
    "RuleError",
    "TransformError",
    "UnknownTransformError",
]
