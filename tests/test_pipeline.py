"""Tests for the transformation pipeline."""

from unittest.mock import MagicMock, patch

import pytest

from string_transform import pipeline
from string_transform.exceptions import (
    ResolutionError,
    RuleError,
    UnknownTransformError,
)
from string_transform.expansion import SHELL_VAR
from string_transform.lookups import lookup_map
from string_transform.pipeline import Transform, new, transform
from string_transform.registry import BUILTIN_HANDLERS, downcase, trim, upcase

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _always_fails(s: str) -> str:
    raise ValueError("boom")


def _never_found(name: str) -> tuple[str, bool]:
    return "", False


# ---------------------------------------------------------------------------
# Pipeline execution
# ---------------------------------------------------------------------------


class TestTransform:
    @pytest.mark.parametrize("s", ["", "abc", "  spaced  ", "${NAME}"])
    def test_empty_rules_is_identity(self, s):
        assert Transform().transform(s) == s

    def test_uses_default_rules(self):
        t = Transform().add_rules(trim, upcase)
        assert t.transform("  hi  ") == "HI"

    def test_explicit_functions_override_rules(self):
        t = Transform().add_rules(upcase)
        assert t.transform("Hi", downcase) == "hi"

    def test_none_rules_are_skipped(self):
        t = Transform().add_rules(None, upcase, None)
        assert t.transform("hi") == "HI"

    def test_call_alias(self):
        assert Transform().add_rules(upcase)("hi") == "HI"

    def test_short_circuits_on_failure(self):
        """Downcase after a failing stage never runs."""
        tail = MagicMock(side_effect=downcase)
        t = Transform()

        with pytest.raises(RuleError, match="^rule: boom$") as exc:
            t.transform("abc", upcase, _always_fails, tail)

        assert isinstance(exc.value.__cause__, ValueError)
        tail.assert_not_called()

    def test_resolution_error_is_wrapped(self):
        t = Transform().add_string_rules("expand:" + SHELL_VAR)
        with pytest.raises(RuleError, match="rule: could not resolve variable: MISSING") as exc:
            t.transform("${MISSING}")
        assert isinstance(exc.value.__cause__, ResolutionError)
        assert exc.value.__cause__.key == "MISSING"


# ---------------------------------------------------------------------------
# Rules and handlers
# ---------------------------------------------------------------------------


class TestStringRules:
    def test_add_string_rules(self):
        t = Transform().add_string_rules("trim, upcase")
        assert t.transform("  hi  ") == "HI"

    def test_rules_across_strings_keep_order(self):
        t = Transform().add_string_rules("upcase", "downcase, capitalize")
        assert t.rules[:2] == [upcase, downcase]
        assert t.transform("hELLO") == "Hello"

    def test_failure_keeps_earlier_rules(self):
        t = Transform()
        with pytest.raises(UnknownTransformError):
            t.add_string_rules("trim, bogus, upcase")
        assert t.rules == [trim]

    def test_custom_handler_in_rules(self):
        t = Transform()

        @t.handler("reverse")
        def reverse(s: str) -> str:
            return s[::-1]

        t.add_string_rules("REVERSE")
        assert t.transform("abc") == "cba"

    def test_registry_reset_restores_builtin(self):
        t = Transform().register_handler("trim", None)
        with pytest.raises(UnknownTransformError):
            t.parse_string_rule("trim")
        t.reset_handlers()
        assert t.parse_string_rule("trim") is trim


# ---------------------------------------------------------------------------
# Expansion and lookups
# ---------------------------------------------------------------------------


class TestExpand:
    def test_round_trip(self):
        t = Transform().add_lookups(lookup_map({"NAME": "Ada"}))
        t.add_string_rules("expand:" + SHELL_VAR)
        assert t.transform("Hello ${NAME}!") == "Hello Ada!"
        assert t.transform("no variables") == "no variables"

    def test_lookup_precedence(self):
        t = Transform().add_lookups(_never_found, lookup_map({"X": "1"}))
        exp = t.expand(SHELL_VAR)
        assert t.transform("${X}", exp) == "1"

    def test_explicit_lookups(self):
        t = Transform().add_lookups(lookup_map({"X": "default"}))
        exp = t.expand(SHELL_VAR, lookup_map({"X": "explicit"}))
        assert exp("${X}") == "explicit"

    def test_default_lookups_follow_reset(self):
        t = Transform().add_lookups(lookup_map({"X": "old"}))
        exp = t.expand(SHELL_VAR)
        t.reset_lookups(lookup_map({"X": "new"}))
        assert exp("${X}") == "new"

    def test_expand_env(self, monkeypatch):
        monkeypatch.setenv("STRING_TRANSFORM_USER", "ada")
        t = Transform().expand_env()
        assert len(t.rules) == 1
        assert len(t.lookups) == 1
        assert t.transform("user=${STRING_TRANSFORM_USER}") == "user=ada"

    def test_expand_env_after_static_values(self, monkeypatch):
        monkeypatch.setenv("STRING_TRANSFORM_USER", "env")
        t = Transform().add_lookups(lookup_map({"STRING_TRANSFORM_USER": "static"}))
        t.expand_env()
        assert t.transform("${STRING_TRANSFORM_USER}") == "static"

    def test_expand_env_fails_hard_on_bad_canonical_rule(self):
        t = Transform()
        with patch.object(pipeline, "SHELL_VAR", "(?P<key>"):
            with pytest.raises(RuntimeError):
                t.expand_env()
        assert t.rules == []


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_reset_clears_everything(self):
        t = Transform().add_string_rules("trim").add_lookups(_never_found)
        t.register_handler("custom", upcase)
        t.reset()
        assert t.rules == []
        assert t.lookups == []
        assert len(t.handlers) == len(BUILTIN_HANDLERS)

    def test_reset_rules_and_lookups_with_values(self):
        t = Transform().reset_rules(upcase).reset_lookups(_never_found)
        assert t.rules == [upcase]
        assert t.lookups == [_never_found]

    def test_instances_are_independent(self):
        a = new()
        b = new()
        a.register_handler("custom", upcase).add_rules(upcase)
        assert "custom" not in b.handlers
        assert b.rules == []


class TestModuleTransform:
    def test_one_off_rules(self):
        assert transform("  hi  ", "trim, upcase") == "HI"

    def test_values_and_env(self, monkeypatch):
        monkeypatch.setenv("STRING_TRANSFORM_GREETING", "hello")
        result = transform(
            "${STRING_TRANSFORM_GREETING} ${NAME}",
            values={"NAME": "Ada"},
            env=True,
        )
        assert result == "hello Ada"

    def test_no_rules_is_identity(self):
        assert transform("as is") == "as is"
