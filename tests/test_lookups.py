"""Tests for lookup sources and resolution order."""

from string_transform.lookups import lookup_env, lookup_map, lookup_static, resolve


def _never_found(name: str) -> tuple[str, bool]:
    return "", False


class TestLookupMap:
    def test_present_key(self):
        assert lookup_map({"X": "1"})("X") == ("1", True)

    def test_missing_key(self):
        assert lookup_map({"X": "1"})("Y") == ("", False)

    def test_empty_value_counts_as_found(self):
        assert lookup_map({"X": ""})("X") == ("", True)

    def test_none_mapping_is_empty(self):
        assert lookup_map(None)("X") == ("", False)


class TestLookupEnv:
    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("STRING_TRANSFORM_TEST", "value")
        assert lookup_env()("STRING_TRANSFORM_TEST") == ("value", True)

    def test_reads_environment_at_call_time(self, monkeypatch):
        lookup = lookup_env()
        monkeypatch.delenv("STRING_TRANSFORM_LATE", raising=False)
        assert lookup("STRING_TRANSFORM_LATE") == ("", False)
        monkeypatch.setenv("STRING_TRANSFORM_LATE", "now")
        assert lookup("STRING_TRANSFORM_LATE") == ("now", True)

    def test_empty_variable_is_not_found(self):
        assert lookup_env({"EMPTY": ""})("EMPTY") == ("", False)

    def test_custom_environ(self):
        assert lookup_env({"HOME": "/home/ada"})("HOME") == ("/home/ada", True)


class TestLookupStatic:
    def test_constant_value(self):
        assert lookup_static("fixed")("ANY") == ("fixed", True)

    def test_name_placeholder(self):
        assert lookup_static("<%s:%s>")("HOME") == ("<HOME:HOME>", True)


class TestResolve:
    """First source reporting found wins."""

    def test_first_found_wins(self):
        lookups = [_never_found, lookup_map({"X": "1"}), lookup_map({"X": "2"})]
        assert resolve("X", lookups) == ("1", True)

    def test_found_empty_value_stops_search(self):
        lookups = [lookup_map({"X": ""}), lookup_map({"X": "2"})]
        assert resolve("X", lookups) == ("", True)

    def test_nothing_found(self):
        assert resolve("X", [_never_found]) == ("", False)

    def test_no_lookups(self):
        assert resolve("X", []) == ("", False)
