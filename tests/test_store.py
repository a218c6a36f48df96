"""
Test Rule Store Module
=====================

Unit tests for loading rule files and hot reload.
"""

import json
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from rules.engine import Rule, match_rule
from rules.store import (
    RuleStore, load_rules, reload_rules, write_default_rules, DEFAULT_RULES
)
from core.exceptions import MalformedRules, SourceUnavailable, ResponderError

GREET = {"intent": "greet", "patterns": ["hello", "hi"], "responses": ["Hello, {name}!"]}
FAREWELL = {"intent": "farewell", "patterns": ["bye"], "responses": ["Bye, {name}!"]}


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def rules_file(tmp_path):
    return write_json(tmp_path / "rules.json", [GREET, FAREWELL])


class TestLoadRules:
    """Tests for load_rules."""

    def test_load_json(self, rules_file):
        rules = load_rules(rules_file)

        assert isinstance(rules, tuple)
        assert [r.intent for r in rules] == ["greet", "farewell"]
        assert rules[0].patterns == ("hello", "hi")

    def test_load_yaml_list(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "- intent: greet\n"
            "  patterns: [hello]\n"
            "  responses: ['Hi {name}']\n",
            encoding="utf-8"
        )
        rules = load_rules(path)
        assert rules == (Rule("greet", ("hello",), ("Hi {name}",)),)

    def test_load_yaml_rules_mapping(self, tmp_path):
        path = tmp_path / "rules.yml"
        path.write_text(
            "rules:\n"
            "  - intent: greet\n"
            "    patterns: [hello]\n"
            "    responses: [Hi]\n",
            encoding="utf-8"
        )
        assert load_rules(path)[0].intent == "greet"

    def test_accepts_empty_and_duplicate(self, tmp_path):
        path = write_json(tmp_path / "rules.json", [
            {"intent": "greet", "patterns": [], "responses": []},
            {"intent": "greet", "patterns": [""], "responses": [""]},
        ])
        rules = load_rules(path)
        assert len(rules) == 2

    def test_empty_list(self, tmp_path):
        assert load_rules(write_json(tmp_path / "rules.json", [])) == ()

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceUnavailable) as exc_info:
            load_rules(tmp_path / "missing.json")
        assert "missing.json" in exc_info.value.details["path"]

    def test_directory_is_unavailable(self, tmp_path):
        with pytest.raises(SourceUnavailable):
            load_rules(tmp_path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(MalformedRules):
            load_rules(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: [unclosed", encoding="utf-8")
        with pytest.raises(MalformedRules):
            load_rules(path)

    @pytest.mark.parametrize("name,content", [
        ("rules.json", "[" * 100000 + "]" * 100000),
        ("rules.json", "[" + "9" * 5000 + "]"),
        ("rules.yaml", "[" * 5000 + "]" * 5000),
    ])
    def test_decoder_limits_are_malformed(self, tmp_path, name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")

        with pytest.raises(MalformedRules) as exc_info:
            load_rules(path)

        assert exc_info.value.details["path"] == str(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(MalformedRules):
            load_rules(path)

    @pytest.mark.parametrize("data", [
        {"intent": "greet"},
        "greet",
        42,
        None,
    ])
    def test_top_level_not_a_list(self, tmp_path, data):
        with pytest.raises(MalformedRules):
            load_rules(write_json(tmp_path / "rules.json", data))

    def test_bad_record_reports_index_and_path(self, tmp_path):
        path = write_json(tmp_path / "rules.json", [
            GREET,
            {"intent": "broken", "patterns": "bye", "responses": []},
        ])

        with pytest.raises(MalformedRules) as exc_info:
            load_rules(path)

        details = exc_info.value.details
        assert details["index"] == 1
        assert details["field"] == "patterns"
        assert details["path"] == str(path)

    def test_reload_rules_reads_again(self, rules_file):
        first = load_rules(rules_file)
        write_json(rules_file, [FAREWELL])
        assert reload_rules(rules_file) != first


class TestRuleStore:
    """Tests for RuleStore."""

    def test_starts_empty(self, rules_file):
        store = RuleStore(rules_file)
        assert store.rules == ()
        assert len(store) == 0

    def test_load(self, rules_file):
        store = RuleStore(rules_file)
        store.load()
        assert store.intents() == ["greet", "farewell"]
        assert len(store) == 2

    def test_load_failure_propagates(self, tmp_path):
        store = RuleStore(tmp_path / "missing.json")
        with pytest.raises(SourceUnavailable):
            store.load()
        assert store.rules == ()

    def test_reload_success(self, rules_file):
        store = RuleStore(rules_file)
        store.load()

        write_json(rules_file, [FAREWELL])
        store.reload()

        assert store.intents() == ["farewell"]

    def test_reload_malformed_keeps_previous(self, rules_file):
        store = RuleStore(rules_file)
        before = store.load()

        rules_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(MalformedRules):
            store.reload()

        assert store.rules is before
        assert match_rule("hello", store.rules).intent == "greet"

    def test_reload_missing_keeps_previous(self, rules_file):
        store = RuleStore(rules_file)
        before = store.load()

        rules_file.unlink()
        with pytest.raises(ResponderError):
            store.reload()

        assert store.rules is before

    def test_reload_from_new_source(self, rules_file, tmp_path):
        other = write_json(tmp_path / "other.json", [FAREWELL])
        store = RuleStore(rules_file)
        store.load()

        store.reload(other)

        assert store.intents() == ["farewell"]
        assert store.source == other

    def test_failed_reload_keeps_source(self, rules_file, tmp_path):
        store = RuleStore(rules_file)
        store.load()

        with pytest.raises(SourceUnavailable):
            store.reload(tmp_path / "missing.json")

        assert store.source == rules_file

    def test_snapshot_survives_reload(self, rules_file):
        store = RuleStore(rules_file)
        snapshot = store.load()

        write_json(rules_file, [FAREWELL])
        store.reload()

        assert [r.intent for r in snapshot] == ["greet", "farewell"]

    def test_replace(self, rules_file):
        store = RuleStore(rules_file)
        store.replace([Rule("x", ["x"], ["X"])])
        assert store.intents() == ["x"]


class TestDefaultRules:
    """Tests for the starter rules file."""

    @pytest.mark.parametrize("name", ["rules.json", "rules.yaml"])
    def test_write_and_load(self, tmp_path, name):
        path = tmp_path / "nested" / name

        assert write_default_rules(path) is True
        rules = load_rules(path)

        assert [r.intent for r in rules] == [r["intent"] for r in DEFAULT_RULES]

    def test_does_not_overwrite(self, rules_file):
        assert write_default_rules(rules_file) is False
        assert load_rules(rules_file)[0].intent == "greet"
        assert len(load_rules(rules_file)) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
