"""Tests for the frequency list schema, loader and writer."""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.frequency_list import (
    FrequencyList, FrequencyListError, SchemaError, VerbEntry, load_document, validate_document,
)

EXAMPLE = {
    "inflections": {"ました": 10, "ない": 4},
    "verbs": {
        "食べ": {"dictionary_form": "食べる", "frequency": 1492876, "pos": "動詞"},
        "食べました": {"dictionary_form": "食べる", "frequency": 7, "pos": "動詞"},
    },
}


class TestCounting:
    """Test adding and merging counts."""

    def test_first_occurrence_fixes_record(self):
        """Later occurrences only add to the frequency."""
        fl = FrequencyList()
        fl.add_token("行っ", "動詞", "行く")
        fl.add_token("行っ", "動詞", "行う")
        fl.add_token("行っ", "動詞", "行う", count=3)

        assert fl["行っ"] == VerbEntry("行く", 5, "動詞")

    def test_merge_sums_counts(self):
        a = FrequencyList()
        a.add_token("見", "動詞", "見る")
        a.add_inflection("た", 2)

        b = FrequencyList()
        b.add_token("見", "名詞", "見")
        b.add_token("猫", "名詞", "猫", count=4)
        b.add_inflection("た")
        b.add_inflection("ない")

        a.merge(b)

        assert a["見"] == VerbEntry("見る", 2, "動詞")
        assert a["猫"].frequency == 4
        assert a.inflections == {"た": 3, "ない": 1}
        assert a.total_tokens == 6
        assert a.total_inflections == 4

    def test_entries_are_copied(self):
        """Counting never changes VerbEntry objects owned by the caller."""
        entry = VerbEntry("見る", 1, "動詞")
        fl = FrequencyList(verbs={"見": entry})
        fl.add_token("見", "動詞", "見る", count=2)
        fl.merge(FrequencyList(verbs={"見": entry}))

        assert fl["見"].frequency == 4
        assert entry == VerbEntry("見る", 1, "動詞")

    def test_empty_list(self):
        fl = FrequencyList()
        assert len(fl) == 0
        assert fl.to_dict() == {"inflections": {}, "verbs": {}}


class TestSchema:
    """Test schema validation of decoded documents."""

    def test_example_record(self):
        """The documented example loads with its exact field values."""
        fl = FrequencyList.from_dict(EXAMPLE)
        entry = fl["食べ"]
        assert entry.dictionary_form == "食べる"
        assert entry.frequency == 1492876
        assert entry.pos == "動詞"
        assert fl.inflections["ました"] == 10

    def test_valid_document_has_no_errors(self):
        assert validate_document(EXAMPLE) == []

    def test_missing_top_level_key(self):
        errors = validate_document({"verbs": {}})
        assert errors == ["missing top-level key 'inflections'"]

    def test_unexpected_top_level_key(self):
        errors = validate_document({"verbs": {}, "inflections": {}, "nouns": {}})
        assert errors == ["unexpected top-level key 'nouns'"]

    def test_not_an_object(self):
        assert validate_document([]) == ["document must be an object, got list"]

    def test_negative_and_bool_counts(self):
        errors = validate_document({"verbs": {}, "inflections": {"た": -1, "て": True}})
        assert len(errors) == 2
        assert errors[0].startswith("inflections.た:")
        assert errors[1].startswith("inflections.て:")

    def test_record_fields(self):
        """Records need exactly dictionary_form, frequency and pos."""
        doc = {
            "inflections": {},
            "verbs": {
                "a": {"dictionary_form": "a", "frequency": 1},
                "b": {"dictionary_form": "b", "frequency": 1, "pos": "名詞", "reading": "ビー"},
                "c": {"dictionary_form": 3, "frequency": "1", "pos": "名詞"},
                "d": 5,
            },
        }
        errors = validate_document(doc)
        assert "verbs.a: missing field(s) pos" in errors
        assert "verbs.b: unexpected field(s) reading" in errors
        assert any(e.startswith("verbs.c.dictionary_form:") for e in errors)
        assert any(e.startswith("verbs.c.frequency:") for e in errors)
        assert "verbs.d: record must be an object, got int" in errors

    def test_from_dict_raises_with_path(self):
        doc = {"inflections": {}, "verbs": {"食べ": {"dictionary_form": "食べる", "frequency": -5, "pos": "動詞"}}}
        with pytest.raises(SchemaError) as exc:
            FrequencyList.from_dict(doc)
        assert exc.value.path == "verbs.食べ.frequency"

    def test_schema_error_is_value_error(self):
        with pytest.raises(ValueError):
            FrequencyList.from_dict({"verbs": {}})


class TestFiles:
    """Test saving and loading JSON files."""

    def test_save_writes_utf8_sorted(self, tmp_path):
        fl = FrequencyList()
        fl.add_token("ある", "動詞", "ある", count=2)
        fl.add_token("いる", "動詞", "いる", count=5)
        fl.add_token("あい", "名詞", "愛", count=2)
        fl.add_inflection("た", 1)
        fl.add_inflection("ない", 3)

        path = fl.save(tmp_path / "out" / "list.json")
        raw = path.read_text(encoding="utf-8")

        assert "いる" in raw  # not \u-escaped
        data = json.loads(raw)
        assert list(data) == ["inflections", "verbs"]
        assert list(data["verbs"]) == ["いる", "あい", "ある"]
        assert list(data["inflections"]) == ["ない", "た"]

    def test_load_round_trip(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps(EXAMPLE, ensure_ascii=False), encoding="utf-8")

        fl = FrequencyList.load(path)
        assert fl == FrequencyList.from_dict(EXAMPLE)

        fl.save(path, indent=2)
        assert FrequencyList.load(path) == fl

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FrequencyListError, match="File not found"):
            FrequencyList.load(tmp_path / "nope.json")

    def test_load_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"verbs": {', encoding="utf-8")
        with pytest.raises(FrequencyListError, match="invalid JSON"):
            FrequencyList.load(path)

    def test_load_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"inflections": {}, "verbs": {"\xff": 1}}')
        with pytest.raises(FrequencyListError, match="not valid UTF-8"):
            FrequencyList.load(path)

    def test_load_directory(self, tmp_path):
        with pytest.raises(FrequencyListError, match="Cannot read"):
            FrequencyList.load(tmp_path)


DUPLICATES = (
    '{"inflections": {"た": 1, "た": 2},'
    ' "verbs": {'
    '"食べ": {"dictionary_form": "食べる", "frequency": 1, "pos": "動詞"},'
    ' "食べ": {"dictionary_form": "食う", "frequency": 9, "pos": "名詞", "pos": "動詞"}}}'
)


class TestDuplicateKeys:
    """Keys repeated in the file are schema errors, not silently overwritten."""

    def test_validate_reports_paths(self, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text(DUPLICATES, encoding="utf-8")

        errors = validate_document(load_document(path))

        assert errors == [
            "inflections.た: duplicate key",
            "verbs.食べ: duplicate key",
            "verbs.食べ.pos: duplicate key",
        ]

    def test_load_raises(self, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text(DUPLICATES, encoding="utf-8")

        with pytest.raises(SchemaError) as exc:
            FrequencyList.load(path)
        assert exc.value.path == "inflections.た"

    def test_duplicate_top_level_key(self, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text('{"inflections": {}, "verbs": {}, "verbs": {}}', encoding="utf-8")

        assert validate_document(load_document(path)) == ["duplicate top-level key 'verbs'"]

    def test_plain_dicts_have_no_duplicates(self):
        assert validate_document(json.loads(json.dumps(EXAMPLE))) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
