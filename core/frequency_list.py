"""Frequency list data model: surface forms and inflection counts.

The on-disk format is a single JSON object:

    {
      "inflections": {"ました": 123, ...},
      "verbs": {"食べ": {"dictionary_form": "食べる", "frequency": 1492876, "pos": "動詞"}, ...}
    }

The file is written once per corpus run and treated as read-only afterwards.
"""

import json
from collections import Counter
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

INFLECTIONS_KEY = "inflections"
VERBS_KEY = "verbs"
TOP_LEVEL_KEYS = (INFLECTIONS_KEY, VERBS_KEY)
RECORD_FIELDS = ("dictionary_form", "frequency", "pos")


class FrequencyListError(ValueError):
    """Base error for frequency list loading and saving."""


class SchemaError(FrequencyListError):
    """Raised when a document does not match the frequency list schema.

    Attributes:
        path: JSON path of the offending value (e.g. "verbs.食べ.frequency")
    """

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


@dataclass
class VerbEntry:
    """Counted surface form with the lemma and POS it was first seen with."""
    dictionary_form: str
    frequency: int
    pos: str

    def to_dict(self) -> dict:
        return {
            "dictionary_form": self.dictionary_form,
            "frequency": self.frequency,
            "pos": self.pos,
        }


class JsonObject(dict):
    """Decoded JSON object that remembers keys seen more than once.

    json keeps the last value of a repeated key; the repeats are kept in
    duplicate_keys so they can be reported.
    """

    def __init__(self, pairs=()):
        super().__init__()
        self.duplicate_keys: list[str] = []
        for key, value in pairs:
            if key in self and key not in self.duplicate_keys:
                self.duplicate_keys.append(key)
            self[key] = value


def _duplicate_errors(path: str, obj) -> list[tuple[str, str]]:
    if path:
        return [(f"{path}.{key}", "duplicate key") for key in getattr(obj, "duplicate_keys", ())]
    return [("", f"duplicate top-level key '{key}'") for key in getattr(obj, "duplicate_keys", ())]


def _is_count(value) -> bool:
    # bool is an int subclass but never a valid count
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def find_schema_errors(data) -> list[tuple[str, str]]:
    """Collect every schema violation in a decoded JSON document.

    Returns:
        List of (json_path, problem) tuples, empty if the document is valid.
        The path is "" for problems with the document itself.
    """
    if not isinstance(data, dict):
        return [("", f"document must be an object, got {type(data).__name__}")]

    errors = _duplicate_errors("", data)
    for key in TOP_LEVEL_KEYS:
        if key not in data:
            errors.append(("", f"missing top-level key '{key}'"))
    for key in data:
        if key not in TOP_LEVEL_KEYS:
            errors.append(("", f"unexpected top-level key '{key}'"))

    if INFLECTIONS_KEY in data:
        inflections = data[INFLECTIONS_KEY]
        if not isinstance(inflections, dict):
            errors.append((INFLECTIONS_KEY, "must be an object"))
        else:
            errors.extend(_duplicate_errors(INFLECTIONS_KEY, inflections))
            for suffix, count in inflections.items():
                if not _is_count(count):
                    errors.append((
                        f"{INFLECTIONS_KEY}.{suffix}",
                        f"count must be a non-negative integer, got {count!r}",
                    ))

    if VERBS_KEY in data:
        verbs = data[VERBS_KEY]
        if not isinstance(verbs, dict):
            errors.append((VERBS_KEY, "must be an object"))
        else:
            errors.extend(_duplicate_errors(VERBS_KEY, verbs))
            for surface, record in verbs.items():
                errors.extend(_record_errors(f"{VERBS_KEY}.{surface}", record))

    return errors


def _record_errors(path: str, record) -> list[tuple[str, str]]:
    if not isinstance(record, dict):
        return [(path, f"record must be an object, got {type(record).__name__}")]

    errors = _duplicate_errors(path, record)
    missing = [f for f in RECORD_FIELDS if f not in record]
    extra = [f for f in record if f not in RECORD_FIELDS]
    if missing:
        errors.append((path, f"missing field(s) {', '.join(missing)}"))
    if extra:
        errors.append((path, f"unexpected field(s) {', '.join(extra)}"))

    for field_name in ("dictionary_form", "pos"):
        if field_name in record and not isinstance(record[field_name], str):
            errors.append((f"{path}.{field_name}", f"must be a string, got {record[field_name]!r}"))
    if "frequency" in record and not _is_count(record["frequency"]):
        errors.append((
            f"{path}.frequency",
            f"must be a non-negative integer, got {record['frequency']!r}",
        ))
    return errors


def validate_document(data) -> list[str]:
    """Human-readable form of find_schema_errors()."""
    return [f"{path}: {message}" if path else message for path, message in find_schema_errors(data)]


def _sorted_items(counts: dict, key=lambda v: v) -> list:
    """Order by descending count, then by key, so output is reproducible."""
    return sorted(counts.items(), key=lambda item: (-key(item[1]), item[0]))


class FrequencyList:
    """Aggregated counts for one corpus run."""

    def __init__(
        self,
        inflections: Optional[dict[str, int]] = None,
        verbs: Optional[dict[str, VerbEntry]] = None,
    ):
        self.inflections: Counter = Counter(inflections or {})
        self.verbs: dict[str, VerbEntry] = {text: replace(entry) for text, entry in (verbs or {}).items()}

    def __len__(self) -> int:
        return len(self.verbs)

    def __contains__(self, surface: str) -> bool:
        return surface in self.verbs

    def __getitem__(self, surface: str) -> VerbEntry:
        return self.verbs[surface]

    def __eq__(self, other) -> bool:
        if not isinstance(other, FrequencyList):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def add_token(self, text: str, pos: str, dictionary_form: str, count: int = 1):
        """Count a surface form.

        The first occurrence fixes pos and dictionary_form; later ones
        only add to the frequency.
        """
        entry = self.verbs.get(text)
        if entry is None:
            self.verbs[text] = VerbEntry(dictionary_form, count, pos)
        else:
            entry.frequency += count

    def add_inflection(self, suffix: str, count: int = 1):
        self.inflections[suffix] += count

    def merge(self, other: "FrequencyList") -> "FrequencyList":
        """Add another list's counts into this one (in place)."""
        for text, entry in other.verbs.items():
            self.add_token(text, entry.pos, entry.dictionary_form, entry.frequency)
        for suffix, count in other.inflections.items():
            self.add_inflection(suffix, count)
        return self

    @property
    def total_tokens(self) -> int:
        return sum(entry.frequency for entry in self.verbs.values())

    @property
    def total_inflections(self) -> int:
        return sum(self.inflections.values())

    def to_dict(self) -> dict:
        return {
            INFLECTIONS_KEY: dict(_sorted_items(self.inflections)),
            VERBS_KEY: {
                text: entry.to_dict()
                for text, entry in _sorted_items(self.verbs, key=lambda e: e.frequency)
            },
        }

    @classmethod
    def from_dict(cls, data) -> "FrequencyList":
        """Build from a decoded JSON document.

        Raises:
            SchemaError: On the first schema violation found
        """
        errors = find_schema_errors(data)
        if errors:
            raise SchemaError(*errors[0])

        verbs = {
            surface: VerbEntry(record["dictionary_form"], record["frequency"], record["pos"])
            for surface, record in data[VERBS_KEY].items()
        }
        return cls(inflections=data[INFLECTIONS_KEY], verbs=verbs)

    def save(self, path: Union[str, Path], indent: Optional[int] = None) -> Path:
        """Write the list as UTF-8 JSON (non-ASCII kept as-is)."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=indent)
        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> "FrequencyList":
        """Read and validate a frequency list file.

        Raises:
            FrequencyListError: If the file is missing or not valid JSON
            SchemaError: If the JSON does not match the schema
        """
        return cls.from_dict(load_document(path))


def load_document(path: Union[str, Path]):
    """Decode a JSON file without schema validation."""
    path = Path(path)
    if not path.exists():
        raise FrequencyListError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f, object_pairs_hook=JsonObject)
    except json.JSONDecodeError as e:
        raise FrequencyListError(f"{path}: invalid JSON ({e})") from e
    except UnicodeDecodeError as e:
        raise FrequencyListError(f"{path}: not valid UTF-8 ({e})") from e
    except OSError as e:
        raise FrequencyListError(f"Cannot read {path}: {e}") from e
