"""Shared fixtures: a dictionary-free stand-in for MecabTokenizer."""

import json
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.tokenizer import Token

# Segment -> ipadic-style analysis (surface, pos, dictionary form)
ANALYSES = {
    "彼は食べませんでした": [
        ("彼", "名詞", "彼"),
        ("は", "助詞", "は"),
        ("食べ", "動詞", "食べる"),
        ("ませ", "助動詞", "ます"),
        ("ん", "助動詞", "ん"),
        ("でし", "助動詞", "です"),
        ("た", "助動詞", "た"),
    ],
    "走った": [
        ("走っ", "動詞", "走る"),
        ("た", "助動詞", "た"),
    ],
    "食べた": [
        ("食べ", "動詞", "食べる"),
        ("た", "助動詞", "た"),
    ],
    "食べる": [
        ("食べる", "動詞", "食べる"),
    ],
    "コーヒーを飲まなかった": [
        ("コーヒー", "名詞", "コーヒー"),
        ("を", "助詞", "を"),
        ("飲ま", "動詞", "飲む"),
        ("なかっ", "助動詞", "ない"),
        ("た", "助動詞", "た"),
    ],
    # かけ is first a noun, later the stem of かける
    "かけを": [
        ("かけ", "名詞", "かけ"),
        ("を", "助詞", "を"),
    ],
    "かけろ": [
        ("かけ", "動詞", "かける"),
        ("ろ", "助動詞", "ろ"),
    ],
}


class FakeTokenizer:
    """Returns canned analyses; unknown segments become one 名詞 token."""

    def __init__(self, analyses=None):
        self.analyses = ANALYSES if analyses is None else analyses
        self.calls = []

    def tokenize(self, text):
        self.calls.append(text)
        if text in self.analyses:
            return [Token(*t) for t in self.analyses[text]]
        return [Token(text, "名詞", text)]


@pytest.fixture
def fake_tokenizer():
    return FakeTokenizer()


@pytest.fixture
def write_shard(tmp_path):
    """Write texts as a JSONL shard (with novel metadata) and return its path."""

    def _write(name, texts):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            for i, text in enumerate(texts):
                entry = {"text": text, "meta": {"id": f"n{i:04d}", "title": "テスト", "length": len(text)}}
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        return path

    return _write


def fake_tokenizer_factory(layout, tagger_args):
    """Module-level so worker processes can unpickle it."""
    return FakeTokenizer()
