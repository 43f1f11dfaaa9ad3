"""Reading Syosetu711K-style JSONL corpus shards.

Each line is one novel: {"text": "...", "meta": {...}}. Only the text is
used; the metadata (author, genre, ratings, ...) is ignored.
"""

import json
from pathlib import Path
from typing import Iterator, Union


class CorpusError(ValueError):
    """Raised for missing shards or malformed lines.

    Attributes:
        path: Shard path
        line: 1-based line number (0 when the whole file is at fault)
    """

    def __init__(self, path: Union[str, Path], message: str, line: int = 0):
        self.path = Path(path)
        self.line = line
        location = f"{self.path}:{line}" if line else str(self.path)
        super().__init__(f"{location}: {message}")


def shard_name(prefix: str, index: int) -> str:
    return f"{prefix}-{index:02d}.jsonl"


def shard_paths(corpus_dir: Union[str, Path], prefix: str, first: int, last: int) -> list[Path]:
    """Paths of shards first..last (inclusive), e.g. syosetu711k-00.jsonl."""
    if first > last:
        raise ValueError(f"Invalid shard range: {first}..{last}")
    corpus_dir = Path(corpus_dir)
    return [corpus_dir / shard_name(prefix, i) for i in range(first, last + 1)]


def iter_texts(path: Union[str, Path]) -> Iterator[str]:
    """Yield the text of every entry in a JSONL shard.

    Raises:
        CorpusError: If the file is missing, a line is not JSON, or an
                     entry has no string "text" field
    """
    path = Path(path)
    if not path.exists():
        raise CorpusError(path, "shard not found")

    with open(path, "r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as e:
                raise CorpusError(path, f"invalid JSON ({e.msg})", line_no) from e

            text = entry.get("text") if isinstance(entry, dict) else None
            if not isinstance(text, str):
                raise CorpusError(path, "entry has no string 'text' field", line_no)
            yield text


def read_texts(path: Union[str, Path]) -> list[str]:
    return list(iter_texts(path))
