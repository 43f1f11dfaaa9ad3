"""Corpus-to-frequency-list pipeline.

text -> segments -> MeCab tokens -> folded inflections -> counts.
Shards are processed one after another; the texts of a shard are counted
in batches on a process pool, and partial lists are merged in batch order
so the first-seen POS/lemma of each surface form is reproducible.
"""

import re
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, Optional

from config import Config
from core.corpus import read_texts, shard_paths
from core.frequency_list import FrequencyList
from core.inflections import fold_inflections
from core.tokenizer import get_tokenizer, split_segments

# Surface forms made only of kanji / kana. The ranges are wider than the
# Han/Hiragana/Katakana script properties: they also take the prolonged sound
# mark ー, the middle dot ・, voicing marks ゛゜ and half-width ｰﾞﾟ, so loanwords
# such as コーヒー are counted.
JAPANESE_WORD_PATTERN = re.compile(
    "["
    "々〇〻"      # iteration marks, ideographic zero
    "ぁ-ゟ"           # hiragana
    "゠-ヿ"           # katakana, incl. ー and ・
    "ㇰ-ㇿ"           # katakana phonetic extensions
    "㐀-䶿"           # CJK extension A
    "一-鿿"           # CJK unified ideographs
    "豈-﫿"           # CJK compatibility ideographs
    "ｦ-ﾟ"           # half-width katakana
    "\U00020000-\U0003134f"   # CJK extensions B-H
    "]+"
)

ProgressFn = Callable[[str, int, int], None]


def is_japanese_word(text: str) -> bool:
    """True if text is non-empty and entirely kanji/kana."""
    return JAPANESE_WORD_PATTERN.fullmatch(text) is not None


def count_text(text: str, tokenizer, pos_filter: Optional[Iterable[str]] = None) -> FrequencyList:
    """Count surface forms and inflections of one text.

    Args:
        text: Raw text (may contain punctuation, newlines, ASCII)
        tokenizer: Object with tokenize(str) -> list[Token]
        pos_filter: Only count surface forms with these POS tags
                    (inflection counts are never filtered)
    """
    allowed = set(pos_filter) if pos_filter else None
    result = FrequencyList()

    for segment in split_segments(text):
        tokens, suffix_counts = fold_inflections(tokenizer.tokenize(segment))

        for token in tokens:
            if allowed is not None and token.pos not in allowed:
                continue
            if is_japanese_word(token.text):
                result.add_token(token.text, token.pos, token.dictionary_form)

        for suffix, count in suffix_counts.items():
            result.add_inflection(suffix, count)

    return result


def count_texts(texts: Iterable[str], tokenizer, pos_filter: Optional[Iterable[str]] = None) -> FrequencyList:
    result = FrequencyList()
    for text in texts:
        result.merge(count_text(text, tokenizer, pos_filter))
    return result


def _count_batch(args) -> tuple[int, int, FrequencyList]:
    """Count one batch in a worker process. Designed for ProcessPoolExecutor."""
    index, texts, layout, tagger_args, pos_filter, tokenizer_factory = args
    tokenizer = tokenizer_factory(layout, tagger_args)
    return index, len(texts), count_texts(texts, tokenizer, pos_filter)


def make_batches(items: list, batch_size: int) -> list[list]:
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")
    return [items[i:i + batch_size] for i in range(0, len(items), batch_size)]


class FrequencyListBuilder:
    """Builds a FrequencyList from corpus shards."""

    def __init__(
        self,
        config: Optional[Config] = None,
        tokenizer=None,
        on_progress: Optional[ProgressFn] = None,
        tokenizer_factory: Optional[Callable] = None,
    ):
        """
        Args:
            config: Generator configuration (defaults to Config())
            tokenizer: Tokenizer for in-process counting (workers == 1 only)
            on_progress: Callback(step_name, done, total), counted in texts
            tokenizer_factory: Picklable (layout, tagger_args) -> tokenizer,
                               called once per batch in worker processes
                               (defaults to get_tokenizer)
        """
        self.config = config or Config()
        self.tokenizer = tokenizer
        self.on_progress = on_progress
        self.tokenizer_factory = tokenizer_factory or get_tokenizer
        self._executor: Optional[ProcessPoolExecutor] = None

    def _report(self, step_name: str, done: int, total: int):
        if self.on_progress:
            self.on_progress(step_name, done, total)

    def _get_tokenizer(self):
        if self.tokenizer is None:
            self.tokenizer = self.tokenizer_factory(self.config.layout, self.config.tagger_args)
        return self.tokenizer

    def default_paths(self) -> list[Path]:
        cfg = self.config
        return shard_paths(cfg.corpus_dir, cfg.shard_prefix, cfg.first_shard, cfg.last_shard)

    def build_shard(self, path, step_name: str = "") -> FrequencyList:
        """Count every text of one JSONL shard."""
        texts = read_texts(path)
        step_name = step_name or Path(path).name
        batches = make_batches(texts, self.config.batch_size)
        total = len(texts)
        self._report(step_name, 0, total)

        if self._executor is None:
            return self._build_inline(batches, step_name, total)
        return self._build_parallel(batches, step_name, total)

    def _build_inline(self, batches: list[list[str]], step_name: str, total: int) -> FrequencyList:
        tokenizer = self._get_tokenizer()
        result = FrequencyList()
        done = 0
        for batch in batches:
            result.merge(count_texts(batch, tokenizer, self.config.pos_filter))
            done += len(batch)
            self._report(step_name, done, total)
        return result

    def _build_parallel(self, batches: list[list[str]], step_name: str, total: int) -> FrequencyList:
        cfg = self.config
        futures = [
            self._executor.submit(
                _count_batch,
                (i, batch, cfg.layout, cfg.tagger_args, cfg.pos_filter, self.tokenizer_factory),
            )
            for i, batch in enumerate(batches)
        ]

        partials = []
        done = 0
        for future in as_completed(futures):
            index, size, partial = future.result()
            partials.append((index, partial))
            done += size
            self._report(step_name, done, total)

        # Merge in batch order, not completion order
        partials.sort(key=lambda x: x[0])
        result = FrequencyList()
        for _, partial in partials:
            result.merge(partial)
        return result

    def build(self, paths: Optional[list] = None) -> FrequencyList:
        """Count all shards (config range by default) into one list."""
        paths = [Path(p) for p in paths] if paths else self.default_paths()
        result = FrequencyList()

        if self.config.workers <= 1:
            for i, path in enumerate(paths):
                result.merge(self.build_shard(path, _step_name(i, len(paths))))
            return result

        with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
            self._executor = executor
            try:
                for i, path in enumerate(paths):
                    result.merge(self.build_shard(path, _step_name(i, len(paths))))
            finally:
                self._executor = None
        return result


def _step_name(index: int, count: int) -> str:
    return f"{index + 1:02d}/{count:02d}"
