"""Inspection of a generated frequency list."""

import math
from dataclasses import dataclass, field
from typing import Optional

from wordfreq import zipf_frequency

from core.frequency_list import FrequencyList, VerbEntry
from core.inflections import VERB_POS

WORDFREQ_LANG = "ja"

# Lemma placeholders MeCab emits for unknown words
UNKNOWN_LEMMAS = {"", "*"}


@dataclass
class LemmaTotal:
    """All surface forms counted for one dictionary form."""
    dictionary_form: str
    frequency: int = 0
    forms: list[tuple[str, int]] = field(default_factory=list)  # (surface, frequency)


def corpus_zipf(frequency: int, total: int) -> float:
    """Zipf score of a corpus count: log10 of occurrences per billion tokens.

    Same scale as wordfreq (1-7, ~7 for the most common words).
    Returns 0 for unseen words.
    """
    if frequency <= 0 or total <= 0:
        return 0.0
    return round(math.log10(frequency / total * 1e9), 2)


class FrequencyListAnalyzer:
    """Queries over a FrequencyList: top forms, lemma totals, inflection usage."""

    def __init__(self, freq_list: FrequencyList):
        self.freq_list = freq_list

    def top_entries(self, n: Optional[int] = 20, pos: Optional[str] = None) -> list[tuple[str, VerbEntry]]:
        """Most frequent surface forms, optionally for one POS only.

        Ties are ordered by surface form.
        """
        items = [
            (text, entry) for text, entry in self.freq_list.verbs.items()
            if pos is None or entry.pos == pos
        ]
        items.sort(key=lambda x: (-x[1].frequency, x[0]))
        return items[:n] if n is not None else items

    def top_inflections(self, n: Optional[int] = None) -> list[tuple[str, int]]:
        items = sorted(self.freq_list.inflections.items(), key=lambda x: (-x[1], x[0]))
        return items[:n] if n is not None else items

    def inflection_shares(self) -> dict[str, float]:
        """Fraction of all folded inflections taken by each suffix."""
        total = self.freq_list.total_inflections
        if total == 0:
            return {}
        return {suffix: count / total for suffix, count in self.top_inflections()}

    def pos_totals(self) -> dict[str, int]:
        """Token count per POS tag, most frequent first."""
        totals = {}
        for entry in self.freq_list.verbs.values():
            totals[entry.pos] = totals.get(entry.pos, 0) + entry.frequency
        return dict(sorted(totals.items(), key=lambda x: (-x[1], x[0])))

    def lemma_totals(self, pos: Optional[str] = VERB_POS, n: Optional[int] = None) -> list[LemmaTotal]:
        """
        Group surface forms by dictionary form.

        Args:
            pos: Only include surface forms with this POS (None = all)
            n: Return only the top-n lemmas

        Returns:
            LemmaTotal list sorted by total frequency (highest first);
            forms inside each lemma are sorted the same way
        """
        lemmas: dict[str, LemmaTotal] = {}
        for text, entry in self.top_entries(n=None, pos=pos):
            if entry.dictionary_form in UNKNOWN_LEMMAS:
                continue
            lemma = lemmas.get(entry.dictionary_form)
            if lemma is None:
                lemma = lemmas[entry.dictionary_form] = LemmaTotal(entry.dictionary_form)
            lemma.frequency += entry.frequency
            lemma.forms.append((text, entry.frequency))

        result = sorted(lemmas.values(), key=lambda l: (-l.frequency, l.dictionary_form))
        return result[:n] if n is not None else result

    def zipf_score(self, word: str) -> float:
        """
        Get wordfreq Zipf score for a Japanese word.

        Zipf scale: 1-7 (7 = most common). Returns 0 if word not found.
        """
        return zipf_frequency(word, WORDFREQ_LANG)

    def compare_with_wordfreq(self, n: int = 20, pos: Optional[str] = None) -> list[dict]:
        """
        Compare corpus Zipf scores of the top surface forms with wordfreq.

        A large positive "delta" means the form is much more common in this
        corpus than in general Japanese.

        Returns:
            List of {word, frequency, corpus_zipf, wordfreq_zipf, delta}
        """
        total = self.freq_list.total_tokens
        result = []
        for text, entry in self.top_entries(n=n, pos=pos):
            ours = corpus_zipf(entry.frequency, total)
            theirs = self.zipf_score(text)
            result.append({
                "word": text,
                "frequency": entry.frequency,
                "corpus_zipf": ours,
                "wordfreq_zipf": theirs,
                "delta": round(ours - theirs, 2),
            })
        return result

    def summary(self) -> dict:
        fl = self.freq_list
        return {
            "surface_forms": len(fl.verbs),
            "tokens": fl.total_tokens,
            "inflection_types": len(fl.inflections),
            "inflections": fl.total_inflections,
            "pos_tags": len(self.pos_totals()),
        }


def get_top_verbs(freq_list: FrequencyList, n: int = 20) -> list[str]:
    """
    Convenience function: the n most frequent verb surface forms.

    Args:
        freq_list: Loaded frequency list
        n: Number of forms

    Returns:
        Surface forms (strings only)
    """
    analyzer = FrequencyListAnalyzer(freq_list)
    return [text for text, _ in analyzer.top_entries(n=n, pos=VERB_POS)]
