"""MeCab tokenization for frequency counting."""

import re
import string
from dataclasses import dataclass
from typing import Optional

import ipadic
import MeCab

# MeCab node types (mecab.h)
BOS_NODE = 2
EOS_NODE = 3

# Column of the dictionary (base) form in each dictionary's feature CSV.
# ipadic:  品詞,品詞細分類1,細分類2,細分類3,活用型,活用形,原形,読み,発音
# unidic:  pos1..pos4,cType,cForm,lForm,lemma,orth,pron,orthBase,...
DICTIONARY_FORM_FIELD = {
    "ipadic": 6,
    "unidic": 10,
}
LAYOUTS = tuple(DICTIONARY_FORM_FIELD)

# Segments are tokenized separately; separators never reach MeCab
EXTRA_SEPARATORS = "，…‥。！？"
SEPARATOR_PATTERN = re.compile(
    r"[\s" + re.escape(string.punctuation) + EXTRA_SEPARATORS + r"]+"
)


class TokenizerError(RuntimeError):
    """Raised when the MeCab tagger cannot be created."""


@dataclass(frozen=True)
class Token:
    """One morpheme as reported by MeCab."""
    text: str
    pos: str
    dictionary_form: str


def split_segments(text: str) -> list[str]:
    """Split text on whitespace, ASCII punctuation and sentence marks.

    Empty segments are dropped.
    """
    return [part for part in SEPARATOR_PATTERN.split(text) if part]


def require_layout(layout: str) -> str:
    if layout not in DICTIONARY_FORM_FIELD:
        raise ValueError(
            f"Unsupported dictionary layout: '{layout}'. Supported: {', '.join(LAYOUTS)}"
        )
    return layout


def parse_feature(feature: str, layout: str = "ipadic") -> tuple[str, str]:
    """Extract (pos, dictionary_form) from a MeCab feature string.

    Missing columns (unknown words often carry fewer) give "".
    """
    fields = feature.split(",")
    index = DICTIONARY_FORM_FIELD[require_layout(layout)]
    dictionary_form = fields[index] if index < len(fields) else ""
    return fields[0], dictionary_form


class MecabTokenizer:
    """Thin wrapper around MeCab.Tagger producing Token objects."""

    def __init__(self, layout: str = "ipadic", tagger_args: Optional[str] = None):
        """
        Args:
            layout: Feature layout of the installed dictionary (ipadic, unidic)
            tagger_args: Arguments for MeCab.Tagger. None uses the bundled
                         ipadic package for the ipadic layout and the
                         system mecabrc otherwise.

        Raises:
            ValueError: If layout is not supported
            TokenizerError: If MeCab fails to initialize
        """
        self.layout = require_layout(layout)
        if tagger_args is None:
            tagger_args = ipadic.MECAB_ARGS if layout == "ipadic" else ""
        self.tagger_args = tagger_args

        try:
            self._tagger = MeCab.Tagger(tagger_args)
        except RuntimeError as e:
            raise TokenizerError(
                f"MeCab initialization failed (args: '{tagger_args}'): {e}"
            ) from e

    def tokenize(self, text: str) -> list[Token]:
        """Tokenize text, skipping the BOS/EOS sentinel nodes."""
        return tokens_from_nodes(self._tagger.parseToNode(text), self.layout)


def tokens_from_nodes(node, layout: str = "ipadic") -> list[Token]:
    """Walk a MeCab node chain into Token objects."""
    tokens = []
    while node:
        if node.stat not in (BOS_NODE, EOS_NODE):
            pos, dictionary_form = parse_feature(node.feature, layout)
            tokens.append(Token(node.surface, pos, dictionary_form))
        node = node.next
    return tokens


# One tagger per process, reused across batches
_TOKENIZERS = {}


def get_tokenizer(layout: str = "ipadic", tagger_args: Optional[str] = None) -> MecabTokenizer:
    """Get tokenizer for layout/args (lazy-loaded, cached per process)."""
    key = (layout, tagger_args)
    if key not in _TOKENIZERS:
        _TOKENIZERS[key] = MecabTokenizer(layout, tagger_args)
    return _TOKENIZERS[key]
