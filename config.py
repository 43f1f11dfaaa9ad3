"""Default configuration for the frequency list generator."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from core.tokenizer import LAYOUTS


@dataclass
class Config:
    """Generator configuration."""

    # Corpus: {corpus_dir}/{shard_prefix}-{NN}.jsonl for NN in first..last
    corpus_dir: str = "Syosetu711K"
    shard_prefix: str = "syosetu711k"
    first_shard: int = 0
    last_shard: int = 20

    # MeCab
    layout: str = "ipadic"  # ipadic, unidic
    tagger_args: Optional[str] = None  # None = bundled ipadic / system mecabrc

    # Counting
    pos_filter: list[str] = field(default_factory=list)  # empty = every POS

    # Processing
    workers: int = 32
    batch_size: int = 256  # texts per worker task

    # Output
    output: Optional[str] = None
    indent: Optional[int] = None

    @property
    def output_path(self) -> str:
        return self.output or default_output_name(self.layout)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build config from FREQ_* environment variables over the defaults.

        Raises:
            ValueError: If a numeric variable is not an integer
        """
        env = os.environ if environ is None else environ
        config = cls()

        for name, attr in ENV_STRINGS.items():
            if env.get(name):
                setattr(config, attr, env[name])
        for name, attr in ENV_INTS.items():
            if env.get(name):
                setattr(config, attr, _parse_int(name, env[name]))
        if env.get("FREQ_POS"):
            config.pos_filter = [p.strip() for p in env["FREQ_POS"].split(",") if p.strip()]

        return config


def default_output_name(layout: str) -> str:
    return f"frequency_list_{layout}.json"


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from None


ENV_STRINGS = {
    "FREQ_CORPUS_DIR": "corpus_dir",
    "FREQ_SHARD_PREFIX": "shard_prefix",
    "FREQ_LAYOUT": "layout",
    "FREQ_TAGGER_ARGS": "tagger_args",
    "FREQ_OUTPUT": "output",
}

ENV_INTS = {
    "FREQ_FIRST_SHARD": "first_shard",
    "FREQ_LAST_SHARD": "last_shard",
    "FREQ_WORKERS": "workers",
    "FREQ_BATCH_SIZE": "batch_size",
}

# Supported MeCab dictionary layouts
DICTIONARY_LAYOUTS = list(LAYOUTS)
