#!/usr/bin/env python3
"""Japanese frequency list CLI.

Usage:
    python main.py build --corpus-dir Syosetu711K --workers 32
    python main.py build data/sample.jsonl -o frequency_list.json --workers 1
    python main.py validate frequency_list_ipadic.json
    python main.py show frequency_list_ipadic.json --pos 動詞 --top 30
    python main.py lemmas frequency_list_ipadic.json --top 50
"""

import argparse
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent))

from config import Config, DICTIONARY_LAYOUTS
from core.builder import FrequencyListBuilder
from core.frequency_list import FrequencyList, FrequencyListError, load_document, validate_document
from core.tokenizer import TokenizerError
from analysis.word_frequency import FrequencyListAnalyzer
from utils.progress import create_progress_callback, format_duration

load_dotenv()


def _fail(message: str):
    print(f"Error: {message}")
    sys.exit(1)


def _load(path: str) -> FrequencyList:
    try:
        return FrequencyList.load(path)
    except FrequencyListError as e:
        _fail(str(e))


def config_from_args(args) -> Config:
    """Environment (FREQ_*) first, then explicit CLI flags on top."""
    config = Config.from_env()

    overrides = {
        "corpus_dir": args.corpus_dir,
        "shard_prefix": args.shard_prefix,
        "first_shard": args.first_shard,
        "last_shard": args.last_shard,
        "layout": args.dictionary,
        "tagger_args": args.tagger_args,
        "workers": args.workers,
        "batch_size": args.batch_size,
        "output": args.output,
        "indent": args.indent,
    }
    for attr, value in overrides.items():
        if value is not None:
            setattr(config, attr, value)
    if args.pos:
        config.pos_filter = args.pos

    return config


def cmd_build(args):
    """Run MeCab over the corpus and write the frequency list."""
    try:
        config = config_from_args(args)
    except ValueError as e:
        _fail(str(e))

    builder = FrequencyListBuilder(config, on_progress=create_progress_callback(args.print_every))
    if args.inputs:
        paths = [Path(p) for p in args.inputs]
    else:
        try:
            paths = builder.default_paths()
        except ValueError as e:
            _fail(str(e))

    print(f"[build] {len(paths)} shard(s), dictionary: {config.layout}, workers: {config.workers}")
    if config.pos_filter:
        print(f"[build] POS filter: {', '.join(config.pos_filter)}")

    started = time.monotonic()
    try:
        freq_list = builder.build(paths)
    except (ValueError, TokenizerError) as e:
        _fail(str(e))

    try:
        output = freq_list.save(config.output_path, indent=config.indent)
    except OSError as e:
        _fail(f"Cannot write {config.output_path}: {e}")
    elapsed = format_duration(time.monotonic() - started)
    print(f"[build] {len(freq_list)} surface forms, {freq_list.total_tokens} tokens, "
          f"{freq_list.total_inflections} inflections in {elapsed}")
    print(f"[build] Saved: {output}")


def cmd_validate(args):
    """Check a frequency list file against the schema."""
    try:
        data = load_document(args.file)
    except FrequencyListError as e:
        _fail(str(e))

    errors = validate_document(data)
    if errors:
        print(f"{args.file}: {len(errors)} schema error(s)")
        for error in errors[:args.limit]:
            print(f"  {error}")
        if len(errors) > args.limit:
            print(f"  ... and {len(errors) - args.limit} more")
        sys.exit(1)

    freq_list = FrequencyList.from_dict(data)
    print(f"{args.file}: OK ({len(freq_list)} surface forms, "
          f"{len(freq_list.inflections)} inflection types)")


def cmd_show(args):
    """Print summary, top surface forms and inflection usage."""
    analyzer = FrequencyListAnalyzer(_load(args.file))

    print("Summary:")
    for key, value in analyzer.summary().items():
        print(f"  {key}: {value}")

    print("\nPOS:")
    for pos, total in list(analyzer.pos_totals().items())[:args.top]:
        print(f"  {pos}: {total}")

    label = f" ({args.pos})" if args.pos else ""
    print(f"\nTop {args.top} surface forms{label}:")
    for text, entry in analyzer.top_entries(n=args.top, pos=args.pos):
        print(f"  {text}  {entry.frequency}  [{entry.pos}] -> {entry.dictionary_form}")

    shares = analyzer.inflection_shares()
    print("\nInflections:")
    for suffix, count in analyzer.top_inflections(n=args.top):
        print(f"  {suffix}: {count} ({shares[suffix] * 100:.1f}%)")

    if args.wordfreq:
        print("\nCorpus vs wordfreq (Zipf):")
        for row in analyzer.compare_with_wordfreq(n=args.top, pos=args.pos):
            print(f"  {row['word']}: corpus {row['corpus_zipf']:.2f}, "
                  f"wordfreq {row['wordfreq_zipf']:.2f} ({row['delta']:+.2f})")


def cmd_lemmas(args):
    """Print total frequency per dictionary form."""
    analyzer = FrequencyListAnalyzer(_load(args.file))
    pos = None if args.all_pos else args.pos

    lemmas = analyzer.lemma_totals(pos=pos, n=args.top)
    print(f"Top {len(lemmas)} dictionary forms" + (f" ({pos})" if pos else "") + ":")
    for lemma in lemmas:
        forms = ", ".join(f"{text} {count}" for text, count in lemma.forms[:args.forms])
        more = f", +{len(lemma.forms) - args.forms}" if len(lemma.forms) > args.forms else ""
        print(f"  {lemma.dictionary_form}: {lemma.frequency}  ({forms}{more})")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Japanese word/inflection frequency list generator (MeCab)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # === build command ===
    build_parser = subparsers.add_parser("build", help="Count a JSONL corpus into a frequency list")
    build_parser.add_argument("inputs", nargs="*",
                              help="JSONL shard(s) to process (default: shard range in --corpus-dir)")
    build_parser.add_argument("--corpus-dir", default=None, help="Corpus directory (default: Syosetu711K)")
    build_parser.add_argument("--shard-prefix", default=None, help="Shard file prefix (default: syosetu711k)")
    build_parser.add_argument("--first-shard", type=int, default=None, help="First shard number (default: 0)")
    build_parser.add_argument("--last-shard", type=int, default=None, help="Last shard number, inclusive (default: 20)")
    build_parser.add_argument("-o", "--output", default=None,
                              help="Output JSON path (default: frequency_list_<dictionary>.json)")
    build_parser.add_argument("--dictionary", default=None, choices=DICTIONARY_LAYOUTS,
                              help="MeCab dictionary feature layout (default: ipadic)")
    build_parser.add_argument("--tagger-args", default=None,
                              help="Arguments for MeCab.Tagger, e.g. '-d /path/to/dic'")
    build_parser.add_argument("--workers", type=int, default=None,
                              help="Worker processes (default: 32, 1 = no process pool)")
    build_parser.add_argument("--batch-size", type=int, default=None, help="Texts per worker task (default: 256)")
    build_parser.add_argument("--pos", action="append", default=None,
                              help="Only count surface forms with this POS tag (repeatable)")
    build_parser.add_argument("--indent", type=int, default=None, help="Pretty-print JSON with this indent")
    build_parser.add_argument("--print-every", type=int, default=1000,
                              help="Print progress every N texts (default: 1000)")
    build_parser.set_defaults(func=cmd_build)

    # === validate command ===
    validate_parser = subparsers.add_parser("validate", help="Check a frequency list against the schema")
    validate_parser.add_argument("file", help="Frequency list JSON")
    validate_parser.add_argument("--limit", type=int, default=20, help="Max errors to print (default: 20)")
    validate_parser.set_defaults(func=cmd_validate)

    # === show command ===
    show_parser = subparsers.add_parser("show", help="Show top surface forms and inflections")
    show_parser.add_argument("file", help="Frequency list JSON")
    show_parser.add_argument("--top", type=int, default=20, help="Rows per section (default: 20)")
    show_parser.add_argument("--pos", default=None, help="Only show surface forms with this POS (e.g. 動詞)")
    show_parser.add_argument("--wordfreq", action="store_true",
                             help="Compare corpus Zipf scores with the wordfreq library")
    show_parser.set_defaults(func=cmd_show)

    # === lemmas command ===
    lemmas_parser = subparsers.add_parser("lemmas", help="Total frequency per dictionary form")
    lemmas_parser.add_argument("file", help="Frequency list JSON")
    lemmas_parser.add_argument("--top", type=int, default=20, help="Number of lemmas (default: 20)")
    lemmas_parser.add_argument("--pos", default="動詞", help="POS to group (default: 動詞)")
    lemmas_parser.add_argument("--all-pos", action="store_true", help="Group surface forms of every POS")
    lemmas_parser.add_argument("--forms", type=int, default=5, help="Surface forms listed per lemma (default: 5)")
    lemmas_parser.set_defaults(func=cmd_lemmas)

    return parser


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
