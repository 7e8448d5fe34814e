"""Benchmark encode() latency on randomly generated strings.

Loads a vocabulary/merges pair and prints the first encoding followed by a
summary row:
  Samples | Length | Vocab Size | Merge Rules | Avg Encode | Throughput
"""

import argparse
import random
import string
import time
from pathlib import Path

from pairtok import BPETokenizer, from_pretrained

ALPHABET = string.digits + string.ascii_letters + " "


def generate_strings(n: int, length: int, seed: int) -> list[str]:
    """Return ``n`` random strings of ``length`` characters from ALPHABET."""
    rng = random.Random(seed)
    return ["".join(rng.choices(ALPHABET, k=length)) for _ in range(n)]


def time_encodes(tokenizer: BPETokenizer, texts: list[str]) -> tuple[list[float], int]:
    """Encode each text, returning per-call durations (secs) and total tokens."""
    durations: list[float] = []
    total_tokens = 0
    for i, text in enumerate(texts):
        start = time.perf_counter()
        tokens = tokenizer.encode(text)
        durations.append(time.perf_counter() - start)
        total_tokens += len(tokens)
        if i == 0:
            print(f"Tokens: {', '.join(map(str, tokens))}")
    return durations, total_tokens


def positive_int(value: str) -> int:
    """Argparse type accepting integers of at least 1."""
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    """Return the command line parser for the benchmark."""
    parser = argparse.ArgumentParser(description="Benchmark pairtok encode().")
    parser.add_argument("--vocab", type=Path, default=Path("bpe-vocabulary.json"))
    parser.add_argument("--merges", type=Path, default=Path("bpe-merges.txt"))
    parser.add_argument(
        "--samples",
        type=positive_int,
        default=2000,
        help="Number of random strings to encode (default: 2000).",
    )
    parser.add_argument(
        "--length",
        type=positive_int,
        default=150,
        help="Characters per random string (default: 150).",
    )
    parser.add_argument("--seed", type=int, default=0)
    return parser


def main() -> None:
    """Run the encode benchmark and print a summary row."""
    args = build_parser().parse_args()

    tokenizer = from_pretrained(args.vocab, args.merges)
    texts = generate_strings(args.samples, args.length, args.seed)
    durations, total_tokens = time_encodes(tokenizer, texts)

    avg_ms = sum(durations) / len(durations) * 1000
    tokens_per_sec = total_tokens / sum(durations)

    print()
    header = (
        f"| {'Samples':8} | {'Length':6} | {'Vocab Size':10} | {'Merge Rules':11} "
        f"| {'Avg Encode':12} | {'Throughput':20} |"
    )
    sep = (
        f"| {'-' * 8} | {'-' * 6} | {'-' * 10} | {'-' * 11} "
        f"| {'-' * 12} | {'-' * 20} |"
    )
    row = (
        f"| {args.samples:8,} | {args.length:6} | {tokenizer.vocab_size():10,} "
        f"| {len(tokenizer.merges):11,} | {f'{avg_ms:.3f} ms':12} "
        f"| {f'{tokens_per_sec:,.0f} tokens/sec':20} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
