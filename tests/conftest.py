"""Shared fixtures: vocabulary and merge files written to a temp directory."""

import json

import pytest

import pairtok as ptok


SPECIALS = {
    "<|pad|>": 0,
    "<|startoftext|>": 1,
    "<|endoftext|>": 2,
    "<|unknown|>": 3,
}

CHARS = "helo wrdTqucikbnfxjmpsvtazyg!I'."


@pytest.fixture
def char_vocab() -> dict[str, int]:
    """Special tokens plus one token per character in CHARS."""
    vocab = dict(SPECIALS)
    for ch in CHARS:
        vocab.setdefault(ch, len(vocab))
    return vocab


@pytest.fixture
def write_files(tmp_path):
    """Return a helper writing a vocab dict (and optional merges text) to disk."""

    def _write(vocab: dict[str, int], merges: str | None = None):
        vocab_path = tmp_path / "vocab.json"
        vocab_path.write_text(json.dumps(vocab), encoding="utf-8")
        merges_path = None
        if merges is not None:
            merges_path = tmp_path / "merges.txt"
            merges_path.write_text(merges, encoding="utf-8")
        return vocab_path, merges_path

    return _write


@pytest.fixture
def char_tokenizer(char_vocab, write_files):
    """Tokenizer loaded with the character vocabulary and no merge rules."""
    vocab_path, merges_path = write_files(char_vocab, "")
    tok = ptok.BPETokenizer()
    tok.load(vocab_path, merges_path)
    return tok
