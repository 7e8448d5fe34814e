"""Unit tests for BPETokenizer encode/decode, special tokens, and load/save."""

import json
import logging

import pytest

import pairtok as ptok
from pairtok.errors import (
    ModelLoadError,
    PatternError,
    SpecialTokenError,
    UninitializedError,
)


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def low_tokenizer(write_files):
    """Tokenizer with merges l+o -> lo and lo+w -> low."""
    vocab = {
        "<|pad|>": 0,
        "<|startoftext|>": 1,
        "<|endoftext|>": 2,
        "<|unknown|>": 3,
        "l": 4,
        "o": 5,
        "w": 6,
        "lo": 7,
        "low": 8,
    }
    vocab_path, merges_path = write_files(vocab, "#version: 0.2\nl o\nlo w\n")
    return ptok.from_pretrained(vocab_path, merges_path)


# Construction
# ---------------------------------------------------------------------------


def test_not_initialized_on_construction():
    """A fresh tokenizer holds only the four special tokens."""
    tok = ptok.BPETokenizer()
    assert not tok.is_initialized()
    assert tok.vocab_size() == 4
    assert [tok.get_token(i) for i in range(4)] == [
        "<|pad|>",
        "<|startoftext|>",
        "<|endoftext|>",
        "<|unknown|>",
    ]


def test_get_tokenizer_with_named_pattern():
    """Named patterns resolve to the built-in regex."""
    tok = ptok.get_tokenizer("gpt2")
    assert tok.pretokenizer.pat == ptok.TokenPattern.GPT2.value


def test_get_tokenizer_unknown_pattern_raises():
    """Unknown pattern names raise PatternError."""
    with pytest.raises(PatternError):
        ptok.get_tokenizer("nope")


def test_invalid_custom_pattern_raises():
    """An uncompilable custom pattern raises PatternError."""
    with pytest.raises(PatternError):
        ptok.get_tokenizer(custom_pattern="(unclosed")


# Encode-decode round-trip
# ---------------------------------------------------------------------------


def test_encode_decode_roundtrip_basic(char_tokenizer):
    """Encode then decode returns the original text."""
    text = "hello world"
    tokens = char_tokenizer.encode(text)
    assert tokens
    assert char_tokenizer.decode(tokens) == text


def test_encode_decode_roundtrip_complex(char_tokenizer):
    """Punctuation and contractions survive a round-trip."""
    text = "The quick brown fox jumps over the lazy dog! It's amazing."
    tokens = char_tokenizer.encode(text)
    assert tokens
    assert char_tokenizer.decode(tokens) == text


def test_empty_string(char_tokenizer):
    """Empty string encodes to empty list and decodes back."""
    assert char_tokenizer.encode("") == []
    assert char_tokenizer.decode([]) == ""


def test_one_token_per_character_without_merges(char_tokenizer, char_vocab):
    """Without merge rules every character maps to its own id."""
    assert char_tokenizer.encode("hello") == [char_vocab[c] for c in "hello"]


# Merges
# ---------------------------------------------------------------------------


def test_merges_apply_in_rank_order(low_tokenizer):
    """Both merges apply so 'low' becomes a single token."""
    assert low_tokenizer.encode("low") == [8]
    assert low_tokenizer.decode([8]) == "low"


def test_merges_do_not_cross_chunks(low_tokenizer):
    """'lo' and 'w' in separate chunks are not merged."""
    # "lo" is a word chunk, "!w" a punctuation-led word chunk
    tokens = low_tokenizer.encode("lo!w")
    assert tokens[0] == 7
    assert 8 not in tokens


def test_merges_property(low_tokenizer):
    """Loaded rules are exposed in rank order."""
    assert low_tokenizer.merges == [("l", "o"), ("lo", "w")]


# Unknown tokens
# ---------------------------------------------------------------------------


def test_unknown_symbol_maps_to_unk(char_tokenizer):
    """Characters outside the vocabulary encode to the unknown token."""
    unk = char_tokenizer.get_token_id("<|unknown|>")
    assert char_tokenizer.encode("h#") == [char_tokenizer.get_token_id("h"), unk]


def test_unknown_token_decodes_verbatim(char_tokenizer):
    """The unknown token text is kept in decoded output."""
    unk = char_tokenizer.get_token_id("<|unknown|>")
    assert char_tokenizer.decode([unk]) == "<|unknown|>"


def test_literal_space_symbols_do_not_match_marker_tokens(write_files):
    """Encoding looks up literal-space symbols, not marker-prefixed tokens."""
    vocab = {"<|unknown|>": 0, "<|pad|>": 1, "Ġ": 2, "w": 3, "Ġw": 4}
    vocab_path, merges_path = write_files(vocab, "Ġ w\n")
    tok = ptok.from_pretrained(vocab_path, merges_path)
    assert tok.encode(" w") == [0]


# Decode
# ---------------------------------------------------------------------------


def test_decode_skips_control_tokens(char_tokenizer):
    """Start, end and pad markers are dropped from decoded text."""
    h = char_tokenizer.get_token_id("h")
    assert char_tokenizer.decode([1, h, 0, 2]) == "h"


def test_decode_skips_unknown_ids(char_tokenizer):
    """Ids outside the vocabulary are silently skipped."""
    h = char_tokenizer.get_token_id("h")
    assert char_tokenizer.decode([h, 9999, h]) == "hh"


def test_decode_replaces_word_boundary_marker(write_files):
    """Marker characters in token text decode to spaces."""
    vocab = {"<|pad|>": 0, "<|unknown|>": 1, "hello": 2, "Ġworld": 3}
    vocab_path, _ = write_files(vocab)
    tok = ptok.from_pretrained(vocab_path)
    assert tok.decode([2, 3]) == "hello world"


# Special tokens
# ---------------------------------------------------------------------------


def test_bos_eos_ids_on_fresh_tokenizer():
    """Bootstrap ids are 1 for start and 2 for end of sequence."""
    tok = ptok.BPETokenizer()
    assert tok.get_bos_token_id() == 1
    assert tok.get_eos_token_id() == 2


def test_bos_falls_back_to_eos(write_files):
    """Without a start marker the end marker doubles as BOS."""
    vocab = {"a": 0, "<|endoftext|>": 1}
    vocab_path, _ = write_files(vocab)
    tok = ptok.from_pretrained(vocab_path)
    assert tok.get_bos_token_id() == 1
    assert tok.get_eos_token_id() == 1


def test_missing_markers_raise(write_files):
    """Neither marker loaded raises SpecialTokenError."""
    vocab_path, _ = write_files({"a": 0, "b": 1})
    tok = ptok.from_pretrained(vocab_path)
    with pytest.raises(SpecialTokenError):
        tok.get_bos_token_id()
    with pytest.raises(SpecialTokenError):
        tok.get_eos_token_id()


# Load
# ---------------------------------------------------------------------------


def test_load_from_file(char_vocab, write_files):
    """Loading keeps the file's ids and reports its size."""
    vocab_path, merges_path = write_files(char_vocab, "[]")
    tok = ptok.BPETokenizer()
    tok.load(vocab_path, merges_path)
    assert tok.vocab_size() == len(char_vocab)
    assert tok.is_initialized()
    assert tok.get_token_id("h") == char_vocab["h"]


@pytest.mark.parametrize(
    "extra, expected_added",
    [
        ({"<|pad|>": 3, "<|unknown|>": 4}, 0),
        ({"<|pad|>": 3}, 1),
        ({}, 2),
    ],
)
def test_load_appends_missing_pad_and_unk(write_files, extra, expected_added):
    """Pad and unknown tokens are appended when the file lacks them."""
    base = {"a": 0, "b": 1, "c": 2}
    vocab = {**base, **extra}
    vocab_path, _ = write_files(vocab)
    tok = ptok.from_pretrained(vocab_path)
    assert tok.vocab_size() == len(vocab) + expected_added
    assert tok.get_token_id("<|pad|>") is not None
    assert tok.get_token_id("<|unknown|>") is not None
    assert tok.get_token_id("<|startoftext|>") is None


def test_appended_ids_do_not_collide_with_gapped_ids(write_files):
    """Missing specials get ids past the largest id in the file."""
    vocab_path, _ = write_files({"a": 0, "b": 7})
    tok = ptok.from_pretrained(vocab_path)
    assert tok.get_token_id("<|pad|>") == 8
    assert tok.get_token_id("<|unknown|>") == 9
    assert tok.get_token(7) == "b"


def test_load_nonexistent_file_raises(tmp_path):
    """Missing vocabulary file raises ModelLoadError."""
    tok = ptok.BPETokenizer()
    with pytest.raises(ModelLoadError):
        tok.load(tmp_path / "file.json", tmp_path / "file.json")
    with pytest.raises(ValueError):
        tok.load(tmp_path / "file.json")


def test_load_nonexistent_merges_raises(char_vocab, write_files, tmp_path):
    """A given but missing merges file raises before anything is loaded."""
    vocab_path, _ = write_files(char_vocab)
    tok = ptok.BPETokenizer()
    with pytest.raises(ModelLoadError):
        tok.load(vocab_path, tmp_path / "missing.txt")
    assert tok.vocab_size() == 4


def test_load_invalid_json_raises(tmp_path):
    """Malformed JSON raises ModelLoadError chained to the decode error."""
    path = tmp_path / "vocab.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ModelLoadError) as exc_info:
        ptok.BPETokenizer().load(path)
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


@pytest.mark.parametrize("content", ['["a", "b"]', '{"a": "1"}', '{"a": -1}', '{"a": true}'])
def test_load_rejects_bad_vocab_shape(tmp_path, content):
    """Non-object files and non-integer ids are rejected."""
    path = tmp_path / "vocab.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ModelLoadError):
        ptok.BPETokenizer().load(path)


def test_failed_load_keeps_previous_state(low_tokenizer, tmp_path):
    """A failed load leaves the previously loaded vocabulary and merges intact."""
    size = low_tokenizer.vocab_size()
    with pytest.raises(ModelLoadError):
        low_tokenizer.load(tmp_path / "missing.json")

    bad_merges = tmp_path / "bad_merges.txt"
    bad_merges.write_bytes(b"\xff\xfe a b\n")
    other_vocab = tmp_path / "other.json"
    other_vocab.write_text('{"x": 0}', encoding="utf-8")
    with pytest.raises(ModelLoadError):
        low_tokenizer.load(other_vocab, bad_merges)

    assert low_tokenizer.vocab_size() == size
    assert low_tokenizer.encode("low") == [8]


def test_load_without_merges_keeps_rules(low_tokenizer, write_files):
    """Reloading only a vocabulary keeps the current merge rules."""
    vocab_path, _ = write_files({"l": 0, "o": 1, "w": 2, "lo": 3, "low": 4})
    low_tokenizer.load(vocab_path)
    assert low_tokenizer.merges == [("l", "o"), ("lo", "w")]
    assert low_tokenizer.encode("low") == [4]


def test_reload_with_merges_replaces_rules(write_files):
    """A load with a merges file drops every previously loaded rank."""
    vocab = {
        "<|pad|>": 0,
        "<|startoftext|>": 1,
        "<|endoftext|>": 2,
        "<|unknown|>": 3,
        "a": 4,
        "b": 5,
        "c": 6,
        "ab": 7,
        "bc": 8,
    }
    vocab_path, merges_path = write_files(vocab, "a b\n")
    tok = ptok.from_pretrained(vocab_path, merges_path)
    assert tok.encode("ab") == [7]

    merges_path.write_text("b c\n", encoding="utf-8")
    tok.load(vocab_path, merges_path)
    assert tok.merges == [("b", "c")]
    assert tok.encode("ab") == [4, 5]
    assert tok.encode("abc") == [4, 8]


def test_failed_load_is_not_logged_as_completed(tmp_path, caplog):
    """Load timing is reported as a completion only when load succeeds."""
    with caplog.at_level(logging.DEBUG, logger="pairtok"):
        with pytest.raises(ModelLoadError):
            ptok.BPETokenizer().load(tmp_path / "missing.json")
    messages = [r.getMessage() for r in caplog.records]
    assert not any("completed in" in m for m in messages)
    assert any("failed after" in m for m in messages)


def test_successful_load_logs_completion(char_vocab, write_files, caplog):
    vocab_path, _ = write_files(char_vocab)
    with caplog.at_level(logging.INFO, logger="pairtok"):
        ptok.BPETokenizer().load(vocab_path)
    assert any("load completed in" in r.getMessage() for r in caplog.records)


# Save
# ---------------------------------------------------------------------------


def test_save_requires_initialization(tmp_path):
    """Saving before loading raises and writes nothing."""
    tok = ptok.BPETokenizer()
    vocab_path = tmp_path / "vocab.json"
    merges_path = tmp_path / "merges.json"
    with pytest.raises(UninitializedError, match="must be loaded from a pre-trained model"):
        tok.save(vocab_path, merges_path)
    assert not vocab_path.exists()
    assert not merges_path.exists()


def test_save_writes_json(low_tokenizer, tmp_path):
    """Vocabulary and merges are written as JSON."""
    vocab_path = tmp_path / "out" / "vocab.json"
    vocab_path.parent.mkdir()
    merges_path = tmp_path / "out" / "merges.json"
    low_tokenizer.save(vocab_path, merges_path)

    saved_vocab = json.loads(vocab_path.read_text(encoding="utf-8"))
    assert saved_vocab["low"] == 8
    assert len(saved_vocab) == low_tokenizer.vocab_size()
    assert json.loads(merges_path.read_text(encoding="utf-8")) == [["l", "o"], ["lo", "w"]]


def test_saved_vocab_reloads(low_tokenizer, tmp_path):
    """A saved vocabulary loads back to the same mapping."""
    vocab_path = tmp_path / "vocab.json"
    low_tokenizer.save(vocab_path)
    reloaded = ptok.from_pretrained(vocab_path)
    assert reloaded.vocab_size() == low_tokenizer.vocab_size()
    assert reloaded.get_token_id("low") == 8


# Batch encode/decode
# ---------------------------------------------------------------------------


def test_encode_batch_matches_single(char_tokenizer):
    """Threaded batch encoding matches per-text encoding, in order."""
    texts = ["hello", "world!", "It's lazy.", "", "the dog"] * 4
    expected = [char_tokenizer.encode(t) for t in texts]
    assert char_tokenizer.encode_batch(texts, num_workers=4) == expected
    assert char_tokenizer.decode_batch(expected) == texts


def test_encode_batch_empty(char_tokenizer):
    """Empty batch returns empty list."""
    assert char_tokenizer.encode_batch([]) == []
