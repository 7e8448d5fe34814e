"""Tokenizer implementations for vocabulary-backed subword tokenization."""

from .base import Tokenizer
from .bpe import BPETokenizer


__all__ = ["Tokenizer", "BPETokenizer"]
