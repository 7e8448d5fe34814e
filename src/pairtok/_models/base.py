"""
Base tokenizer interface consumed by the model pipeline.
"""

import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from math import ceil
from pathlib import Path

from ..types import Token

log = logging.getLogger(__name__)


class Tokenizer(ABC):
    """
    Abstract base class for vocabulary-backed tokenizers.

    Defines the text <-> token id contract and the load/save entry points, and
    provides batch helpers on top of single-text encoding and decoding.
    """

    TOKENIZER_TYPE: str = "base"

    @abstractmethod
    def encode(self, text: str) -> list[Token]:
        """Encode text into a sequence of tokens."""
        ...

    @abstractmethod
    def decode(self, tokens: list[Token]) -> str:
        """Decode a sequence of tokens back into text."""
        ...

    @abstractmethod
    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        ...

    @abstractmethod
    def get_token_id(self, token: str) -> Token | None: ...

    @abstractmethod
    def get_token(self, token_id: Token) -> str | None: ...

    @abstractmethod
    def get_bos_token_id(self) -> Token:
        """Return the id that marks the start of a sequence."""
        ...

    @abstractmethod
    def get_eos_token_id(self) -> Token:
        """Return the id that marks the end of a sequence."""
        ...

    @abstractmethod
    def load(self, vocab_path: str | Path, merges_path: str | Path | None = None) -> None:
        """Load tokenizer state from a vocabulary file and optional merges file."""
        ...

    @abstractmethod
    def save(self, vocab_path: str | Path, merges_path: str | Path | None = None) -> None:
        """Persist tokenizer state to a vocabulary file and optional merges file."""
        ...

    def encode_batch(
        self, texts: list[str], num_workers: int | None = None
    ) -> list[list[Token]]:
        """
        Encode many texts, optionally across worker threads.

        :param texts: Text inputs to encode.
        :param num_workers: Thread count; ``None`` uses the CPU count and values
                            below 1 are treated as 1.
        :returns: Encoded token sequences in input order.
        """
        if not texts:
            return []

        if num_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = max(1, num_workers)  # "0" interpreted as 1 worker

        if workers == 1 or len(texts) == 1:
            return [self.encode(text) for text in texts]

        # group texts to reduce task-scheduling overhead when the input
        # contains many documents
        target_tasks = min(len(texts), workers * 2)
        group_size = max(1, ceil(len(texts) / target_tasks))
        text_groups = [
            texts[idx : idx + group_size] for idx in range(0, len(texts), group_size)
        ]
        log.debug(f"encoding {len(texts)} texts in {len(text_groups)} groups on {workers} workers")

        def encode_group(group: list[str]) -> list[list[Token]]:
            return [self.encode(text) for text in group]

        with ThreadPoolExecutor(max_workers=workers) as pool:
            encoded_groups = list(pool.map(encode_group, text_groups))
        return [encoded for group in encoded_groups for encoded in group]

    def decode_batch(self, token_batch: list[list[Token]]) -> list[str]:
        """Decode multiple token sequences, preserving order."""
        return [self.decode(tokens) for tokens in token_batch]
