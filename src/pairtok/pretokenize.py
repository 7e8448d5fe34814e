"""Regex pre-tokenization with a bounded memo cache."""

import hashlib
import logging
import threading
from typing import Final

import regex as re

from .pattern import TokenPattern, compile_pattern
from .types import Chunks

log = logging.getLogger(__name__)

DEFAULT_CACHE_CAPACITY: Final[int] = 1000


def fingerprint(text: str) -> str:
    """Return a content digest used as the cache key for ``text``."""
    # surrogatepass keeps lone surrogates from failing the digest
    data = text.encode("utf-8", errors="surrogatepass")
    return hashlib.blake2b(data, digest_size=16).hexdigest()


class PreTokenizer:
    """
    Split text into word, number, punctuation and whitespace chunks.

    Results are memoized by content fingerprint. Once the cache holds
    ``cache_capacity`` entries nothing new is inserted and nothing is evicted.
    """

    def __init__(
        self,
        pattern: str | None = None,
        cache_capacity: int = DEFAULT_CACHE_CAPACITY,
    ) -> None:
        self.pat: str = pattern if pattern is not None else TokenPattern.DEFAULT.value
        self.compiled_pat: re.Pattern[str] = compile_pattern(self.pat)
        self.cache_capacity = max(0, cache_capacity)
        self._cache: dict[str, Chunks] = {}
        self._lock = threading.Lock()
        self._warned_full = False

    def split(self, text: str) -> Chunks:
        """Return the ordered chunks of ``text``; empty text yields no chunks."""
        if text == "":
            return []

        key = fingerprint(text)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        chunks = [m.group(0) for m in self.compiled_pat.finditer(text) if m.group(0)]

        with self._lock:
            if len(self._cache) < self.cache_capacity:
                # another thread may have stored the same text meanwhile
                chunks = self._cache.setdefault(key, chunks)
            elif not self._warned_full:
                log.warning(
                    f"pre-tokenizer cache full ({self.cache_capacity} entries), "
                    "new texts will not be cached"
                )
                self._warned_full = True

        return chunks

    def cache_size(self) -> int:
        """Return the number of memoized texts."""
        with self._lock:
            return len(self._cache)
