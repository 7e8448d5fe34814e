"""
Bidirectional token <-> id table with special-token bookkeeping.
"""

import logging
from enum import Enum
from collections.abc import Mapping
from typing import Final

from .types import Token

log = logging.getLogger(__name__)


class SpecialToken(str, Enum):
    """Reserved token strings, in the order they are bootstrapped."""

    PAD = "<|pad|>"
    BOS = "<|startoftext|>"
    EOS = "<|endoftext|>"
    UNK = "<|unknown|>"


# a vocabulary holding only these is not a real, loaded vocabulary
N_BOOTSTRAP_TOKENS: Final[int] = len(SpecialToken)


class Vocabulary:
    """
    Append-only mapping between token strings and integer ids.

    A fresh vocabulary holds the four special tokens with ids 0-3. Ids are never
    reassigned or removed; new tokens receive the next free id.
    """

    def __init__(self, bootstrap: bool = True) -> None:
        self._token_to_id: dict[str, Token] = {}
        self._id_to_token: dict[Token, str] = {}
        self._next_id: Token = 0
        if bootstrap:
            for tok in SpecialToken:
                self.add_token(tok.value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Token]) -> "Vocabulary":
        """
        Adopt an externally assigned token -> id mapping.

        Ids are trusted as given. If several tokens share an id, the last one
        in iteration order owns the reverse lookup. PAD and UNK are appended
        when missing; BOS and EOS are left to the caller.
        """
        vocab = cls(bootstrap=False)
        vocab._token_to_id = dict(mapping)
        vocab._id_to_token = {tok_id: token for token, tok_id in mapping.items()}
        if len(vocab._id_to_token) != len(vocab._token_to_id):
            log.warning(
                f"{len(vocab._token_to_id) - len(vocab._id_to_token)} tokens share an id "
                "with another token; reverse lookups keep the last one"
            )
        vocab._next_id = max(vocab._id_to_token, default=-1) + 1
        vocab.ensure_tokens(SpecialToken.PAD.value, SpecialToken.UNK.value)
        return vocab

    def add_token(self, token: str) -> Token:
        """Insert ``token`` if new and return its id."""
        tok_id = self._token_to_id.get(token)
        if tok_id is not None:
            return tok_id
        tok_id = self._next_id
        self._token_to_id[token] = tok_id
        self._id_to_token[tok_id] = token
        self._next_id += 1
        return tok_id

    def ensure_tokens(self, *tokens: str) -> None:
        """Append each of ``tokens`` that is not already present."""
        for token in tokens:
            if token not in self._token_to_id:
                log.debug(f"adding missing token {token!r} with id {self._next_id}")
                self.add_token(token)

    def id_of(self, token: str) -> Token | None:
        return self._token_to_id.get(token)

    def token_of(self, tok_id: Token) -> str | None:
        return self._id_to_token.get(tok_id)

    def size(self) -> int:
        """Return the number of distinct tokens."""
        return len(self._token_to_id)

    def is_initialized(self) -> bool:
        """True once the table holds more than the bootstrap special tokens."""
        return self.size() > N_BOOTSTRAP_TOKENS

    def as_dict(self) -> dict[str, Token]:
        """Return a copy of the token -> id mapping."""
        return dict(self._token_to_id)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_id
