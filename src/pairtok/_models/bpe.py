"""BPE tokenizer that applies a pre-trained vocabulary and merge list."""

import logging
from pathlib import Path
from typing import override

from .._bpe import bpe_merge
from .._decorators import measure_time
from .._io import read_merges, read_vocab, require_file, write_json
from .._sanitise import unmark
from ..errors import SpecialTokenError, UninitializedError
from ..pretokenize import DEFAULT_CACHE_CAPACITY, PreTokenizer
from ..types import MergePair, MergeRanks, Token
from ..vocab import SpecialToken, Vocabulary
from .base import Tokenizer

log = logging.getLogger(__name__)

# tokens dropped from decoded text; UNK is kept verbatim
_SILENT_TOKENS: frozenset[str] = frozenset(
    {SpecialToken.BOS.value, SpecialToken.EOS.value, SpecialToken.PAD.value}
)


class BPETokenizer(Tokenizer):
    """
    Tokenizer that splits text with a regex pattern and applies ranked merges.

    Starts with only the four special tokens; call :meth:`load` with a
    pre-trained vocabulary before encoding real text.
    """

    TOKENIZER_TYPE = "bpe"

    def __init__(
        self,
        pattern: str | None = None,
        cache_capacity: int = DEFAULT_CACHE_CAPACITY,
    ) -> None:
        """
        Initialize with the bootstrap special tokens and no merge rules.

        :param pattern: Split pattern; defaults to ``TokenPattern.DEFAULT``.
        :param cache_capacity: Maximum number of memoized pre-tokenized texts.
        :raises PatternError: If ``pattern`` is not a valid regex.
        """
        super().__init__()
        self.pretokenizer = PreTokenizer(pattern, cache_capacity=cache_capacity)
        self.vocab = Vocabulary()
        # ordered merge rules as loaded
        self._merges: list[MergePair] = []
        # concatenated pair -> rank
        self._ranks: MergeRanks = {}

    @property
    def merges(self) -> list[MergePair]:
        """Loaded merge rules in rank order."""
        return list(self._merges)

    @override
    def encode(self, text: str) -> list[Token]:
        """
        Encode text into a sequence of tokens.

        Symbols missing from the vocabulary map to the unknown token. If the
        unknown token itself is missing they are dropped.
        """
        if text == "":
            return []

        unk_id = self.vocab.id_of(SpecialToken.UNK.value)
        tokens: list[Token] = []
        for chunk in self.pretokenizer.split(text):
            for symbol in bpe_merge(chunk, self._ranks):
                tok = self.vocab.id_of(symbol)
                if tok is None:
                    tok = unk_id
                if tok is not None:
                    tokens.append(tok)
        return tokens

    @override
    def decode(self, tokens: list[Token]) -> str:
        """
        Decode tokens into text.

        Unknown ids and the pad, start and end markers are skipped. Word-boundary
        markers in the joined text become spaces.
        """
        parts: list[str] = []
        for tok in tokens:
            token = self.vocab.token_of(tok)
            if token is None or token in _SILENT_TOKENS:
                continue
            parts.append(token)
        return unmark("".join(parts))

    @override
    def vocab_size(self) -> int:
        return self.vocab.size()

    @override
    def get_token_id(self, token: str) -> Token | None:
        return self.vocab.id_of(token)

    @override
    def get_token(self, token_id: Token) -> str | None:
        return self.vocab.token_of(token_id)

    def is_initialized(self) -> bool:
        """True once a vocabulary beyond the special tokens is present."""
        return self.vocab.is_initialized()

    @override
    def get_bos_token_id(self) -> Token:
        """
        Return the start-of-sequence id.

        GPT-2 style vocabularies only carry ``<|endoftext|>``, which then
        doubles as the start marker.

        :raises SpecialTokenError: If neither marker is in the vocabulary.
        """
        return self._resolve_special(SpecialToken.BOS, SpecialToken.EOS)

    @override
    def get_eos_token_id(self) -> Token:
        """
        Return the end-of-sequence id.

        :raises SpecialTokenError: If the marker is not in the vocabulary.
        """
        return self._resolve_special(SpecialToken.EOS)

    def _resolve_special(self, *candidates: SpecialToken) -> Token:
        """Return the id of the first candidate present in the vocabulary."""
        for candidate in candidates:
            tok = self.vocab.id_of(candidate.value)
            if tok is not None:
                return tok
        raise SpecialTokenError(
            "special token not found in vocabulary",
            tokens=[candidate.value for candidate in candidates],
        )

    @override
    @measure_time
    def load(self, vocab_path: str | Path, merges_path: str | Path | None = None) -> None:
        """
        Load a vocabulary and, optionally, merge rules.

        Both files are fully parsed before any state changes, so a failed load
        leaves the previous vocabulary and merges in place. Without
        ``merges_path`` the current merge rules are kept.

        :param vocab_path: JSON object mapping token strings to ids.
        :param merges_path: Text file with one merge pair per line.
        :raises ModelLoadError: If a file is missing, unreadable or malformed.
        """
        vocab_file = require_file(vocab_path, "vocabulary")
        merges_file = require_file(merges_path, "merges") if merges_path is not None else None

        log.info(f"loading vocabulary from {vocab_file}")
        vocab = Vocabulary.from_mapping(read_vocab(vocab_file))

        merges, ranks = self._merges, self._ranks
        if merges_file is not None:
            log.info(f"loading merge rules from {merges_file}")
            merges, ranks = read_merges(merges_file)

        # swap in one step after everything parsed
        self.vocab, self._merges, self._ranks = vocab, merges, ranks

        log.info(
            f"tokenizer loaded successfully: {self.vocab.size()} tokens, "
            f"{len(self._merges)} merge rules"
        )

    @override
    def save(self, vocab_path: str | Path, merges_path: str | Path | None = None) -> None:
        """
        Save the vocabulary and merge rules as pretty-printed JSON.

        The merges file is written as a JSON list of pairs, not in the text
        format read by :meth:`load`.

        :raises UninitializedError: If no pre-trained vocabulary was loaded.
        :raises ModelSaveError: If either file cannot be written.
        """
        if not self.is_initialized():
            raise UninitializedError(
                "Tokenizer must be loaded from a pre-trained model before saving",
                vocab_size=self.vocab.size(),
            )
        log.info(f"saving tokenizer to {vocab_path}")
        write_json(vocab_path, self.vocab.as_dict())
        if merges_path is not None:
            write_json(merges_path, [list(pair) for pair in self._merges])
        log.info("tokenizer saved successfully")
