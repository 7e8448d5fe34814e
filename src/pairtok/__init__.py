"""pairtok: BPE subword tokenization with pre-trained vocabularies."""

from ._models.base import Tokenizer
from ._models.bpe import BPETokenizer
from .errors import (
    ModelLoadError,
    ModelSaveError,
    PairTokError,
    PatternError,
    SpecialTokenError,
    UninitializedError,
)
from .factory import from_pretrained, get_pattern, get_tokenizer
from .pattern import TokenPattern, list_patterns
from .pretokenize import PreTokenizer
from .vocab import SpecialToken, Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pairtok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "Tokenizer",
    "BPETokenizer",
    "PreTokenizer",
    "Vocabulary",
    "SpecialToken",
    "TokenPattern",
    "PairTokError",
    "ModelLoadError",
    "ModelSaveError",
    "UninitializedError",
    "SpecialTokenError",
    "PatternError",
    "get_tokenizer",
    "get_pattern",
    "from_pretrained",
    "list_patterns",
]
