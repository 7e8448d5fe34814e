"""Factory functions for creating tokenizers."""

from pathlib import Path
from typing import Literal, overload

from ._models.bpe import BPETokenizer
from .pattern import TokenPattern
from .pretokenize import DEFAULT_CACHE_CAPACITY

Pattern = Literal["default", "gpt2", "gpt4", "llama3", "qwen2"]


def get_pattern(name: Pattern) -> str:
    return TokenPattern.get(name)


@overload
def get_tokenizer(pattern: Pattern, *, cache_capacity: int = ...) -> BPETokenizer: ...


@overload
def get_tokenizer(*, custom_pattern: str, cache_capacity: int = ...) -> BPETokenizer: ...


def get_tokenizer(
    pattern: Pattern = "default",
    *,
    custom_pattern: str | None = None,
    cache_capacity: int = DEFAULT_CACHE_CAPACITY,
) -> BPETokenizer:
    """
    Create an empty tokenizer with a built-in or custom split pattern.

    :param pattern: Built-in pattern name (e.g., "default", "gpt2", "llama3").
                    Ignored if custom_pattern is provided.
    :param custom_pattern: Custom regex pattern string. Overrides pattern parameter.
    :param cache_capacity: Maximum number of memoized pre-tokenized texts.
    :return: Tokenizer holding only the special tokens.
    :raises PatternError: If the pattern name is unknown or custom_pattern is invalid regex.

    .. code-block:: python

        # Use built-in pattern
        tokenizer = get_tokenizer("gpt2")

        # Use custom pattern
        tokenizer = get_tokenizer(custom_pattern=r"\\w+|\\s+|[^\\w\\s]+")
    """
    # tokenizer initializer handles invalid custom patterns
    if custom_pattern is not None:
        return BPETokenizer(custom_pattern, cache_capacity=cache_capacity)

    # get() handles invalid pattern names
    return BPETokenizer(TokenPattern.get(pattern), cache_capacity=cache_capacity)


def from_pretrained(
    vocab_path: str | Path, merges_path: str | Path | None = None
) -> BPETokenizer:
    """
    Load a pre-trained tokenizer from disk.

    :param vocab_path: Path to the JSON vocabulary file.
    :param merges_path: Optional path to the merge-rule text file.
    :return: Loaded tokenizer using the default split pattern.
    :raises ModelLoadError: If a file doesn't exist or is malformed.

    .. code-block:: python

        tokenizer = from_pretrained("vocab.json", "merges.txt")
        tokens = tokenizer.encode("Hello world")
    """
    tokenizer = BPETokenizer()
    tokenizer.load(vocab_path, merges_path)
    return tokenizer
