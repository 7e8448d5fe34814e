"""Custom exception hierarchy for pairtok tokenization errors."""

import regex as re


class PairTokError(Exception):
    """Base exception for all pairtok errors."""


class ModelLoadError(PairTokError, ValueError):
    """Raised when a vocabulary or merges file cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        line: int | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if line is not None:
            extra += f"(line: {line}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.line = line


class ModelSaveError(PairTokError, OSError):
    """Raised when writing a vocabulary or merges file fails."""

    def __init__(self, message: str, *, model_path: str | None = None) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        super().__init__(message + extra)
        self.model_path = model_path


class UninitializedError(PairTokError, RuntimeError):
    """Raised when an operation needs a loaded vocabulary and none is present."""

    def __init__(self, message: str, *, vocab_size: int | None = None) -> None:
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size


class SpecialTokenError(PairTokError, LookupError):
    """Raised when a required special token is missing from the vocabulary."""

    def __init__(self, message: str, *, tokens: list[str] | None = None) -> None:
        """Initialize with the special tokens that were looked up."""
        if tokens:
            message = f"{message} (looked for: {', '.join(tokens)})"
        super().__init__(message)
        self.tokens = tokens


class PatternError(PairTokError, ValueError):
    """Raised when compiling and/or validating regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = " "
        if pattern:
            extra += f"(pattern: {pattern!r}) "
        if regex_err:
            extra += f"(reason: {regex_err}) "
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err
