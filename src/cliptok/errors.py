"""Custom exception hierarchy for cliptok tokenization errors."""

import regex as re

from ._sanitise import render_subword
from .types import Token


class ClipTokError(Exception):
    """Base exception for all cliptok errors."""


class ModelLoadError(ClipTokError):
    """Raised when loading vocabulary or merge files fails."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
        line_no: int | None = None,
    ) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        if line_no is not None:
            extra += f"(line: {line_no}) "
        super().__init__(message + extra)
        self.model_path = model_path
        self.line_no = line_no


class UnknownTokenError(ClipTokError):
    """Raised when a merged subword has no vocabulary id."""

    def __init__(
        self,
        message: str,
        *,
        subword: str,
        position: int,
    ) -> None:
        super().__init__(
            f"{message} (subword: '{render_subword(subword)}') (position: {position})"
        )
        self.subword = subword
        self.position = position


class TokenizationError(ClipTokError):
    """Raised when a token sequence cannot be shaped into model input."""

    def __init__(self, message: str, *, length: int | None = None) -> None:
        extra = " "
        if length is not None:
            extra += f"(length: {length}) "
        super().__init__(message + extra)
        self.length = length


class VocabularyError(ClipTokError):
    """Raised when vocabulary operations fail."""

    def __init__(self, message: str, *, invalid_tok: Token | None = None) -> None:
        extra = " "
        # decoding: token not in model vocab
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        super().__init__(message + extra)
        self.invalid_tok = invalid_tok


class PatternError(ClipTokError):
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


class StrategyError(ClipTokError):
    """Raised when an unknown execution mode is requested."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available
