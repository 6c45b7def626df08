"""Tokenizer configuration and environment overrides."""

from dataclasses import dataclass
import logging
import os
from typing import Final

from ._bpe import END_OF_WORD
from .pattern import BOS, EOS

VOCAB_FILENAME: Final[str] = "vocab.json"
MERGES_FILENAME: Final[str] = "merges.txt"
CONTEXT_LENGTH: Final[int] = 77

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenizerConfig:
    """Constants a tokenizer instance is built around."""

    bos: str = BOS
    eos: str = EOS
    end_of_word: str = END_OF_WORD
    vocab_filename: str = VOCAB_FILENAME
    merges_filename: str = MERGES_FILENAME
    context_length: int = CONTEXT_LENGTH

    def __post_init__(self) -> None:
        if self.context_length < 2:
            raise ValueError(
                f"context_length must hold at least BOS and EOS, got {self.context_length}"
            )

    @classmethod
    def from_env(cls) -> "TokenizerConfig":
        """
        Build a config with overrides from the environment.

        Recognised variables: ``CLIPTOK_VOCAB_FILENAME``,
        ``CLIPTOK_MERGES_FILENAME`` and ``CLIPTOK_CONTEXT_LENGTH``.
        """
        overrides: dict[str, str | int] = {}
        if vocab := os.environ.get("CLIPTOK_VOCAB_FILENAME", "").strip():
            overrides["vocab_filename"] = vocab
        if merges := os.environ.get("CLIPTOK_MERGES_FILENAME", "").strip():
            overrides["merges_filename"] = merges
        if ctx := os.environ.get("CLIPTOK_CONTEXT_LENGTH", "").strip():
            try:
                overrides["context_length"] = int(ctx)
            except ValueError:
                raise ValueError(f"CLIPTOK_CONTEXT_LENGTH is not a number: {ctx}")
        if overrides:
            log.debug(f"config overrides from environment: {overrides}")
        return cls(**overrides)


__all__ = ["TokenizerConfig", "VOCAB_FILENAME", "MERGES_FILENAME", "CONTEXT_LENGTH"]
