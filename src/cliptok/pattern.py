"""
Text normalization and pre-tokenization.

Pre-tokenization splits normalized text into word-like units before any
subword merging happens. Alternatives are tried in a fixed order at each
position and the first one that matches wins, so special token literals
beat punctuation runs and contractions beat letter runs:

    1. special token literals (``<|startoftext|>``, ``<|endoftext|>``)
    2. contraction suffixes (``'s``, ``'t``, ``'re``, ``'ve``, ``'m``, ``'ll``, ``'d``)
    3. a run of letters
    4. a single digit
    5. a run of characters that are neither whitespace, letters nor digits

Whitespace never forms a unit of its own; it only separates units.
"""

from typing import Final

import regex as re

from .errors import PatternError

BOS: Final[str] = "<|startoftext|>"
EOS: Final[str] = "<|endoftext|>"

CONTRACTIONS: Final[tuple[str, ...]] = ("'s", "'t", "'re", "'ve", "'m", "'ll", "'d")

WHITESPACE_PATTERN: Final[str] = r"\s+"


def build_pattern(special_toks: tuple[str, ...] = (BOS, EOS)) -> str:
    """
    Assemble the pre-tokenizer alternation for the given special tokens.

    ``regex`` alternation is ordered: the leftmost alternative that matches
    at a position is taken, so the order of the pieces below is the
    priority order.
    """
    # escape "|" and friends inside special token literals
    specials = [re.escape(seq) for seq in special_toks]
    pieces = [
        *specials,
        *CONTRACTIONS,
        r"\p{L}+",
        r"\p{N}",
        r"[^\s\p{L}\p{N}]+",
    ]
    return "|".join(pieces)


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile and validate a regex pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e)


CLIP_PATTERN: Final[str] = build_pattern()

_compiled_clip: Final[re.Pattern] = compile_pattern(CLIP_PATTERN)
_compiled_ws: Final[re.Pattern] = compile_pattern(WHITESPACE_PATTERN)


def normalize(text: str) -> str:
    """Lowercase text and collapse every whitespace run into a single space."""
    return _compiled_ws.sub(" ", text.lower())


def pre_tokenize(text: str, compiled_pat: re.Pattern | None = None) -> list[str]:
    """
    Normalize ``text`` and split it into pre-tokens, preserving order.

    :param text: Raw input text.
    :param compiled_pat: Optional split pattern; defaults to the CLIP pattern.
    :returns: Pre-tokens in the order they appear in the text.
    """
    pat = compiled_pat if compiled_pat is not None else _compiled_clip
    return pat.findall(normalize(text))


__all__ = [
    "BOS",
    "EOS",
    "CLIP_PATTERN",
    "build_pattern",
    "compile_pattern",
    "normalize",
    "pre_tokenize",
]
