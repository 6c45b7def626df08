"""Unit tests for normalization and pre-tokenization."""

import pytest

from cliptok.errors import PatternError
from cliptok.pattern import build_pattern, compile_pattern, normalize, pre_tokenize


def test_normalize_lowercases_and_collapses_whitespace():
    assert normalize("  Hello \t\n  World  ") == " hello world "


def test_normalize_keeps_accents_and_punctuation():
    assert normalize("Café, NAÏVE!") == "café, naïve!"


def test_empty_text_has_no_pretokens():
    assert pre_tokenize("") == []
    assert pre_tokenize("   \n\t ") == []


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a photo of a cat", ["a", "photo", "of", "a", "cat"]),
        ("it's we'll they're", ["it", "'s", "we", "'ll", "they", "'re"]),
        ("year 2024", ["year", "2", "0", "2", "4"]),
        ("wait... what?!", ["wait", "...", "what", "?!"]),
        ("naïve café", ["naïve", "café"]),
        ("x1y", ["x", "1", "y"]),
    ],
)
def test_pre_tokenize(text, expected):
    assert pre_tokenize(text) == expected


def test_special_literals_beat_punctuation_runs():
    # without priority "<|" would be swallowed by the punctuation alternative
    assert pre_tokenize("<|startoftext|>hi<|endoftext|>") == [
        "<|startoftext|>",
        "hi",
        "<|endoftext|>",
    ]


def test_special_literals_survive_lowercasing():
    assert pre_tokenize("<|ENDOFTEXT|>") == ["<|endoftext|>"]


def test_contraction_beats_punctuation_run():
    assert pre_tokenize("'s") == ["'s"]
    # "'x" is not a contraction so the apostrophe is punctuation
    assert pre_tokenize("'x") == ["'", "x"]


def test_contraction_only_takes_its_suffix():
    # "'re" matches before the letter run, "al" follows as its own unit
    assert pre_tokenize("'real") == ["'re", "al"]


def test_pretokens_preserve_order_and_content():
    text = "the cat's 3 toys!!"
    tokens = pre_tokenize(text)
    assert "".join(tokens) == normalize(text).replace(" ", "")


def test_build_pattern_with_custom_specials():
    pat = compile_pattern(build_pattern(("[bos]",)))
    assert pre_tokenize("[bos]hi", pat) == ["[bos]", "hi"]


def test_compile_pattern_invalid():
    with pytest.raises(PatternError):
        compile_pattern("(unclosed")
