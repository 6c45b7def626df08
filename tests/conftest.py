"""Shared fixtures: a small reference vocabulary and merge list on disk."""

import json

import pytest

from cliptok import ClipTokenizer
from cliptok.loader import parse_merges

from _data import MERGES, reference_vocab as _reference_vocab


@pytest.fixture
def reference_vocab() -> dict[str, int]:
    return _reference_vocab()


@pytest.fixture
def merge_ranks():
    return parse_merges(MERGES)


@pytest.fixture
def model_dir(tmp_path, reference_vocab):
    """Directory holding vocab.json and merges.txt."""
    (tmp_path / "vocab.json").write_text(json.dumps(reference_vocab), encoding="utf-8")
    (tmp_path / "merges.txt").write_text("\n".join(MERGES) + "\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def tokenizer(model_dir) -> ClipTokenizer:
    """Return a tokenizer loaded from the reference files."""
    return ClipTokenizer.from_pretrained(model_dir)
