"""Unit tests for the BPE merge engine and merge cache."""

import pytest

from cliptok import _bpe
from cliptok._bpe import (
    BPEMergeEngine,
    MergeCache,
    apply_bpe,
    bpe_merge,
    get_pairs,
    to_unigrams,
)


@pytest.fixture
def ranks(merge_ranks):
    return merge_ranks


# Building blocks
# ---------------------------------------------------------------------------


def test_to_unigrams_marks_last_character():
    assert to_unigrams("cat") == ["c", "a", "t</w>"]
    assert to_unigrams("a") == ["a</w>"]
    assert to_unigrams("") == []


def test_get_pairs_collapses_duplicates():
    assert get_pairs(["a", "b", "a", "b"]) == {("a", "b"), ("b", "a")}
    assert get_pairs(["a</w>"]) == set()


def test_merge_pass_does_not_remerge_fresh_element():
    assert bpe_merge(["a", "a", "a"], ("a", "a")) == ["aa", "a"]
    assert bpe_merge(["a", "a", "a", "a"], ("a", "a")) == ["aa", "aa"]


def test_merge_pass_keeps_trailing_element():
    assert bpe_merge(["x", "a", "b", "y"], ("a", "b")) == ["x", "ab", "y"]


def test_lowest_rank_merges_first():
    ranks = {("b", "c</w>"): 0, ("a", "b"): 1}
    # ("b", "c</w>") wins, after which ("a", "b") no longer exists
    assert apply_bpe(["a", "b", "c</w>"], ranks) == (["a", "bc</w>"], 1)


def test_word_final_marker_distinguishes_pairs(ranks):
    # ("o", "f</w>") is ranked but ("o", "f") is not
    assert apply_bpe(["o", "f", "f</w>"], ranks)[0] == ["o", "f", "f</w>"]


def test_no_applicable_merge_returns_unigrams(ranks):
    assert apply_bpe(["x", "y", "z</w>"], ranks) == (["x", "y", "z</w>"], 0)


# Termination bound
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("word", ["photo", "of", "cat", "a", "catcatcat", "ppppphhhh"])
def test_merge_rounds_bounded_by_length(ranks, word):
    _, rounds = apply_bpe(to_unigrams(word), ranks)
    assert rounds <= len(word) - 1


def test_photo_uses_every_round(ranks):
    assert apply_bpe(to_unigrams("photo"), ranks) == (["photo</w>"], 4)


def test_fully_mergeable_word_terminates():
    word = "a" * 64
    # every adjacent pair of any length merges
    ranks = {}
    seq = to_unigrams(word)
    while len(seq) > 1:
        pair = (seq[0], seq[1])
        ranks.setdefault(pair, len(ranks))
        seq = bpe_merge(seq, pair)
    merged, rounds = apply_bpe(to_unigrams(word), ranks)
    assert rounds <= len(word) - 1
    assert "".join(merged) == word[:-1] + "a</w>"


# Engine and cache
# ---------------------------------------------------------------------------


def test_engine_merges_words(ranks):
    engine = BPEMergeEngine(ranks)
    assert engine.merge("photo") == ["photo</w>"]
    assert engine.merge("cat") == ["cat</w>"]
    assert engine.merge("") == []


def test_engine_second_call_is_cache_hit(ranks, monkeypatch):
    engine = BPEMergeEngine(ranks)
    first = engine.merge("photo")
    snapshot = engine.cache.get("photo")

    def fail(*args, **kwargs):
        raise AssertionError("merge recomputed on cache hit")

    monkeypatch.setattr(_bpe, "apply_bpe", fail)
    assert engine.merge("photo") == first
    assert engine.cache.get("photo") == snapshot
    assert len(engine.cache) == 1


def test_engine_results_do_not_alias_cache(ranks):
    engine = BPEMergeEngine(ranks)
    result = engine.merge("cat")
    result.append("junk")
    assert engine.merge("cat") == ["cat</w>"]


def test_engine_custom_end_of_word():
    engine = BPEMergeEngine({("o", "k#"): 0}, end_of_word="#")
    assert engine.merge("ok") == ["ok#"]


def test_cache_starts_empty_and_grows():
    cache = MergeCache()
    assert len(cache) == 0
    assert cache.get("cat") is None
    assert cache.get_or_compute("cat", lambda w: [w]) == ("cat",)
    assert "cat" in cache
    assert cache.get_or_compute("cat", lambda w: ["other"]) == ("cat",)
    cache.clear()
    assert len(cache) == 0


def test_shared_cache_between_engines(ranks):
    cache = MergeCache()
    BPEMergeEngine(ranks, cache=cache).merge("cat")
    assert BPEMergeEngine(ranks, cache=cache).cache.get("cat") == ("cat</w>",)
