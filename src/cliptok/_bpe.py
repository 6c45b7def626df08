"""
Core Byte Pair Encoding (BPE) merge operations.

Merging is greedy and rank-driven: on every round the adjacent pair with the
lowest merge rank (the earliest learned merge) is merged everywhere in the
word, until no adjacent pair has a rank.
"""

from collections.abc import Callable, Iterable
import logging
import threading
from typing import Final

from .types import MergeRanks, Subword, SubwordPair

END_OF_WORD: Final[str] = "</w>"

log = logging.getLogger(__name__)


def get_pairs(unigrams: list[Subword]) -> set[SubwordPair]:
    """Return the distinct adjacent pairs of a unigram sequence."""
    return set(zip(unigrams, unigrams[1:]))


def bpe_merge(unigrams: list[Subword], target: SubwordPair) -> list[Subword]:
    """
    Merge all non-overlapping occurrences of ``target`` in one left-to-right pass.

    A freshly merged element is never merged again with its neighbour in the
    same pass: ``["a", "a", "a"]`` merged on ``("a", "a")`` gives
    ``["aa", "a"]``.
    """
    merged: list[Subword] = []

    i = 0
    n = len(unigrams)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and unigrams[i] == target[0] and unigrams[i + 1] == target[1]:
            merged.append(unigrams[i] + unigrams[i + 1])
            i += 2
        else:
            merged.append(unigrams[i])
            i += 1

    return merged


def to_unigrams(pretoken: str, end_of_word: str = END_OF_WORD) -> list[Subword]:
    """Split a pre-token into characters, marking the final one as word-final."""
    if not pretoken:
        return []
    return [*pretoken[:-1], pretoken[-1] + end_of_word]


def apply_bpe(
    unigrams: list[Subword], merge_ranks: MergeRanks
) -> tuple[list[Subword], int]:
    """
    Apply ranked merges to a unigram sequence until none is applicable.

    :param unigrams: Initial sequence, typically from :func:`to_unigrams`.
    :param merge_ranks: Pair -> rank table, lower rank merges first.
    :returns: Final subword sequence and the number of merge rounds performed.
    """
    rounds = 0
    while len(unigrams) >= 2:
        pairs = get_pairs(unigrams)
        # retrieve the pair with the lowest merge rank; unranked pairs sort last
        pair = min(pairs, key=lambda p: merge_ranks.get(p, float("inf")))
        # no pair to merge
        if pair not in merge_ranks:
            break
        unigrams = bpe_merge(unigrams, pair)
        rounds += 1

    return unigrams, rounds


class MergeCache:
    """
    Unbounded pre-token -> subwords memo, safe to share between threads.

    Entries are never evicted or invalidated: a pre-token always merges the
    same way under a fixed rank table, and the set of distinct pre-tokens seen
    in practice is bounded by the language rather than by input volume.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Subword, ...]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, pretoken: object) -> bool:
        with self._lock:
            return pretoken in self._entries

    def get(self, pretoken: str) -> tuple[Subword, ...] | None:
        with self._lock:
            return self._entries.get(pretoken)

    def get_or_compute(
        self, pretoken: str, compute: Callable[[str], Iterable[Subword]]
    ) -> tuple[Subword, ...]:
        """
        Return the cached subwords for ``pretoken``, computing them on a miss.

        ``compute`` runs outside the lock; if two threads race on the same
        pre-token the first insert is kept and both callers see it.
        """
        with self._lock:
            cached = self._entries.get(pretoken)
        if cached is not None:
            return cached

        subwords = tuple(compute(pretoken))
        with self._lock:
            return self._entries.setdefault(pretoken, subwords)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class BPEMergeEngine:
    """Turns single pre-tokens into subword sequences using a merge rank table."""

    def __init__(
        self,
        merge_ranks: MergeRanks,
        cache: MergeCache | None = None,
        end_of_word: str = END_OF_WORD,
    ) -> None:
        self.merge_ranks = merge_ranks
        self.cache = cache if cache is not None else MergeCache()
        self.end_of_word = end_of_word

    def merge(self, pretoken: str) -> list[Subword]:
        """Return the subwords of ``pretoken``, consulting the cache first."""
        if not pretoken:
            return []
        return list(self.cache.get_or_compute(pretoken, self._merge_uncached))

    def _merge_uncached(self, pretoken: str) -> list[Subword]:
        unigrams = to_unigrams(pretoken, self.end_of_word)
        subwords, rounds = apply_bpe(unigrams, self.merge_ranks)
        log.debug(f"merged {pretoken!r} in {rounds} rounds -> {subwords}")
        return subwords


__all__ = [
    "END_OF_WORD",
    "get_pairs",
    "bpe_merge",
    "to_unigrams",
    "apply_bpe",
    "MergeCache",
    "BPEMergeEngine",
]
