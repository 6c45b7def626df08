"""
Core types for tokenization.
"""

from typing import TypeAlias

Token: TypeAlias = int
Subword: TypeAlias = str
SubwordPair: TypeAlias = tuple[Subword, Subword]
MergeRanks: TypeAlias = dict[SubwordPair, int]
Vocabulary: TypeAlias = dict[Subword, Token]
