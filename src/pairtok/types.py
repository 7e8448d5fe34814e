"""
Core types for tokenization.
"""

type Token = int
type Symbol = str
type MergePair = tuple[Symbol, Symbol]
type MergeRanks = dict[Symbol, int]
type Chunks = list[str]
