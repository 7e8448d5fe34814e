"""
Core Byte Pair Encoding (BPE) merge application.
"""

import heapq

from .types import MergeRanks, Symbol


def bpe_merge(chunk: str, ranks: MergeRanks) -> list[Symbol]:
    """
    Reduce a chunk to subword symbols by applying ranked merge rules.

    Starts from one symbol per character and repeatedly merges the adjacent
    pair with the lowest rank, until no adjacent pair has a rank. Instead of
    rescanning the whole chunk after each merge, every ranked pair is pushed
    onto a heap once and only the pairs touching a fresh merge are pushed
    again. Stale heap entries are dropped when popped.

    Equal ranks are resolved leftmost first.

    Complexity: O(n log n) for a chunk of n characters.

    :param chunk: Text of a single pre-tokenized chunk.
    :param ranks: Concatenated pair -> rank, lower merges first.
    :return: Symbols left to right after all applicable merges.
    """
    symbols: list[Symbol] = list(chunk)
    n = len(symbols)
    # nothing can merge
    if n < 2 or not ranks:
        return symbols

    # doubly linked list over live slots
    prev = list(range(-1, n - 1))
    next = list(range(1, n + 1))
    next[-1] = -1
    alive = [True] * n

    # (rank, left slot, right slot, expected concatenation)
    heap: list[tuple[int, int, int, str]] = []

    def push(left: int, right: int) -> None:
        if left == -1 or right == -1:
            return
        pair = symbols[left] + symbols[right]
        rank = ranks.get(pair)
        if rank is not None:
            heapq.heappush(heap, (rank, left, right, pair))

    for i in range(n - 1):
        push(i, i + 1)

    while heap:
        _, left, right, pair = heapq.heappop(heap)

        # either side already consumed by another merge
        if not (alive[left] and alive[right]) or next[left] != right:
            continue
        # a neighbour merge changed one of the symbols since this was pushed
        if symbols[left] + symbols[right] != pair:
            continue

        symbols[left] = pair
        alive[right] = False
        nxt = next[right]
        next[left] = nxt
        if nxt != -1:
            prev[nxt] = left

        push(prev[left], left)
        push(left, next[left])

    return [symbols[i] for i in range(n) if alive[i]]
