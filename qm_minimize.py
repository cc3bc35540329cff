#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Quine-McCluskey Minimizer
=========================
Prime implicants by repeated merging of bit patterns, followed by a greedy
selection of implicants that covers every minterm.

Implicants
----------
An implicant is a string over {0, 1, -} with one character per variable, first
variable first.  '-' marks a variable that was merged away:

    "1-0"  over A, B, C  ==  AC'   covers minterms {4, 6}

Selection
---------
The cover is *not* guaranteed to be minimal.  The selector repeatedly takes the
uncovered minterm with the fewest covering implicants and picks, among those
implicants, the one that still covers the most uncovered minterms.

Ties are broken deterministically:
  - minterms with an equal number of covering implicants: smallest index first
  - implicants with equal remaining coverage: lexicographically smallest pattern
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from logic_expr import log

Implicant = str
Coverage = FrozenSet[int]
PrimeTable = Dict[Implicant, Coverage]

DASH = "-"


# ---------- Bit patterns ----------

def to_pattern(index: int, n: int) -> Implicant:
    """n-bit binary string of index, most significant bit first."""
    return format(index, f"0{n}b") if n else ""


def count_ones(pattern: Implicant) -> int:
    return pattern.count("1")


def merge_implicants(a: Implicant, b: Implicant) -> Optional[Implicant]:
    """
    Merge two implicants that differ in exactly one literal bit.

    Returns the merged pattern with a '-' at the differing position, or None if
    the two are not merge-eligible (different length, a dash facing a literal,
    or not exactly one differing bit).
    """
    if len(a) != len(b):
        return None
    diff = -1
    for i, (x, y) in enumerate(zip(a, b)):
        if x == y:
            continue
        if x == DASH or y == DASH or diff >= 0:
            return None
        diff = i
    if diff < 0:
        return None
    return a[:diff] + DASH + a[diff + 1:]


def implicant_minterms(pattern: Implicant) -> Iterator[int]:
    """Every minterm index covered by pattern, in ascending order.

    Expands an implicant for checks and listings; the minimizer itself tracks
    coverage sets and never needs it.
    """
    n = len(pattern)
    base = 0
    free: List[int] = []
    for i, ch in enumerate(pattern):
        bitpos = n - 1 - i
        if ch == "1":
            base |= 1 << bitpos
        elif ch == DASH:
            free.append(bitpos)
    free.reverse()
    for mask in range(1 << len(free)):
        value = base
        for j, bitpos in enumerate(free):
            if mask >> j & 1:
                value |= 1 << bitpos
        yield value


def implicant_covers(pattern: Implicant, index: int) -> bool:
    n = len(pattern)
    for i, ch in enumerate(pattern):
        if ch == DASH:
            continue
        if (index >> (n - 1 - i)) & 1 != int(ch):
            return False
    return True


# ---------- Prime implicants ----------

def prime_implicants(n: int, minterms: Iterable[int]) -> PrimeTable:
    """
    Merge minterm patterns until nothing merges any more.

    Each round groups the current patterns by their number of '1's and tries
    every pair from neighbouring groups.  A merged pattern is recorded the first
    time it appears; both operands are consumed regardless.  Patterns nobody
    consumed carry over into the next round.  The result maps every prime
    implicant to the full set of minterms it covers, ordered by pattern.
    """
    coverage: Dict[Implicant, Coverage] = {}
    current: List[Implicant] = []
    for m in minterms:
        p = to_pattern(m, n)
        if p not in coverage:
            coverage[p] = frozenset((m,))
            current.append(p)

    rounds = 0
    while True:
        groups: Dict[int, List[Implicant]] = defaultdict(list)
        for p in current:
            groups[count_ones(p)].append(p)

        consumed: Set[Implicant] = set()
        merged: List[Implicant] = []
        for k in sorted(groups):
            if k - 1 not in groups:
                continue
            for a in groups[k]:
                for b in groups[k - 1]:
                    c = merge_implicants(a, b)
                    if c is None:
                        continue
                    if c not in coverage:
                        coverage[c] = coverage[a] | coverage[b]
                        merged.append(c)
                    consumed.add(a)
                    consumed.add(b)

        if not consumed:
            break
        rounds += 1
        current = merged + [p for p in current if p not in consumed]
        log(f"QM round {rounds}: {len(merged)} merged, {len(current)} candidate(s)")

    return {p: coverage[p] for p in sorted(current)}


# ---------- Selection ----------

def select_cover(primes: Mapping[Implicant, Coverage], minterms: Iterable[int]) -> List[Implicant]:
    """
    Greedily choose prime implicants until every minterm is covered.

    primes is not modified.  Raises ValueError when a minterm is covered by no
    implicant at all.
    """
    remaining: Dict[Implicant, Set[int]] = {p: set(cov) for p, cov in primes.items()}
    covering: Dict[int, Set[Implicant]] = defaultdict(set)
    for p, cov in primes.items():
        for m in cov:
            covering[m].add(p)

    uncovered = set(minterms)
    orphans = sorted(m for m in uncovered if not covering.get(m))
    if orphans:
        raise ValueError(f"minterm(s) not covered by any implicant: {orphans}")

    chosen: List[Implicant] = []
    while uncovered:
        target = min(uncovered, key=lambda m: (len(covering[m]), m))
        best = min(covering[target], key=lambda p: (-len(remaining[p]), p))
        chosen.append(best)
        newly = remaining.pop(best)
        for cov in remaining.values():
            cov -= newly
        uncovered -= newly
        for m in newly:
            covering.pop(m, None)
    return chosen


def minimize(n: int, minterms: Sequence[int]) -> Tuple[PrimeTable, List[Implicant]]:
    """Prime implicant table and selected cover for a minterm list.

    No minterms gives an empty table and cover (constant 0); the full domain
    gives a single all-dash implicant (constant 1) without any merging.
    """
    if not minterms:
        return {}, []
    if len(set(minterms)) == 1 << n:
        everything = DASH * n
        return {everything: frozenset(minterms)}, [everything]
    primes = prime_implicants(n, minterms)
    log(f"{len(primes)} prime implicant(s)")
    return primes, select_cover(primes, minterms)


# ---------- Evaluation & Formatting ----------

def cover_value(cover: Iterable[Implicant], index: int) -> int:
    """OR of all implicants of cover at one assignment index.

    run_analyses.cover_matches uses it to check a cover against the minterms.
    """
    return int(any(implicant_covers(p, index) for p in cover))


def count_literals(cover: Iterable[Implicant]) -> int:
    c = 0
    for p in cover:
        for ch in p:
            if ch == "0" or ch == "1":
                c += 1
    return c


def implicant_term(pattern: Implicant, variables: Sequence[str]) -> str:
    """Product term of pattern: '1' -> A, '0' -> A', '-' -> omitted."""
    parts: List[str] = []
    for v, ch in zip(variables, pattern):
        if ch == "1":
            parts.append(v)
        elif ch == "0":
            parts.append(f"{v}'")
    return "".join(parts)


def sop_str(cover: Iterable[Implicant], variables: Sequence[str]) -> str:
    """Format a cover as 'T+T+...' with terms sorted, '0' if empty, '1' if a term is empty."""
    terms = [implicant_term(p, variables) for p in cover]
    if not terms:
        return "0"
    if any(t == "" for t in terms):
        return "1"
    return "+".join(sorted(terms))
