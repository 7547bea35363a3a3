"""Seat a party at one table or, failing that, a combination of tables."""
from enum import Enum
from itertools import combinations
from typing import Optional

from models import Table

# Oberhalb davon wird nicht mehr exakt gesucht
EXACT_SEARCH_LIMIT = 12


class AllocationStrategy(str, Enum):
    GREEDY = "greedy"
    EXACT = "exact"


def _single_fit(tables: list[Table], party_size: int) -> Optional[Table]:
    best = None
    for table in tables:
        if table.capacity >= party_size and (best is None or table.capacity < best.capacity):
            best = table
    return best


def _greedy_combination(tables: list[Table], party_size: int) -> Optional[list[Table]]:
    selected = []
    seats = 0
    for table in sorted(tables, key=lambda t: t.capacity, reverse=True):
        if seats >= party_size:
            break
        selected.append(table)
        seats += table.capacity
    return selected if seats >= party_size else None


def _exact_combination(tables: list[Table], party_size: int) -> Optional[list[Table]]:
    """Fewest tables first, then the least wasted seats."""
    if sum(t.capacity for t in tables) < party_size:
        return None
    for size in range(2, len(tables) + 1):
        fits = [combo for combo in combinations(tables, size) if sum(t.capacity for t in combo) >= party_size]
        if fits:
            best = min(fits, key=lambda combo: sum(t.capacity for t in combo))
            return sorted(best, key=lambda t: t.capacity, reverse=True)
    return None


def allocate(
    tables: list[Table],
    party_size: int,
    strategy: AllocationStrategy = AllocationStrategy.GREEDY,
) -> Optional[list[int]]:
    """Returns the ids of the tables to seat ``party_size`` guests, or None.

    A single table is always preferred: the smallest one that fits, earlier
    tables winning ties. Otherwise tables are combined, largest first. The
    greedy combination may hand out more seats than necessary;
    ``AllocationStrategy.EXACT`` searches all combinations instead when at most
    ``EXACT_SEARCH_LIMIT`` tables are free.

    None means "no fit" and is a normal outcome, not an error.
    """
    if party_size <= 0 or not tables:
        return None

    single = _single_fit(tables, party_size)
    if single is not None:
        return [single.id]

    if strategy is AllocationStrategy.EXACT and len(tables) <= EXACT_SEARCH_LIMIT:
        combination = _exact_combination(tables, party_size)
    else:
        combination = _greedy_combination(tables, party_size)

    if combination is None:
        return None
    return [t.id for t in combination]
