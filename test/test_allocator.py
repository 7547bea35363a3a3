from factories import table
from scheduling import AllocationStrategy, allocate
from scheduling.allocator import EXACT_SEARCH_LIMIT

A = table(1, 2, "A")
B = table(2, 4, "B")
C = table(3, 6, "C")

# =========================================================
# Einzeltisch
# =========================================================
def test_smallest_single_table_wins():
    assert allocate([A, B, C], 3) == [B.id]

def test_exact_capacity_fits():
    assert allocate([A, B, C], 4) == [B.id]

def test_single_table_tie_keeps_input_order():
    first = table(10, 4)
    second = table(11, 4)
    assert allocate([first, second], 3) == [10]
    assert allocate([second, first], 3) == [11]

def test_single_table_preferred_over_combination():
    result = allocate([A, A.model_copy(update={"id": 4}), C], 4)
    assert result == [C.id]

# =========================================================
# Kombination
# =========================================================
def test_combination_largest_first():
    assert allocate([A, B, C], 9) == [C.id, B.id]

def test_combination_uses_everything_when_needed():
    assert allocate([A, B, C], 12) == [C.id, B.id, A.id]

def test_no_fit_returns_none():
    assert allocate([A, B, C], 13) is None

def test_combination_capacity_is_sufficient():
    tables = [table(i, cap) for i, cap in enumerate([2, 2, 3, 4, 4, 6, 8], start=1)]
    by_id = {t.id: t for t in tables}
    for party in range(1, 30):
        result = allocate(tables, party)
        if result is None:
            assert party > sum(t.capacity for t in tables)
        else:
            assert sum(by_id[i].capacity for i in result) >= party

def test_greedy_may_over_allocate():
    tables = [table(1, 5), table(2, 3), table(3, 3)]
    # Greedy nimmt 5 + 3, obwohl 3 + 3 reichen würde
    assert allocate(tables, 6) == [1, 2]

# =========================================================
# Ungültige Eingaben
# =========================================================
def test_zero_or_negative_party():
    assert allocate([A, B, C], 0) is None
    assert allocate([A, B, C], -2) is None

def test_no_tables():
    assert allocate([], 2) is None

# =========================================================
# Exakte Suche
# =========================================================
def test_exact_strategy_minimises_wasted_seats():
    tables = [table(1, 5), table(2, 3), table(3, 3)]
    assert allocate(tables, 6, AllocationStrategy.EXACT) == [2, 3]

def test_exact_strategy_prefers_fewer_tables():
    tables = [table(1, 2), table(2, 2), table(3, 2), table(4, 5)]
    assert allocate(tables, 7, AllocationStrategy.EXACT) == [4, 1]

def test_exact_strategy_same_single_table_choice():
    assert allocate([A, B, C], 3, AllocationStrategy.EXACT) == [B.id]

def test_exact_strategy_no_fit():
    assert allocate([A, B], 7, AllocationStrategy.EXACT) is None

def test_exact_strategy_falls_back_to_greedy_for_many_tables():
    tables = [table(1, 5), table(2, 3), table(3, 3)]
    tables += [table(100 + i, 1) for i in range(EXACT_SEARCH_LIMIT)]
    assert allocate(tables, 6, AllocationStrategy.EXACT) == [1, 2]
