"""
Sector Kernel v1.0 — Hierarchical Sort Scenarios

  01. Setor sort is idempotent in the same direction
  02. Metric sort orders roots only; children stay in path order
  03. Children ignore their own metric values (Usuarios desc)
  04. Toggle: same column twice flips direction
  05. New column adopts explicit direction, else its default
  06. Unknown column leaves order and state untouched
  07. Output is a valid depth-first traversal
  08. Root ties break by ascending path in both directions
  09. Setor desc reverses the whole path order
  10. Roots compare on their own row, not the consolidated figure

Run:  py -3 -m sector_kernel.test_hierarchical_sort
"""

from __future__ import annotations

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sector_kernel.consolidation import consolidate
from sector_kernel.constants import SORT_ASC, SORT_DESC
from sector_kernel.domain_types import OrgUnit
from sector_kernel.hierarchical_sort import SortMetric, SortState, sort_units
from sector_kernel.tree_index import index_units


def _header(title: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}")


def _paths(units: list) -> list:
    return [u.path for u in units]


def _forest():
    """Three secretariats with uneven efficiency and nested departments."""
    tree = index_units([
        OrgUnit(id=1, path="1", requests_total=10, requests_completed=2),
        OrgUnit(id=12, path="1,12", parent_id=1, requests_total=10, requests_completed=10),
        OrgUnit(id=3, path="1,3", parent_id=1, requests_total=10, requests_completed=1),
        OrgUnit(id=30, path="1,3,30", parent_id=3),
        OrgUnit(id=2, path="2", requests_total=10, requests_completed=9),
        OrgUnit(id=21, path="2,21", parent_id=2),
        OrgUnit(id=5, path="5", requests_total=10, requests_completed=5),
    ])
    consolidate(tree)
    return tree


# ───────────────────────────────────────────────────────────────
# Scenarios
# ───────────────────────────────────────────────────────────────

def test_01_setor_idempotent() -> None:
    _header("Scenario 01 — Setor Idempotence")
    tree = _forest()
    once = sort_units(tree, "Setor", SortState(), SORT_ASC)
    twice = sort_units(tree, "Setor", SortState(), SORT_ASC)
    assert _paths(once) == _paths(twice)
    assert _paths(once) == ["1", "1,12", "1,3", "1,3,30", "2", "2,21", "5"]
    print("\n[PASS] Scenario 01 PASSED")


def test_02_metric_orders_roots_only() -> None:
    _header("Scenario 02 — Eficiencia Orders Roots")
    tree = _forest()
    state = SortState()
    ordered = sort_units(tree, "Eficiencia", state)
    # own rows: root 1 20%, root 2 90%, root 5 50%
    assert _paths(ordered) == ["2", "2,21", "5", "1", "1,12", "1,3", "1,3,30"]
    assert state.direction == SORT_DESC

    ordered = sort_units(tree, "Eficiencia", state)
    assert state.direction == SORT_ASC
    assert _paths(ordered) == ["1", "1,12", "1,3", "1,3,30", "5", "2", "2,21"]
    print("\n[PASS] Scenario 02 PASSED")


def test_03_children_ignore_metric() -> None:
    _header("Scenario 03 — Children In Path Order (Usuarios desc)")
    tree = index_units([
        OrgUnit(id=1, path="1", users_total=1),
        OrgUnit(id=2, path="1,2", parent_id=1, users_total=5),
        OrgUnit(id=3, path="1,3", parent_id=1, users_total=500),
    ])
    ordered = sort_units(tree, "Usuarios", SortState(), SORT_DESC)
    assert _paths(ordered) == ["1", "1,2", "1,3"]
    print("\n[PASS] Scenario 03 PASSED")


def test_04_toggle_flips_direction() -> None:
    _header("Scenario 04 — Toggle")
    tree = _forest()
    state = SortState()
    sort_units(tree, "Qualidade", state)
    first = state.direction
    sort_units(tree, "Qualidade", state)
    assert first == SORT_DESC
    assert state.direction == SORT_ASC
    assert state.column == "Qualidade"
    print("\n[PASS] Scenario 04 PASSED")


def test_05_new_column_direction() -> None:
    _header("Scenario 05 — New Column Direction")
    tree = _forest()
    state = SortState()
    sort_units(tree, "Setor", state)
    assert state.direction == SortMetric.SETOR.default_direction == SORT_ASC
    sort_units(tree, SortMetric.ENGAJAMENTO, state, SORT_ASC)
    assert (state.column, state.direction) == ("Engajamento", SORT_ASC)
    sort_units(tree, "Usuarios", state)
    assert (state.column, state.direction) == ("Usuarios", SORT_DESC)
    print("\n[PASS] Scenario 05 PASSED")


def test_06_unknown_column() -> None:
    _header("Scenario 06 — Unknown Column")
    tree = _forest()
    state = SortState(column="Servicos", direction=SORT_DESC)
    ordered = sort_units(tree, "Nope", state, SORT_ASC)
    assert [u.id for u in ordered] == [u.id for u in tree.units]
    assert (state.column, state.direction) == ("Servicos", SORT_DESC)
    print("\n[PASS] Scenario 06 PASSED")


def test_07_depth_first_traversal() -> None:
    _header("Scenario 07 — Valid DFS")
    tree = _forest()
    for column in ("Usuarios", "Servicos", "Eficiencia", "Engajamento", "Qualidade"):
        ordered = sort_units(tree, column, SortState(column="Setor"))
        assert len(ordered) == len(tree.units)
        stack: list = []
        for unit in ordered:
            while stack and stack[-1] != unit.parent_id:
                stack.pop()
            if unit.parent_id is None:
                assert not stack, f"{column}: root {unit.id} opened inside a subtree"
            else:
                assert stack, f"{column}: unit {unit.id} detached from parent"
            assert len(stack) == unit.level
            stack.append(unit.id)
    print("\n[PASS] Scenario 07 PASSED")


def test_08_root_ties_by_path() -> None:
    _header("Scenario 08 — Root Ties")
    tree = index_units([
        OrgUnit(id=9, path="9", services_primary=1),
        OrgUnit(id=4, path="4", services_primary=1),
        OrgUnit(id=7, path="7", services_primary=3),
    ])
    consolidate(tree)
    desc = sort_units(tree, "Servicos", SortState(column="Setor"), SORT_DESC)
    asc = sort_units(tree, "Servicos", SortState(column="Setor"), SORT_ASC)
    assert _paths(desc) == ["7", "4", "9"]
    assert _paths(asc) == ["4", "9", "7"]
    print("\n[PASS] Scenario 08 PASSED")


def test_09_setor_desc() -> None:
    _header("Scenario 09 — Setor Desc")
    tree = _forest()
    ordered = sort_units(tree, "Setor", SortState(), SORT_DESC)
    assert _paths(ordered) == ["5", "2,21", "2", "1,3,30", "1,3", "1,12", "1"]
    print("\n[PASS] Scenario 09 PASSED")


def test_10_roots_use_own_values() -> None:
    _header("Scenario 10 — Own Row Values")
    tree = index_units([
        OrgUnit(id=1, path="1", requests_total=10, requests_completed=9, users_total=10,
                root_users_total=900),
        OrgUnit(id=3, path="1,3", parent_id=1, requests_total=10, requests_completed=1),
        OrgUnit(id=2, path="2", requests_total=10, requests_completed=6, users_total=50,
                root_users_total=60),
    ])
    consolidate(tree)
    # root 1: own 90%, consolidated 50%; root 2: 60%
    assert abs(tree.by_id[1].consolidated.efficiency_pct - 50.0) < 1e-9
    ordered = sort_units(tree, "Eficiencia", SortState(), SORT_DESC)
    assert [u.id for u in ordered] == [1, 3, 2]
    # users: own 10 vs 50, site-wide 900 vs 60
    ordered = sort_units(tree, "Usuarios", SortState(), SORT_DESC)
    assert [u.id for u in ordered] == [2, 1, 3]
    print("\n[PASS] Scenario 10 PASSED")


# ══════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════

def main() -> None:
    tests = [
        test_01_setor_idempotent,
        test_02_metric_orders_roots_only,
        test_03_children_ignore_metric,
        test_04_toggle_flips_direction,
        test_05_new_column_direction,
        test_06_unknown_column,
        test_07_depth_first_traversal,
        test_08_root_ties_by_path,
        test_09_setor_desc,
        test_10_roots_use_own_values,
    ]
    failed = 0
    for fn in tests:
        try:
            fn()
        except Exception as e:
            print(f"\n[ERROR] {fn.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"  RESULTS: {len(tests) - failed}/{len(tests)} scenarios passed")
    print(f"{'='*60}")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
