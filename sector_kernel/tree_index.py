"""
Sector Kernel — Tree Indexer v1.0

Builds a validated forest from a flat, path-annotated unit list.
Pure transform: input units are copied, never mutated.

Hard-fail validation. Every check raises ValidationError on failure.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

from .domain_types import PATH_SEPARATOR, OrgTree, OrgUnit
from .errors import ValidationError

_PATH_RE = re.compile(r"[0-9]+(?:%s[0-9]+)*" % re.escape(PATH_SEPARATOR))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def index_units(units: Sequence[OrgUnit]) -> OrgTree:
    """
    Parse, deduplicate and validate a flat unit list into an OrgTree.

    Duplicate ids (the upstream query may join the same unit twice) keep
    the first occurrence after a stable ordering by ascending level.
    """
    parsed: List[Tuple[OrgUnit, Tuple[int, ...]]] = [
        (u, parse_path(u)) for u in units
    ]
    kept = _deduplicate(parsed)

    tree = OrgTree()
    for unit, segments in kept:
        depth = len(segments) - 1
        copy = replace(unit, level=depth if unit.level is None else unit.level)
        tree.units.append(copy)
        tree.by_id[copy.id] = copy
        tree.paths[copy.id] = segments

    for unit in tree.units:
        _check_path_tail(unit, tree.paths[unit.id])
        _check_level(unit, tree.paths[unit.id])
        _check_parent(unit, tree.paths[unit.id], tree)

    for unit in tree.units:
        if unit.is_root:
            tree.root_ids.append(unit.id)
            tree.groups[unit.id] = []
        else:
            tree.children.setdefault(unit.parent_id, []).append(unit.id)

    for unit in tree.units:
        tree.groups[tree.paths[unit.id][0]].append(unit.id)

    return tree


def parse_path(unit: OrgUnit) -> Tuple[int, ...]:
    """
    Split a comma-joined path into integer segments.

    Only ASCII digits and the separator are accepted (no blanks, signs
    or empty segments), so a valid path compares correctly as a plain
    string.
    """
    raw = unit.path or ""
    if not raw:
        raise ValidationError(
            "path_format",
            f"Unit {unit.id} has an empty path"
        )
    if not _PATH_RE.fullmatch(raw):
        raise ValidationError(
            "path_format",
            f"Unit {unit.id} has a malformed path: {unit.path!r}"
        )
    segments = tuple(int(s) for s in raw.split(PATH_SEPARATOR))
    if len(set(segments)) != len(segments):
        raise ValidationError(
            "cycle",
            f"Unit {unit.id} path {unit.path!r} visits the same unit twice"
        )
    return segments


# ---------------------------------------------------------------------------
# Individual steps (private)
# ---------------------------------------------------------------------------

def _deduplicate(
    parsed: List[Tuple[OrgUnit, Tuple[int, ...]]],
) -> List[Tuple[OrgUnit, Tuple[int, ...]]]:
    """Keep one record per id, preferring the shallowest; input order kept."""

    def _level(i: int) -> int:
        unit, segments = parsed[i]
        return len(segments) - 1 if unit.level is None else unit.level

    winner: Dict[int, int] = {}
    for i in sorted(range(len(parsed)), key=_level):
        winner.setdefault(parsed[i][0].id, i)
    return [p for i, p in enumerate(parsed) if winner[p[0].id] == i]


def _check_path_tail(unit: OrgUnit, segments: Tuple[int, ...]) -> None:
    """The path must end with the unit's own id."""
    if segments[-1] != unit.id:
        raise ValidationError(
            "path_tail",
            f"Unit {unit.id} path {unit.path!r} does not end with its own id"
        )


def _check_level(unit: OrgUnit, segments: Tuple[int, ...]) -> None:
    if unit.level != len(segments) - 1:
        raise ValidationError(
            "level_mismatch",
            f"Unit {unit.id} declares level {unit.level} but path "
            f"{unit.path!r} has depth {len(segments) - 1}"
        )


def _check_parent(unit: OrgUnit, segments: Tuple[int, ...], tree: OrgTree) -> None:
    """
    Second-to-last path segment must agree with parent_id, and the
    parent's path must be this path minus its tail. Each parent link
    therefore moves one level up, so the forest cannot hold a cycle.
    """
    if len(segments) == 1:
        if unit.parent_id is not None:
            raise ValidationError(
                "parent_mismatch",
                f"Unit {unit.id} has a single-segment path but parent_id="
                f"{unit.parent_id}"
            )
        return

    computed_parent = segments[-2]
    if unit.parent_id != computed_parent:
        raise ValidationError(
            "parent_mismatch",
            f"Unit {unit.id} path {unit.path!r} implies parent "
            f"{computed_parent}, stated parent_id={unit.parent_id}"
        )
    if computed_parent not in tree.by_id:
        raise ValidationError(
            "missing_parent",
            f"Unit {unit.id} references parent {computed_parent} "
            f"which is not in the input"
        )
    if tree.paths[computed_parent] != segments[:-1]:
        raise ValidationError(
            "path_chain",
            f"Unit {unit.id} path {unit.path!r} does not extend parent "
            f"path {tree.by_id[computed_parent].path!r}"
        )
