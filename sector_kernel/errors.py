"""
Sector Kernel — Error Taxonomy v1.0

Hard-fail conditions only. Numeric edge cases (empty inputs, zero
denominators, missing ratings) are never errors: they resolve to
documented defaults inside each component.
"""

from __future__ import annotations


class ValidationError(Exception):
    """
    Raised when the unit list does not describe a valid forest.

    Fatal for the whole aggregation pass: partial trees are never
    rendered.
    """

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[VALIDATION:{rule}] {detail}")


class InvalidArgumentError(ValueError):
    """Raised on malformed ranking input (caller error, not retryable)."""

    def __init__(self, argument: str, detail: str) -> None:
        self.argument = argument
        self.detail = detail
        super().__init__(f"Invalid argument {argument!r}: {detail}")
