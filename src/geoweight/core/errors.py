"""
Exception taxonomy.

Every fatal input problem aborts the whole call before any partial result is produced.
Numeric degeneracies (zero distances, zero weight sums, log of sub-unity distances)
are NOT errors: they flow through as NaN/inf values.
"""

from __future__ import annotations


class GeoWeightError(Exception):
    """Base class for all geoweight errors."""


class InvalidMetricName(GeoWeightError, ValueError):
    def __init__(self, name: object, *, allowed: list[str]):
        self.name = name
        self.allowed = allowed
        super().__init__(f"Unknown distance function {name!r}; expected one of {', '.join(allowed)}.")


class InvalidTransformName(GeoWeightError, ValueError):
    def __init__(self, name: object, *, allowed: list[str]):
        self.name = name
        self.allowed = allowed
        super().__init__(f"Unknown distance transform {name!r}; expected one of {', '.join(allowed)}.")


class LengthMismatch(GeoWeightError, ValueError):
    """Paired coordinate sequences do not have the same length."""

    def __init__(self, lengths: dict[str, int]):
        self.lengths = dict(lengths)
        shown = ", ".join(f"{k}={v}" for k, v in self.lengths.items())
        super().__init__(f"Paired sequences must have equal length (got {shown}).")


class MissingColumn(GeoWeightError, KeyError):
    """A requested column is not present in the supplied table."""

    def __init__(self, column: str, *, available: list[str]):
        self.column = column
        self.available = available
        super().__init__(column)

    def __str__(self) -> str:
        return f"Column {self.column!r} not found; available columns: {self.available}"


class InterpolationCancelled(GeoWeightError):
    """The host asked to stop a long-running aggregation."""

    def __init__(self, *, rows_done: int, rows_total: int):
        self.rows_done = rows_done
        self.rows_total = rows_total
        super().__init__(f"Cancelled after {rows_done} of {rows_total} rows.")
