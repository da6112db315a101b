"""
Column access for caller-supplied tables.

The aggregators only need two capabilities from a table: a numeric column by name and a
string column by name. `as_table` wraps the containers callers typically hold:
- `pandas.DataFrame` -> `DataFrameTable`
- `Mapping[str, Sequence]` (e.g. a dict of lists) -> `MappingTable`
Anything already implementing `Table` is used as-is.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

import numpy as np
import pandas as pd

from geoweight.core.errors import MissingColumn


@runtime_checkable
class Table(Protocol):
    def get_numeric_column(self, name: str) -> np.ndarray: ...

    def get_string_column(self, name: str) -> list[str | None]: ...

    def __len__(self) -> int: ...


class DataFrameTable:
    """`Table` view over a pandas DataFrame."""

    def __init__(self, df: pd.DataFrame):
        self._df = df

    def _column(self, name: str) -> pd.Series:
        if name not in self._df.columns:
            raise MissingColumn(name, available=[str(c) for c in self._df.columns])
        return self._df[name]

    def get_numeric_column(self, name: str) -> np.ndarray:
        return pd.to_numeric(self._column(name)).to_numpy(dtype=np.float64, na_value=np.nan)

    def get_string_column(self, name: str) -> list[str | None]:
        col = self._column(name)
        return [None if pd.isna(v) else str(v) for v in col.tolist()]

    def __len__(self) -> int:
        return len(self._df)


class MappingTable:
    """`Table` view over a mapping of column name -> sequence of values."""

    def __init__(self, columns: Mapping[str, Sequence[Any]]):
        self._columns = columns
        lengths = {len(v) for v in columns.values()}
        if len(lengths) > 1:
            raise ValueError("All columns of a table must have the same length.")
        self._n = lengths.pop() if lengths else 0

    def _column(self, name: str) -> Sequence[Any]:
        if name not in self._columns:
            raise MissingColumn(name, available=list(self._columns))
        return self._columns[name]

    def get_numeric_column(self, name: str) -> np.ndarray:
        values = [np.nan if v is None else v for v in self._column(name)]
        return np.asarray(values, dtype=np.float64)

    def get_string_column(self, name: str) -> list[str | None]:
        return [None if v is None else str(v) for v in self._column(name)]

    def __len__(self) -> int:
        return self._n


def as_table(obj: Any) -> Table:
    """Wrap `obj` in the matching `Table` adapter."""
    if isinstance(obj, pd.DataFrame):
        return DataFrameTable(obj)
    if isinstance(obj, Table):
        return obj
    if isinstance(obj, Mapping):
        return MappingTable(obj)
    raise TypeError(f"Unsupported table type: {type(obj).__name__}")
