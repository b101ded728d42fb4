"""Labeled matrices: float64 arrays tagged with ordered row/column labels.

Provides:
  LabeledMatrix(row_labels, col_labels, values)
  labeled_matrix_from_dataframe(df, row_label_col) -> LabeledMatrix
  to_dataframe(mat, row_label_col) -> pd.DataFrame
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from src.data.errors import MissingColumnError, ShapeMismatchError

DEFAULT_LABEL_COLUMN = "label"


@dataclass(frozen=True, init=False, eq=False)
class LabeledMatrix:
    """Matrix wrapper with explicit row/column labels.

    Values are copied to a read-only float64 array on construction.
    """

    row_labels: tuple[str, ...]
    col_labels: tuple[str, ...]
    values: np.ndarray

    def __init__(
        self,
        row_labels: Sequence[str],
        col_labels: Sequence[str],
        values: np.ndarray | Sequence[Sequence[float]],
    ) -> None:
        row_labels = tuple(str(r) for r in row_labels)
        col_labels = tuple(str(c) for c in col_labels)
        expected = (len(row_labels), len(col_labels))
        try:
            arr = np.array(values, dtype=np.float64)
        except ValueError as exc:
            if not _is_ragged(values):
                raise
            raise ShapeMismatchError(expected, (len(values),)) from exc

        # An empty label list on either side still has a well-defined shape
        if arr.size == 0 and arr.ndim < 2 and 0 in expected:
            arr = arr.reshape(len(row_labels), len(col_labels))

        if arr.ndim != 2 or arr.shape != expected:
            raise ShapeMismatchError(expected, arr.shape)

        arr.flags.writeable = False
        object.__setattr__(self, "row_labels", row_labels)
        object.__setattr__(self, "col_labels", col_labels)
        object.__setattr__(self, "values", arr)

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.row_labels), len(self.col_labels))

    def to_dataframe(self, row_label_col: str = DEFAULT_LABEL_COLUMN) -> pd.DataFrame:
        return to_dataframe(self, row_label_col=row_label_col)


def labeled_matrix_from_dataframe(
    df: pd.DataFrame,
    row_label_col: str = DEFAULT_LABEL_COLUMN,
) -> LabeledMatrix:
    """Build a LabeledMatrix from a DataFrame with a row-label column.

    Row labels are the string-cast values of `row_label_col`; column labels
    are every other column, in table order.

    Raises:
        MissingColumnError: If `row_label_col` is not a column of `df`.
    """
    if row_label_col not in df.columns:
        raise MissingColumnError(row_label_col)

    row_labels = [str(v) for v in df[row_label_col].tolist()]
    col_names = [c for c in df.columns if c != row_label_col]
    values = df[col_names].to_numpy(dtype=np.float64)
    return LabeledMatrix(row_labels, [str(c) for c in col_names], values)


def to_dataframe(
    mat: LabeledMatrix,
    row_label_col: str = DEFAULT_LABEL_COLUMN,
) -> pd.DataFrame:
    """Convert a LabeledMatrix to a DataFrame with a leading label column."""
    df = pd.DataFrame({row_label_col: list(mat.row_labels)})
    for idx, col in enumerate(mat.col_labels):
        df[col] = mat.values[:, idx].copy()
    return df


def _is_ragged(values: object) -> bool:
    """True for nested rows of unequal length, e.g. [[1.0, 2.0], [3.0]]."""
    if isinstance(values, np.ndarray) or not isinstance(values, Sequence):
        return False
    lengths = {len(row) if isinstance(row, Sequence) else None for row in values}
    return len(lengths) > 1
