"""SAM assembly: scatter IO bundle tables into a square account matrix.

Rows are receipts, columns are expenditures. Every table contributes by
addition into a zero-initialised matrix indexed by the account universe;
cells are never overwritten.

Pure deterministic functions: same bundle in, same SAM out.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from src.data.io_bundle import SET_NAMES, IOBundle
from src.data.labeled_matrix import DEFAULT_LABEL_COLUMN, LabeledMatrix

logger = logging.getLogger(__name__)


def sam_from_io(bundle: IOBundle) -> pd.DataFrame:
    """Assemble a SAM DataFrame from an IO bundle.

    Returns:
        DataFrame with a leading `label` column and one column per account.
        Row order equals column order equals the account universe order.
    """
    accounts = bundle.accounts
    index = bundle.account_index()
    sam = np.zeros((len(accounts), len(accounts)), dtype=np.float64)

    for table in (bundle.use, bundle.supply, bundle.value_added, bundle.final_demand):
        _add_block(sam, index, table)

    if bundle.taxes is not None:
        _add_block(sam, index, bundle.taxes)
    if bundle.exports is not None:
        _add_block(
            sam, index, bundle.exports,
            row_accounts=bundle.goods, col_accounts=bundle.ext_accounts,
        )
    if bundle.imports is not None:
        # Imports are stored goods x ext but flow from ext (row) to goods (column)
        _add_block(
            sam, index, bundle.imports,
            row_accounts=bundle.ext_accounts, col_accounts=bundle.goods,
            transpose=True,
        )
    _apply_factor_income(sam, index, bundle)

    logger.debug(
        "Assembled %dx%d SAM (total flows %.6g)",
        len(accounts), len(accounts), float(sam.sum()),
    )

    df = pd.DataFrame({DEFAULT_LABEL_COLUMN: accounts})
    for i, col in enumerate(accounts):
        df[col] = sam[:, i]
    return df


def sets_from_bundle(bundle: IOBundle) -> pd.DataFrame:
    """Create the `sets.csv` table (set, item) from bundle labels."""
    set_names: list[str] = []
    items: list[str] = []
    for category, labels in bundle.categories().items():
        set_name = SET_NAMES[category]
        for entry in labels:
            set_names.append(set_name)
            items.append(entry)
    return pd.DataFrame({"set": set_names, "item": items})


def _add_block(
    sam: np.ndarray,
    index: dict[str, int],
    mat: LabeledMatrix,
    *,
    row_accounts: Sequence[str] | None = None,
    col_accounts: Sequence[str] | None = None,
    transpose: bool = False,
) -> None:
    """Add a labeled matrix into the SAM by account index.

    Args:
        sam: Square SAM being accumulated (modified in place).
        index: Account name -> SAM position.
        mat: Source table.
        row_accounts: SAM row accounts; defaults to the table's row labels.
        col_accounts: SAM column accounts; defaults to the table's column labels.
        transpose: Read values[c, r] instead of values[r, c].
    """
    rows = mat.row_labels if row_accounts is None else row_accounts
    cols = mat.col_labels if col_accounts is None else col_accounts
    values = mat.values.T if transpose else mat.values

    if values.shape != (len(rows), len(cols)):
        msg = (
            f"placement of {values.shape[0]}x{values.shape[1]} block onto "
            f"{len(rows)}x{len(cols)} accounts does not fit."
        )
        raise ValueError(msg)

    row_idx = np.array([index[r] for r in rows], dtype=np.intp)
    col_idx = np.array([index[c] for c in cols], dtype=np.intp)
    # np.add.at accumulates repeated indices instead of keeping the last write
    np.add.at(sam, (row_idx[:, np.newaxis], col_idx[np.newaxis, :]), values)


def _apply_factor_income(
    sam: np.ndarray,
    index: dict[str, int],
    bundle: IOBundle,
) -> None:
    """Inject factor income flows into the SAM.

    Uses the explicit factor_income table when present. Otherwise each
    factor's total value added goes entirely to the first institution.
    """
    if bundle.factor_income is not None:
        _add_block(sam, index, bundle.factor_income)
        return
    if not bundle.institutions or not bundle.factors:
        return

    default_inst = bundle.institutions[0]
    totals = bundle.value_added.values.sum(axis=1)
    for f_idx, factor in enumerate(bundle.factors):
        sam[index[default_inst], index[factor]] += totals[f_idx]
    logger.debug(
        "No factor_income table; assigned factor income to '%s'", default_inst,
    )
