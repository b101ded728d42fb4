"""Balance checks for assembled SAMs and raw IO bundles.

Imbalances are reported as data (`balanced` column), never raised.

Provides:
  check_sam_balance(sam, atol) -> pd.DataFrame
  check_io_balance(bundle, atol) -> IOBalanceReport
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from src.data.io_bundle import IOBundle
from src.data.labeled_matrix import DEFAULT_LABEL_COLUMN

logger = logging.getLogger(__name__)

DEFAULT_ATOL = 1e-6


@dataclass(frozen=True)
class IOBalanceReport:
    """Goods (supply = demand) and activity (output = cost) balance tables."""

    goods: pd.DataFrame
    activities: pd.DataFrame

    @property
    def is_balanced(self) -> bool:
        return bool(self.goods["balanced"].all() and self.activities["balanced"].all())


def check_sam_balance(
    sam: pd.DataFrame,
    atol: float = DEFAULT_ATOL,
) -> pd.DataFrame:
    """Check row/column balance for a SAM DataFrame.

    Missing cells count as zero. Column totals are matched to rows by
    position, so the SAM must list its columns in row order.

    Returns:
        DataFrame with account, row_total, col_total, imbalance, balanced.
    """
    labels = sam[DEFAULT_LABEL_COLUMN].astype(str).tolist()
    cells = sam.drop(columns=[DEFAULT_LABEL_COLUMN]).apply(pd.to_numeric)
    values = cells.to_numpy(dtype=np.float64)

    if values.shape[0] != values.shape[1]:
        msg = f"SAM must be square, got {values.shape[0]}x{values.shape[1]}."
        raise ValueError(msg)

    row_totals = np.nansum(values, axis=1)
    col_totals = np.nansum(values, axis=0)
    imbalance = row_totals - col_totals
    balanced = np.abs(imbalance) <= atol

    report = pd.DataFrame({
        "account": labels,
        "row_total": row_totals,
        "col_total": col_totals,
        "imbalance": imbalance,
        "balanced": balanced,
    })
    _log_unbalanced("SAM accounts", report, "account")
    return report


def check_io_balance(
    bundle: IOBundle,
    atol: float = DEFAULT_ATOL,
) -> IOBalanceReport:
    """Check IO balance for goods and activities from raw bundle tables.

    Goods:       output - (use + final + exports - imports)
    Activities:  output - (intermediate + value_added)
    """
    n_goods = len(bundle.goods)
    n_ext = len(bundle.ext_accounts)
    supply = bundle.supply.values
    use = bundle.use.values
    final = bundle.final_demand.values
    zeros = np.zeros((n_goods, n_ext))
    exports = bundle.exports.values if bundle.exports is not None else zeros
    imports = bundle.imports.values if bundle.imports is not None else zeros

    output_by_good = supply.sum(axis=0)
    use_by_good = use.sum(axis=1)
    final_by_good = final.sum(axis=1)
    export_by_good = exports.sum(axis=1)
    import_by_good = imports.sum(axis=1)

    goods_imb = output_by_good - (
        use_by_good + final_by_good + export_by_good - import_by_good
    )
    goods_df = pd.DataFrame({
        "good": list(bundle.goods),
        "output": output_by_good,
        "use": use_by_good,
        "final": final_by_good,
        "exports": export_by_good,
        "imports": import_by_good,
        "imbalance": goods_imb,
        "balanced": np.abs(goods_imb) <= atol,
    })

    output_by_act = supply.sum(axis=1)
    int_by_act = use.sum(axis=0)
    va_by_act = bundle.value_added.values.sum(axis=0)
    activity_imb = output_by_act - (int_by_act + va_by_act)
    activity_df = pd.DataFrame({
        "activity": list(bundle.activities),
        "output": output_by_act,
        "intermediate": int_by_act,
        "value_added": va_by_act,
        "imbalance": activity_imb,
        "balanced": np.abs(activity_imb) <= atol,
    })

    _log_unbalanced("goods", goods_df, "good")
    _log_unbalanced("activities", activity_df, "activity")
    return IOBalanceReport(goods=goods_df, activities=activity_df)


def _log_unbalanced(what: str, report: pd.DataFrame, key: str) -> None:
    bad = report.loc[~report["balanced"], key].tolist()
    if bad:
        logger.info("%d unbalanced %s: %s", len(bad), what, bad)
