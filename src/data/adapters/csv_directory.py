"""CsvDirectoryAdapter: load an IOBundle from a directory of CSV tables.

Expected files (each with a leading `label` column):
  use.csv, supply.csv, value_added.csv, final_demand.csv   required
  taxes.csv, imports.csv, exports.csv, factor_income.csv  optional
  accounts.csv                                              optional (set, item)

Category lists missing from accounts.csv are read off the table labels:
goods/activities from use, factors from value_added, institutions from
final_demand, tax accounts from taxes rows, external accounts from the
imports or exports columns.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from src.data.adapters.base import IOAdapter
from src.data.io_bundle import SET_NAMES, IOBundle
from src.data.labeled_matrix import (
    DEFAULT_LABEL_COLUMN,
    LabeledMatrix,
    labeled_matrix_from_dataframe,
)

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("use", "supply", "value_added", "final_demand")
OPTIONAL_TABLES = ("taxes", "imports", "exports", "factor_income")
ACCOUNTS_FILE = "accounts.csv"

_SET_TO_CATEGORY: dict[str, str] = {
    set_name: category for category, set_name in SET_NAMES.items()
}


class CsvDirectoryAdapter(IOAdapter):
    """Read curated CSV tables from a local directory."""

    @property
    def name(self) -> str:
        return "csv"

    def load_iobundle(self) -> IOBundle:
        """Load and validate the bundle.

        Raises:
            FileNotFoundError: If the directory or a required table is missing.
            ValueError: If accounts.csv names an unknown set, or any
                IOBundle validation fails.
        """
        directory = Path(self.source)
        if not directory.is_dir():
            msg = f"CSV source directory not found: {directory}"
            raise FileNotFoundError(msg)

        tables: dict[str, LabeledMatrix | None] = {}
        for name in REQUIRED_TABLES:
            tables[name] = _read_table(directory / f"{name}.csv")
        for name in OPTIONAL_TABLES:
            path = directory / f"{name}.csv"
            tables[name] = _read_table(path) if path.exists() else None

        categories = self._categories(directory, tables)
        logger.info(
            "Loaded CSV bundle from %s (%d goods, %d activities, optional: %s)",
            directory,
            len(categories["goods"]),
            len(categories["activities"]),
            [n for n in OPTIONAL_TABLES if tables[n] is not None],
        )
        return IOBundle(**categories, **tables)

    def _categories(
        self,
        directory: Path,
        tables: dict[str, LabeledMatrix | None],
    ) -> dict[str, list[str]]:
        declared = _read_accounts(directory / ACCOUNTS_FILE)

        use = tables["use"]
        inferred: dict[str, list[str]] = {
            "goods": list(use.row_labels),
            "activities": list(use.col_labels),
            "factors": list(tables["value_added"].row_labels),
            "institutions": list(tables["final_demand"].col_labels),
            "tax_accounts": [],
            "ext_accounts": [],
        }
        taxes = tables["taxes"]
        if taxes is not None:
            inferred["tax_accounts"] = list(dict.fromkeys(taxes.row_labels))
        trade = tables["imports"] if tables["imports"] is not None else tables["exports"]
        if trade is not None:
            inferred["ext_accounts"] = list(trade.col_labels)

        return {
            category: declared.get(category, labels)
            for category, labels in inferred.items()
        }


def _read_table(path: Path) -> LabeledMatrix:
    if not path.exists():
        msg = f"Required table missing: {path}"
        raise FileNotFoundError(msg)
    df = pd.read_csv(path, dtype={DEFAULT_LABEL_COLUMN: str})
    if DEFAULT_LABEL_COLUMN in df.columns:
        # Account codes like "NA" or "NULL" are labels, not missing values;
        # numeric cells keep the default NA parsing
        df[DEFAULT_LABEL_COLUMN] = pd.read_csv(
            path,
            usecols=[DEFAULT_LABEL_COLUMN],
            dtype=str,
            keep_default_na=False,
        )[DEFAULT_LABEL_COLUMN]
    return labeled_matrix_from_dataframe(df)


def _read_accounts(path: Path) -> dict[str, list[str]]:
    """Read accounts.csv (set, item) into category -> ordered labels."""
    if not path.exists():
        return {}
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    for column in ("set", "item"):
        if column not in df.columns:
            msg = f"{path.name} must have 'set' and 'item' columns"
            raise ValueError(msg)

    declared: dict[str, list[str]] = {}
    for set_name, item in zip(df["set"], df["item"]):
        category = _SET_TO_CATEGORY.get(set_name)
        if category is None:
            msg = (
                f"Unknown set '{set_name}' in {path.name}. "
                f"Valid sets: {sorted(_SET_TO_CATEGORY)}"
            )
            raise ValueError(msg)
        declared.setdefault(category, []).append(item)
    return declared
