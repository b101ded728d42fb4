"""Tests for IOBundle label validation.

Covers:
  - Default tax / external accounts
  - Exact-order checks on required and trade / factor-income tables
  - Subset checks on the taxes table
  - Account universe ordering and duplicate detection
"""

from __future__ import annotations

import numpy as np
import pytest

from src.data.errors import DuplicateAccountError, LabelMismatchError
from src.data.io_bundle import (
    DEFAULT_EXT_ACCOUNTS,
    DEFAULT_TAX_ACCOUNTS,
    IOBundle,
    all_accounts,
)
from src.data.labeled_matrix import LabeledMatrix
from tests.bundle_factory import (
    ACTIVITIES,
    EXT_ACCOUNTS,
    FACTORS,
    GOODS,
    INSTITUTIONS,
    TAX_ACCOUNTS,
    make_bundle,
    make_required_tables,
)


# ===================================================================
# 1. Defaults and universe
# ===================================================================


class TestDefaults:
    """Empty tax / external lists fall back to single default accounts."""

    def test_default_tax_and_ext_accounts(self) -> None:
        bundle = IOBundle(
            goods=GOODS,
            activities=ACTIVITIES,
            factors=FACTORS,
            institutions=INSTITUTIONS,
            **make_required_tables(),
        )
        assert bundle.tax_accounts == DEFAULT_TAX_ACCOUNTS == ("TAX",)
        assert bundle.ext_accounts == DEFAULT_EXT_ACCOUNTS == ("EXT",)

    def test_explicit_empty_lists_use_defaults(self) -> None:
        bundle = make_bundle(
            tax_accounts=[], ext_accounts=[],
            taxes=None, imports=None, exports=None,
        )
        assert bundle.accounts[-2:] == ["TAX", "EXT"]

    def test_optional_tables_default_to_none(self, minimal_bundle: IOBundle) -> None:
        assert minimal_bundle.taxes is None
        assert minimal_bundle.imports is None
        assert minimal_bundle.exports is None
        assert minimal_bundle.factor_income is None


class TestAccountUniverse:
    """Accounts are concatenated in fixed category order."""

    def test_order(self, reference_bundle: IOBundle) -> None:
        assert reference_bundle.accounts == [
            "G1", "G2", "A1", "A2", "K", "L",
            "HOH", "GOV", "INV", "IDT", "TRF", "ROW", "CAP",
        ]

    def test_all_accounts_helper(self) -> None:
        assert all_accounts(["g"], ["a"], ["f"], ["i"], ["t"], ["e"]) == [
            "g", "a", "f", "i", "t", "e",
        ]

    def test_account_index(self, reference_bundle: IOBundle) -> None:
        index = reference_bundle.account_index()
        assert index["G1"] == 0
        assert index["CAP"] == 12
        assert len(index) == 13

    def test_categories(self, reference_bundle: IOBundle) -> None:
        cats = reference_bundle.categories()
        assert list(cats) == [
            "goods", "activities", "factors",
            "institutions", "tax_accounts", "ext_accounts",
        ]
        assert cats["institutions"] == ("HOH", "GOV", "INV")

    def test_category_lists_are_frozen(self) -> None:
        goods = list(GOODS)
        bundle = make_bundle(goods=goods)
        goods.append("G3")
        assert bundle.goods == ("G1", "G2")


# ===================================================================
# 2. Required tables
# ===================================================================


class TestRequiredTables:
    """Required tables must carry the category labels in exact order."""

    @pytest.mark.parametrize(
        ("table", "rows", "cols"),
        [
            ("use", ["G2", "G1"], ACTIVITIES),
            ("use", GOODS, ["A2", "A1"]),
            ("supply", ["A2", "A1"], GOODS),
            ("value_added", ["L", "K"], ACTIVITIES),
            ("final_demand", GOODS, ["GOV", "HOH", "INV"]),
        ],
    )
    def test_permuted_labels_raise(self, table: str, rows, cols) -> None:
        mat = LabeledMatrix(rows, cols, np.zeros((len(rows), len(cols))))
        with pytest.raises(LabelMismatchError, match=table) as exc_info:
            make_bundle(**{table: mat})
        assert exc_info.value.table == table

    def test_row_mismatch_message(self) -> None:
        use = LabeledMatrix(["G2", "G1"], ACTIVITIES, np.zeros((2, 2)))
        with pytest.raises(LabelMismatchError, match="Row labels for use") as exc_info:
            make_bundle(use=use)
        assert exc_info.value.label == "G2"

    def test_column_mismatch_message(self) -> None:
        supply = LabeledMatrix(ACTIVITIES, ["G1", "G3"], np.zeros((2, 2)))
        with pytest.raises(LabelMismatchError, match="Column labels for supply") as exc_info:
            make_bundle(supply=supply)
        assert exc_info.value.label == "G3"

    def test_missing_label_raises(self) -> None:
        value_added = LabeledMatrix(["K"], ACTIVITIES, np.zeros((1, 2)))
        with pytest.raises(LabelMismatchError, match="value_added"):
            make_bundle(value_added=value_added)

    def test_label_mismatch_is_value_error(self) -> None:
        use = LabeledMatrix(["G2", "G1"], ACTIVITIES, np.zeros((2, 2)))
        with pytest.raises(ValueError):
            make_bundle(use=use)


# ===================================================================
# 3. Optional tables
# ===================================================================


class TestTaxesTable:
    """taxes: rows within tax_accounts, columns within the account universe."""

    def test_subset_in_any_order_accepted(self) -> None:
        taxes = LabeledMatrix(["TRF"], ["HOH", "A1"], [[1.0, 2.0]])
        bundle = make_bundle(taxes=taxes)
        assert bundle.taxes is taxes

    def test_unknown_row_raises(self) -> None:
        taxes = LabeledMatrix(["VAT"], ["A1"], [[1.0]])
        with pytest.raises(LabelMismatchError, match="'VAT' in taxes rows") as exc_info:
            make_bundle(taxes=taxes)
        assert exc_info.value.label == "VAT"
        assert exc_info.value.table == "taxes rows"

    def test_row_outside_tax_accounts_raises(self) -> None:
        # HOH is a known account but not a tax account
        taxes = LabeledMatrix(["HOH"], ["A1"], [[1.0]])
        with pytest.raises(LabelMismatchError, match="taxes rows"):
            make_bundle(taxes=taxes)

    def test_unknown_column_raises(self) -> None:
        taxes = LabeledMatrix(["IDT"], ["A9"], [[1.0]])
        with pytest.raises(LabelMismatchError, match="'A9' in taxes columns"):
            make_bundle(taxes=taxes)


class TestTradeAndFactorIncome:
    """imports / exports / factor_income must match exactly."""

    @pytest.mark.parametrize("table", ["imports", "exports"])
    def test_trade_permuted_columns_raise(self, table: str) -> None:
        mat = LabeledMatrix(GOODS, ["CAP", "ROW"], np.zeros((2, 2)))
        with pytest.raises(LabelMismatchError, match=table):
            make_bundle(**{table: mat})

    def test_trade_against_default_ext_account(self) -> None:
        imports = LabeledMatrix(GOODS, ["EXT"], [[1.0], [2.0]])
        bundle = make_bundle(ext_accounts=[], exports=None, imports=imports)
        assert bundle.ext_accounts == ("EXT",)

    def test_factor_income_permuted_raises(self) -> None:
        mat = LabeledMatrix(["GOV", "HOH", "INV"], FACTORS, np.zeros((3, 2)))
        with pytest.raises(LabelMismatchError, match="factor_income"):
            make_bundle(factor_income=mat)


# ===================================================================
# 4. Duplicate accounts
# ===================================================================


class TestDuplicateAccounts:
    """Account names must be unique across the whole universe."""

    def test_duplicate_across_categories_raises(self) -> None:
        tables = make_required_tables()
        tables["final_demand"] = LabeledMatrix(
            GOODS, ["HOH", "GOV", "K"], np.zeros((2, 3)),
        )
        with pytest.raises(DuplicateAccountError, match="'K'") as exc_info:
            IOBundle(
                goods=GOODS,
                activities=ACTIVITIES,
                factors=FACTORS,
                institutions=["HOH", "GOV", "K"],
                tax_accounts=TAX_ACCOUNTS,
                ext_accounts=EXT_ACCOUNTS,
                **tables,
            )
        assert exc_info.value.categories == ["factors", "institutions"]

    def test_duplicate_within_category_raises(self) -> None:
        with pytest.raises(DuplicateAccountError, match="'IDT'"):
            make_bundle(tax_accounts=["IDT", "IDT"], taxes=None)

    def test_default_account_colliding_raises(self) -> None:
        with pytest.raises(DuplicateAccountError, match="'TAX'"):
            make_bundle(
                tax_accounts=[], ext_accounts=["TAX"],
                taxes=None, imports=None, exports=None,
            )
