"""IO bundle: validated collection of IO tables and account labels.

An IOBundle holds the account category lists (goods, activities, factors,
institutions, tax and external accounts) and the labeled tables needed to
assemble a SAM. All label checks run once, at construction.

Account universe order:
  goods ++ activities ++ factors ++ institutions ++ tax_accounts ++ ext_accounts
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from src.data.errors import DuplicateAccountError, LabelMismatchError
from src.data.labeled_matrix import LabeledMatrix

DEFAULT_TAX_ACCOUNTS: tuple[str, ...] = ("TAX",)
DEFAULT_EXT_ACCOUNTS: tuple[str, ...] = ("EXT",)

CATEGORY_NAMES: tuple[str, ...] = (
    "goods",
    "activities",
    "factors",
    "institutions",
    "tax_accounts",
    "ext_accounts",
)

# Set names used in sets.csv / accounts.csv for each category
SET_NAMES: dict[str, str] = {
    "goods": "goods",
    "activities": "activities",
    "factors": "factors",
    "institutions": "institutions",
    "tax_accounts": "taxes",
    "ext_accounts": "externals",
}


def all_accounts(
    goods: Sequence[str],
    activities: Sequence[str],
    factors: Sequence[str],
    institutions: Sequence[str],
    tax_accounts: Sequence[str],
    ext_accounts: Sequence[str],
) -> list[str]:
    """Ordered list of SAM accounts across all six categories."""
    return [
        *goods, *activities, *factors,
        *institutions, *tax_accounts, *ext_accounts,
    ]


@dataclass(frozen=True, kw_only=True, eq=False)
class IOBundle:
    """Container for IO tables and account labels used to construct a SAM.

    Required tables must carry exactly the expected labels in order:
      use           goods x activities
      supply        activities x goods
      value_added   factors x activities
      final_demand  goods x institutions

    Optional tables:
      taxes          rows within tax_accounts, columns within the account universe
      imports        goods x ext_accounts (exact order)
      exports        goods x ext_accounts (exact order)
      factor_income  institutions x factors (exact order)

    Empty tax_accounts / ext_accounts fall back to ["TAX"] / ["EXT"].

    Raises:
        LabelMismatchError: If a table's labels disagree with the categories.
        DuplicateAccountError: If an account name is declared twice.
    """

    goods: Sequence[str]
    activities: Sequence[str]
    factors: Sequence[str]
    institutions: Sequence[str]
    tax_accounts: Sequence[str] = field(default=())
    ext_accounts: Sequence[str] = field(default=())
    use: LabeledMatrix
    supply: LabeledMatrix
    value_added: LabeledMatrix
    final_demand: LabeledMatrix
    taxes: LabeledMatrix | None = None
    imports: LabeledMatrix | None = None
    exports: LabeledMatrix | None = None
    factor_income: LabeledMatrix | None = None

    def __post_init__(self) -> None:
        tax_accounts = self.tax_accounts or DEFAULT_TAX_ACCOUNTS
        ext_accounts = self.ext_accounts or DEFAULT_EXT_ACCOUNTS

        # Freeze category lists so the bundle cannot be mutated through them
        for name, labels in (
            ("goods", self.goods),
            ("activities", self.activities),
            ("factors", self.factors),
            ("institutions", self.institutions),
            ("tax_accounts", tax_accounts),
            ("ext_accounts", ext_accounts),
        ):
            object.__setattr__(self, name, tuple(str(x) for x in labels))

        self._assert_unique_accounts()

        _assert_labels(self.use, self.goods, self.activities, "use")
        _assert_labels(self.supply, self.activities, self.goods, "supply")
        _assert_labels(self.value_added, self.factors, self.activities, "value_added")
        _assert_labels(self.final_demand, self.goods, self.institutions, "final_demand")

        if self.taxes is not None:
            _assert_subset_labels(self.taxes.row_labels, self.tax_accounts, "taxes rows")
            _assert_subset_labels(self.taxes.col_labels, self.accounts, "taxes columns")
        if self.imports is not None:
            _assert_labels(self.imports, self.goods, self.ext_accounts, "imports")
        if self.exports is not None:
            _assert_labels(self.exports, self.goods, self.ext_accounts, "exports")
        if self.factor_income is not None:
            _assert_labels(self.factor_income, self.institutions, self.factors, "factor_income")

    @property
    def accounts(self) -> list[str]:
        """Ordered account universe (SAM row and column order)."""
        return all_accounts(
            self.goods,
            self.activities,
            self.factors,
            self.institutions,
            self.tax_accounts,
            self.ext_accounts,
        )

    def account_index(self) -> dict[str, int]:
        """Map each account name to its position in the universe."""
        return {name: i for i, name in enumerate(self.accounts)}

    def categories(self) -> dict[str, tuple[str, ...]]:
        """Category name -> account labels, in universe order."""
        return {name: getattr(self, name) for name in CATEGORY_NAMES}

    def _assert_unique_accounts(self) -> None:
        seen: dict[str, str] = {}
        for category, labels in self.categories().items():
            for label in labels:
                if label in seen:
                    raise DuplicateAccountError(label, [seen[label], category])
                seen[label] = category


def _assert_labels(
    mat: LabeledMatrix,
    rows: Sequence[str],
    cols: Sequence[str],
    name: str,
) -> None:
    """Ensure labeled matrix rows/cols match the expected ordering exactly."""
    for axis, actual, expected in (
        ("Row", mat.row_labels, rows),
        ("Column", mat.col_labels, cols),
    ):
        if tuple(actual) == tuple(expected):
            continue
        label = _first_difference(actual, expected)
        detail = f" (first mismatch at '{label}')" if label is not None else ""
        raise LabelMismatchError(
            name,
            f"{axis} labels for {name} do not match expected order{detail}.",
            label=label,
        )


def _first_difference(actual: Sequence[str], expected: Sequence[str]) -> str | None:
    """First label of `actual` that is out of place, or None if it is a prefix."""
    for got, want in zip(actual, expected):
        if got != want:
            return got
    if len(actual) > len(expected):
        return actual[len(expected)]
    return None


def _assert_subset_labels(
    labels: Sequence[str],
    universe: Sequence[str],
    name: str,
) -> None:
    """Ensure every label is present in a known universe (order-independent)."""
    known = set(universe)
    for label in labels:
        if label not in known:
            raise LabelMismatchError(
                name,
                f"Label '{label}' in {name} is not present in the account list.",
                label=label,
            )
