"""Validation errors raised while building labeled tables and IO bundles.

All errors subclass ValueError so callers that already guard on bad input
keep working. Nothing in the library catches them.
"""

from __future__ import annotations


class ShapeMismatchError(ValueError):
    """Matrix dimensions disagree with the row/column label counts."""

    def __init__(self, expected: tuple[int, int], actual: tuple[int, ...]) -> None:
        self.expected = expected
        self.actual = actual
        actual_str = "x".join(str(d) for d in actual)
        super().__init__(
            f"LabeledMatrix size mismatch: expected {expected[0]}x{expected[1]}, "
            f"got {actual_str}."
        )


class MissingColumnError(ValueError):
    """The designated row-label column is absent from a table."""

    def __init__(self, column: str) -> None:
        self.column = column
        super().__init__(f"Row label column '{column}' not found in DataFrame.")


class LabelMismatchError(ValueError):
    """A bundle table's labels do not match the expected account list."""

    def __init__(self, table: str, message: str, label: str | None = None) -> None:
        self.table = table
        self.label = label
        super().__init__(message)


class DuplicateAccountError(ValueError):
    """An account name appears more than once in the account universe."""

    def __init__(self, account: str, categories: list[str]) -> None:
        self.account = account
        self.categories = categories
        super().__init__(
            f"Account '{account}' is declared more than once "
            f"(in {', '.join(categories)}); account names must be unique."
        )
