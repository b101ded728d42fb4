"""Placeholder adapters for statistical sources without a mapping yet.

Both fail loudly instead of returning an empty bundle.
"""

from src.data.adapters.base import IOAdapter
from src.data.io_bundle import IOBundle


class EurostatAdapter(IOAdapter):
    """Placeholder for Eurostat supply/use table extraction."""

    @property
    def name(self) -> str:
        return "eurostat"

    def load_iobundle(self) -> IOBundle:
        """Raises:
            NotImplementedError: Always; no Eurostat mapping exists yet.
        """
        raise NotImplementedError(
            "Eurostat adapter not implemented yet. "
            "Map your source tables into an IOBundle."
        )


class GTAPAdapter(IOAdapter):
    """Placeholder for GTAP database extraction."""

    @property
    def name(self) -> str:
        return "gtap"

    def load_iobundle(self) -> IOBundle:
        """Raises:
            NotImplementedError: Always; no GTAP mapping exists yet.
        """
        raise NotImplementedError(
            "GTAP adapter not implemented yet. "
            "Map your source tables into an IOBundle."
        )
