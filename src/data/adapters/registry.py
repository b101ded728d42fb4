"""Format-name registry for IO source adapters.

Routing rules:
- "csv"      -> CsvDirectoryAdapter (curated local tables)
- "eurostat" -> EurostatAdapter (placeholder)
- "gtap"     -> GTAPAdapter (placeholder)
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.data.adapters.base import IOAdapter
from src.data.adapters.csv_directory import CsvDirectoryAdapter
from src.data.adapters.placeholders import EurostatAdapter, GTAPAdapter
from src.data.io_bundle import IOBundle

logger = logging.getLogger(__name__)

ADAPTERS: dict[str, type[IOAdapter]] = {
    "csv": CsvDirectoryAdapter,
    "eurostat": EurostatAdapter,
    "gtap": GTAPAdapter,
}


def get_adapter(source_format: str, source: str | Path) -> IOAdapter:
    """Build the adapter registered for `source_format`.

    Raises:
        KeyError: If no adapter is registered under that name.
    """
    try:
        adapter_cls = ADAPTERS[source_format.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown source format: '{source_format}'. "
            f"Known formats: {sorted(ADAPTERS)}"
        ) from None
    return adapter_cls(source)


def load_iobundle(adapter: IOAdapter) -> IOBundle:
    """Normalise an external source into an IOBundle via its adapter."""
    logger.info("Loading IO bundle with %s adapter from %s", adapter.name, adapter.source)
    return adapter.load_iobundle()
