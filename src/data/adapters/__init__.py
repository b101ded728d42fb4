"""Source adapters that normalise external IO data into an IOBundle."""

from src.data.adapters.base import IOAdapter
from src.data.adapters.csv_directory import CsvDirectoryAdapter
from src.data.adapters.placeholders import EurostatAdapter, GTAPAdapter
from src.data.adapters.registry import ADAPTERS, get_adapter, load_iobundle

__all__ = [
    "ADAPTERS",
    "CsvDirectoryAdapter",
    "EurostatAdapter",
    "GTAPAdapter",
    "IOAdapter",
    "get_adapter",
    "load_iobundle",
]
