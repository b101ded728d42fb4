"""IOAdapter abstract interface.

An adapter normalises one external data source into an IOBundle. Whatever
the source format, the returned bundle has passed IOBundle validation.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from src.data.io_bundle import IOBundle


class IOAdapter(ABC):
    """Abstract source adapter producing an IOBundle."""

    def __init__(self, source: str | Path) -> None:
        self.source = str(source)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(source={self.source!r})"

    @property
    @abstractmethod
    def name(self) -> str:
        """Short format name used in the adapter registry and logs."""
        ...

    @abstractmethod
    def load_iobundle(self) -> IOBundle:
        """Read the source and return a validated IOBundle."""
        ...
