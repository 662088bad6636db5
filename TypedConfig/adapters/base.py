"""
Persistence adapter contract.

An adapter loads tree-shaped data from a source and stores a tree to a
destination. The store never looks inside the bytes; it only requires that
``load`` return a mapping of string keys to scalars, lists or nested
mappings.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


class PersistenceAdapter(ABC):
    """Loads and stores configuration trees in one concrete format."""

    #: Human readable format name used in log messages
    name = "abstract"

    #: Whether ``load`` needs a file path; False for sources like the environment
    requires_path = True

    #: Whether ``store`` is unsupported; the store refuses to save through it
    read_only = False

    @abstractmethod
    def load(self, source: Optional[Path]) -> Dict[str, Any]:
        """
        Parse ``source`` and return its data.

        Raises:
            OSError: If the source cannot be read
            ValueError: If the source is not valid for this format
        """

    @abstractmethod
    def store(self, tree: Mapping[str, Any], destination: Path) -> None:
        """
        Write ``tree`` to ``destination``.

        Raises:
            OSError: If the destination cannot be written
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
