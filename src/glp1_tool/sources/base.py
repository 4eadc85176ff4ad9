"""Clases base para fuentes de datos."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourcePaths:
    """Container for source directories."""

    root: Path


class DataSource(ABC):
    """Abstract data source."""

    def __init__(self, paths: SourcePaths) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the source folder exists.

        Raises:
            FileNotFoundError: If the folder is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    @abstractmethod
    def newest_file(self) -> Path:
        """Return the most recent export file in the source folder."""
