"""Filesystem gates and the staging directory.

The data generator writes its output into its working directory, so it is run
inside a dedicated staging directory under the project root. The staging path
is handed to the stages that need it instead of changing the process-wide
working directory.
"""

import logging
from pathlib import Path
from typing import Union


class PathGate:
    """Stateless existence check for required files and directories."""

    @staticmethod
    def exists(path: Union[str, Path]) -> bool:
        """Return True if the file or directory exists. Never raises for a missing path."""
        return Path(path).exists()


class StagingArea:
    """A working subdirectory directly under the project root."""

    def __init__(self, root: Path, name: str):
        """
        Args:
            root: Project root directory
            name: Name of the staging subdirectory
        """
        self.root = Path(root)
        self.name = name

    @property
    def path(self) -> Path:
        return self.root / self.name

    def ensure(self) -> Path:
        """Create the staging directory if it does not exist yet.

        The directory is created non-recursively, so a missing root is an error.

        Returns:
            Path to the staging directory

        Raises:
            FileNotFoundError: If the root directory does not exist
        """
        if not PathGate.exists(self.path):
            print(f"Creating {self.name} directory...")
            self.path.mkdir()
        logging.debug(f"Staging directory: {self.path}")
        return self.path

    def resolve(self, relative: Union[str, Path]) -> Path:
        """Resolve a path inside the staging directory."""
        return self.path / relative
