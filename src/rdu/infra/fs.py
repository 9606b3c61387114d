from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the directory-listing capability consumed by the walker and the
OS-specific location of persistent application data. Listing, type checks
and size reads raise OSError on failure; deciding what a failure means is
left to the caller.
"""

import os
from abc import ABC, abstractmethod
from typing import List

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "rdu"
UNIX_APP_DIR_NAME = ".rdu"

# -----------------------------------------------------------------------------
# LISTING CAPABILITY
# -----------------------------------------------------------------------------


class Entry(ABC):
    """
    A single child of a listed directory.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def path(self) -> str:
        """Parent path joined with the entry name."""
        pass

    @abstractmethod
    def is_dir(self) -> bool:
        """
        Report whether the entry is a directory, without following symlinks.

        Raises:
            OSError: If the entry type cannot be determined.
        """
        pass

    @abstractmethod
    def size(self) -> int:
        """
        Return the byte length of the entry, without following symlinks.

        Raises:
            OSError: If the metadata cannot be read.
        """
        pass


class FileSystem(ABC):
    """
    Abstract listing capability injected into the walker.
    """

    @abstractmethod
    def list_entries(self, path: str) -> List[Entry]:
        """
        List the immediate children of a directory.

        Args:
            path: Directory to list.

        Returns:
            List[Entry]: Children in no particular order.

        Raises:
            OSError: If the path cannot be listed (missing, denied, not a directory).
        """
        pass


class LocalEntry(Entry):
    """Entry backed by an os.DirEntry from os.scandir."""

    __slots__ = ("_entry",)

    def __init__(self, entry: os.DirEntry) -> None:
        self._entry = entry

    @property
    def name(self) -> str:
        return self._entry.name

    @property
    def path(self) -> str:
        return self._entry.path

    def is_dir(self) -> bool:
        return self._entry.is_dir(follow_symlinks=False)

    def size(self) -> int:
        return self._entry.stat(follow_symlinks=False).st_size

    def __repr__(self) -> str:
        return f"LocalEntry({self._entry.path!r})"


class LocalFileSystem(FileSystem):
    """Listing capability over the local disk."""

    def list_entries(self, path: str) -> List[Entry]:
        with os.scandir(path) as it:
            return [LocalEntry(e) for e in it]


# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/rdu
    - Linux/Mac: ~/.rdu

    The directory is not created here; writers create it on demand.

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy of a target file if missing.

    Args:
        path: Path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
