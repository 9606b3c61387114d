from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory FileSystem with fault injection for walker tests.
3. Builders for on-disk sample trees.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from rdu.infra.fs import Entry, FileSystem  # noqa: E402

# File sizes are ints, directories are dicts.
FakeTree = Dict[str, Union[int, "FakeTree"]]

# The tree used by the walker scenarios: 1000 + 2000 + 3000 bytes.
SCENARIO_FILES = [
    ("file1.txt", 1000),
    ("dir1/file2.txt", 2000),
    ("dir1/dir2/file3.txt", 3000),
]


# -----------------------------------------------------------------------------
# In-memory filesystem
# -----------------------------------------------------------------------------
class FakeEntry(Entry):
    def __init__(self, fs: "FakeFileSystem", path: str, name: str) -> None:
        self._fs = fs
        self._path = path
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        return self._path

    def is_dir(self) -> bool:
        if self._path in self._fs.broken_type:
            raise OSError(f"cannot stat '{self._path}'")
        return isinstance(self._fs.nodes[self._path], dict)

    def size(self) -> int:
        if self._path in self._fs.broken_size:
            raise PermissionError(f"Permission denied: '{self._path}'")
        node = self._fs.nodes[self._path]
        return node if isinstance(node, int) else 4096


class FakeFileSystem(FileSystem):
    """
    FileSystem over a nested dict, rooted at `root`.

    Paths listed in `unlistable`, `broken_type` or `broken_size` fail the
    matching operation with an OSError.
    """

    def __init__(
            self,
            tree: FakeTree,
            root: str = "root",
            unlistable: Iterable[str] = (),
            broken_type: Iterable[str] = (),
            broken_size: Iterable[str] = (),
    ) -> None:
        self.root = root
        self.unlistable = set(unlistable)
        self.broken_type = set(broken_type)
        self.broken_size = set(broken_size)
        self.nodes: Dict[str, Any] = {}
        self.listed: List[str] = []
        self._index(root, tree)

    def _index(self, root: str, tree: FakeTree) -> None:
        stack = [(root, tree)]
        while stack:
            path, node = stack.pop()
            self.nodes[path] = node
            if isinstance(node, dict):
                stack.extend((os.path.join(path, name), child) for name, child in node.items())

    def list_entries(self, path: str) -> List[Entry]:
        self.listed.append(path)
        if path in self.unlistable:
            raise PermissionError(f"Permission denied: '{path}'")
        if path not in self.nodes:
            raise FileNotFoundError(f"No such file or directory: '{path}'")
        node = self.nodes[path]
        if not isinstance(node, dict):
            raise NotADirectoryError(f"Not a directory: '{path}'")
        return [FakeEntry(self, os.path.join(path, name), name) for name in node]


def scenario_tree() -> FakeTree:
    return {
        "file1.txt": 1000,
        "dir1": {
            "file2.txt": 2000,
            "dir2": {"file3.txt": 3000},
        },
    }


def make_wide_tree(width: int, depth: int, file_size: int = 10) -> FakeTree:
    """Build a tree with `width` files and subdirectories per level."""
    node: FakeTree = {f"f{i}.bin": file_size + i for i in range(width)}
    if depth > 0:
        for i in range(width):
            node[f"d{i}"] = make_wide_tree(width, depth - 1, file_size)
    return node


def expected_total(tree: FakeTree) -> int:
    return sum(v if isinstance(v, int) else expected_total(v) for v in tree.values())


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_fs() -> Callable[..., FakeFileSystem]:
    """Factory for in-memory filesystems."""
    return FakeFileSystem


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Iterable], Path]:
    """Factory writing (relative path, size) pairs under a fresh root dir."""

    def _make(files: Iterable, name: str = "root") -> Path:
        root = tmp_path / name
        root.mkdir()
        for rel, size in files:
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"\0" * size)
        return root

    return _make


@pytest.fixture
def scenario_root(make_tree: Callable[[Iterable], Path]) -> Path:
    """On-disk copy of the three-file scenario tree."""
    return make_tree(SCENARIO_FILES)


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the persistent configuration at a temp file that does not exist yet."""
    path = tmp_path / "cfg" / "config.json"
    monkeypatch.setenv("RDU_CONFIG", str(path))
    return path
