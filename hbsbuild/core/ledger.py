"""
The dependency ledger: every file read during a pass that should trigger a
rebuild when it changes.
"""
import os
from typing import Iterable, Iterator, List, Optional


def normalize_path(file_path: "os.PathLike[str] | str") -> str:
    # absolute, normalised string form used for all ledger comparisons.
    return os.path.abspath(os.fspath(file_path))


class DependencyLedger:
    """Append-only list of absolute file paths.

    Duplicates are kept; the ledger is only ever queried with membership
    tests. It is never cleared for the lifetime of its owner.
    """

    def __init__(self) -> None:
        self._paths: List[str] = []

    def add(self, *file_paths: Optional["os.PathLike[str] | str"]) -> None:
        self._paths.extend(normalize_path(p) for p in file_paths if p)

    def read_text(self, file_path: "os.PathLike[str] | str") -> str:
        # reads a file and records it as a dependency.
        self.add(file_path)
        with open(file_path, "r", encoding="utf-8") as f_obj:
            return f_obj.read()

    def contains_any(self, file_paths: Iterable[str]) -> bool:
        tracked = set(self._paths)
        return any(normalize_path(p) in tracked for p in file_paths)

    def __contains__(self, file_path: object) -> bool:
        if not isinstance(file_path, (str, os.PathLike)):
            return False
        return normalize_path(file_path) in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)
