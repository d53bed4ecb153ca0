"""Orders files by their modification time."""

from __future__ import annotations

import enum
import os
from os import PathLike
from typing import Union

PathArg = Union[str, "PathLike[str]"]


class CompareResult(enum.Enum):
    """Outcome of comparing one element with another."""

    LESS_THAN = -1
    EQUAL = 0
    GREATER_THAN = 1


def _modified_msecs(path: PathArg) -> int:
    return os.stat(path).st_mtime_ns // 1_000_000


class FileTimeComparator:
    """Compares files by last modification time, to the millisecond."""

    def difference(self, current: PathArg, base: PathArg) -> int:
        """Milliseconds by which ``current`` was modified after ``base``."""
        return _modified_msecs(current) - _modified_msecs(base)

    def compare(self, current: PathArg, base: PathArg) -> CompareResult:
        """Whether ``current`` was modified before, with, or after ``base``."""
        delta = self.difference(current, base)
        if delta < 0:
            return CompareResult.LESS_THAN
        if delta == 0:
            return CompareResult.EQUAL
        return CompareResult.GREATER_THAN

    def key(self, path: PathArg) -> int:
        """Sort key: the file's modification time in milliseconds."""
        return _modified_msecs(path)