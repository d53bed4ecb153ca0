"""Finding the directories and files of an image store, and its oldest files."""

from __future__ import annotations

import os
from fractions import Fraction
from os import PathLike
from typing import Iterable, Iterator, Union

from .file_time import FileTimeComparator

PathArg = Union[str, "PathLike[str]"]

DEFAULT_OLDEST_FRACTION = 0.3


def _entries(directory: str) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(
                (entry for entry in it if not entry.name.startswith(".")),
                key=lambda entry: entry.name,
            )
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return []


def _child_dirs(directory: str) -> Iterator[str]:
    for entry in _entries(directory):
        if entry.is_dir(follow_symlinks=False):
            yield os.path.join(directory, entry.name)


def scan_subdirs(base_dir: PathArg) -> list[str]:
    """All non-hidden directories under a base, level by level.

    The base itself comes first; each level follows the one above it, and
    names within a directory are taken in order. A missing base yields nothing.
    """
    base = os.path.abspath(os.fspath(base_dir))
    if not os.path.isdir(base):
        return []
    found = [base]
    level = [base]
    while level:
        level = [child for directory in level for child in _child_dirs(directory)]
        found.extend(level)
    return found


def scan_files(base_dir: PathArg) -> list[str]:
    """Non-hidden files of every directory that :func:`scan_subdirs` finds."""
    return [
        os.path.join(directory, entry.name)
        for directory in scan_subdirs(base_dir)
        for entry in _entries(directory)
        if entry.is_file()
    ]


def select_oldest(
    paths: Iterable[PathArg], fraction: float = DEFAULT_OLDEST_FRACTION
) -> list[str]:
    """The given share of the paths that were modified longest ago.

    The count is rounded down; the result is ordered oldest first, files
    modified at the same moment keeping their given order.
    """
    share = Fraction(str(fraction)) if isinstance(fraction, float) else Fraction(fraction)
    if not 0 <= share <= 1:
        raise ValueError("fraction must lie between 0 and 1")
    candidates = [os.fspath(path) for path in paths]
    count = int(len(candidates) * share)
    if not count:
        return []
    comparator = FileTimeComparator()
    return sorted(candidates, key=comparator.key)[:count]