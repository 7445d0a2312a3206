"""Lazy directory traversal."""

from __future__ import annotations

import os
import stat
from typing import Callable, Iterator, Optional

DirectoryFilter = Callable[[str], bool]


def posix_path(path: str) -> str:
    """Normalise backslash separators to forward slashes."""

    if "\\" in path:
        return path.replace("\\", "/")
    return path


def _children(directory: str) -> list[str]:
    names = os.listdir(directory)
    return [posix_path(os.path.join(directory, name)) for name in reversed(names)]


def traverse_directory(
    root: str,
    accept_directory: Optional[DirectoryFilter] = None,
) -> Iterator[str]:
    """Yield every regular file beneath *root*, depth first.

    Entries are visited in the order ``os.listdir`` reports them. Entries are
    inspected with ``lstat``, so symbolic links are neither followed nor
    yielded. Subdirectories are only entered when *accept_directory* returns
    true for their path.
    """

    pending = _children(root)
    while pending:
        pathname = pending.pop()
        mode = os.lstat(pathname).st_mode
        if stat.S_ISREG(mode):
            yield pathname
        elif stat.S_ISDIR(mode) and (
            accept_directory is None or accept_directory(pathname)
        ):
            pending.extend(_children(pathname))


def exclude_names(names) -> DirectoryFilter:
    """Build a directory filter rejecting exact basename matches."""

    excluded = frozenset(names)

    def _accept(pathname: str) -> bool:
        return os.path.basename(pathname) not in excluded

    return _accept
