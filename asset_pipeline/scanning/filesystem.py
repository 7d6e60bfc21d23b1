import os
import stat
import logging
from typing import Callable, List, Optional, TypeVar

from ..exceptions import FileAccessError, MissingFileError

T = TypeVar("T")

# visit(path, is_dir). Raise to abort the walk.
Visitor = Callable[[str, bool], None]


class DiskScanner:
    """
    Recursive directory walker.

    Entries within a directory are visited in lexical name order, so the
    order is stable for an unchanged tree and is used as the canonical order
    by every later stage.
    """

    def walk(self, root, visit: Visitor) -> None:
        """
        Calls `visit(path, is_dir)` for root and every entry below it.

        Raises MissingFileError if root does not exist and FileAccessError if
        a directory cannot be listed. Anything raised by `visit` propagates.
        """
        root_str = os.fspath(root)
        try:
            is_dir = stat.S_ISDIR(os.stat(root_str).st_mode)
        except FileNotFoundError as e:
            raise MissingFileError(f"Root not found: {root_str}", path=root_str, stage="discovery") from e
        except OSError as e:
            raise FileAccessError(f"Cannot stat root: {e}", path=root_str, stage="discovery") from e

        visit(root_str, is_dir)
        if is_dir:
            self._walk_dir(root_str, visit)

    def _walk_dir(self, directory: str, visit: Visitor) -> None:
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            raise FileAccessError(f"Cannot list directory: {e}", path=directory, stage="discovery") from e

        # Sort for stable traversal order
        entries.sort(key=lambda e: e.name)

        for entry in entries:
            is_dir = entry.is_dir(follow_symlinks=False)
            visit(entry.path, is_dir)
            if is_dir:
                self._walk_dir(entry.path, visit)

    def list_files(self, root) -> List[str]:
        """Every non-directory path under root, in walk order."""
        return self.iterate_files(root, lambda path: path)

    def iterate_files(self, root, iterator: Optional[Callable[[str], T]] = None) -> List[T]:
        """
        Applies `iterator` to every file under root and collects the results.
        """
        results: List[T] = []

        def _visit(path: str, is_dir: bool) -> None:
            if is_dir:
                return
            results.append(iterator(path) if iterator else path)

        self.walk(root, _visit)
        logging.debug(f"Discovered {len(results)} files under {os.fspath(root)}")
        return results
