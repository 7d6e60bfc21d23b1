import os
from typing import Iterable, List

from .. import config
from ..models import FilterConfig
from .kinds import FileKind


def is_hidden(path) -> bool:
    """A path is hidden when its base name starts with a dot."""
    return os.path.basename(os.fspath(path)).startswith(config.HIDDEN_PREFIX)


def is_compressed_output(path) -> bool:
    """Plain substring test, so any path mentioning the marker is excluded."""
    return config.COMPRESSED_MARKER in os.fspath(path)


def filter_paths(paths: Iterable[str], kind: FileKind, options: FilterConfig) -> List[str]:
    """
    Reduces `paths` to those of `kind`.

    Order of the input is preserved and each path is returned at most once.
    Works on the path strings only; the filesystem is never touched.
    """
    kept: List[str] = []
    seen = set()
    for path in paths:
        p = os.fspath(path)
        if options.exclude_hidden and is_hidden(p):
            continue
        if is_compressed_output(p):
            continue
        if not kind.matches(p):
            continue
        if p in seen:
            continue
        seen.add(p)
        kept.append(p)
    return kept


class FileFilter:
    """Binds a kind to the run's filter options."""

    def __init__(self, kind: FileKind, options: FilterConfig):
        self.kind = kind
        self.options = options

    def filter_files(self, paths: Iterable[str]) -> List[str]:
        return filter_paths(paths, self.kind, self.options)

    def __repr__(self) -> str:
        return f"FileFilter({self.kind.label()}, {self.options})"
