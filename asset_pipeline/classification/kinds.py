"""
File kinds: extension-based classification of paths.

A kind is any object with ``matches(path) -> bool`` and ``label() -> str``.
New kinds are added by registering another implementation; nothing that
consumes kinds needs to change.
"""
import os
from typing import Dict, FrozenSet, Iterable, List, Optional, Protocol, runtime_checkable

from .. import config


@runtime_checkable
class FileKind(Protocol):
    def matches(self, path: str) -> bool:
        ...

    def label(self) -> str:
        ...


def extension_of(path) -> str:
    """
    Returns the suffix of the base name starting at its last dot, or ''.

    Unlike Path.suffix, a base name such as '.png' yields '.png'.
    No case folding is applied.
    """
    name = os.path.basename(os.fspath(path))
    idx = name.rfind('.')
    if idx < 0:
        return ''
    return name[idx:]


class ExtensionKind:
    """A kind recognised purely by a fixed set of extensions."""

    def __init__(self, name: str, extensions: Iterable[str]):
        self._name = name
        self.extensions: FrozenSet[str] = frozenset(extensions)

    def matches(self, path: str) -> bool:
        return extension_of(path) in self.extensions

    def label(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"ExtensionKind({self._name!r}, {sorted(self.extensions)!r})"


JPEG = ExtensionKind("JPG", config.JPEG_EXTS)
PNG = ExtensionKind("PNG", config.PNG_EXTS)

# Identifier -> kind. Keys are lower-case for CLI lookups.
KINDS: Dict[str, FileKind] = {
    'jpeg': JPEG,
    'png': PNG,
}


def register_kind(key: str, kind: FileKind) -> None:
    KINDS[key.lower()] = kind


def get_kind(key: str) -> FileKind:
    try:
        return KINDS[key.lower()]
    except KeyError:
        raise KeyError(f"Unknown file kind '{key}'. Known kinds: {', '.join(sorted(KINDS))}") from None


def kind_for(path: str, kinds: Iterable[FileKind]) -> Optional[FileKind]:
    """Returns the first kind in `kinds` matching `path`, or None."""
    for kind in kinds:
        if kind.matches(path):
            return kind
    return None


def default_kinds() -> List[FileKind]:
    return [JPEG, PNG]
