"""
File-access capabilities for writers

Writers never open files themselves; they read through the FileAccess
object they are invoked with. LocalFileAccess reads anything. In sandbox
mode writers are given a SandboxedFileAccess whose allow-list is fixed
before the writer is built.
"""

import os
from typing import FrozenSet, Iterable, List

from ..models.options import Options
from .errors import SandboxViolationError
from .fetch import item_fetch


def path_normalize(path: str) -> str:
    """Absolute, normalised form of a path used for allow-list comparison"""
    return os.path.normcase(os.path.abspath(os.path.expanduser(path)))


class FileAccess:
    """Interface of the capability writers read resources through"""

    def read(self, path: str) -> bytes:
        raise NotImplementedError


class LocalFileAccess(FileAccess):
    """Unrestricted access to local files and URLs"""

    def read(self, path: str) -> bytes:
        return item_fetch(path)

    def __repr__(self) -> str:
        return "LocalFileAccess()"


class SandboxedFileAccess(FileAccess):
    """
    Access limited to an explicit allow-list of paths.

    Args:
        allowed: Paths the writer may read; anything else raises
                 SandboxViolationError
    """

    def __init__(self, allowed: Iterable[str]) -> None:
        self.allowed: List[str] = list(allowed)
        self._normalized: FrozenSet[str] = frozenset(path_normalize(p) for p in self.allowed)

    def allows(self, path: str) -> bool:
        """Check whether a path is on the allow-list"""
        return path_normalize(path) in self._normalized

    def read(self, path: str) -> bytes:
        if not self.allows(path):
            raise SandboxViolationError(path)
        return item_fetch(path)

    def __repr__(self) -> str:
        return f"SandboxedFileAccess(allowed={self.allowed!r})"


def sandboxPaths_collect(options: Options) -> List[str]:
    """
    Build the sandbox allow-list from the options.

    Order: reference doc, epub metadata, epub cover image, citation style,
    citation abbreviations, epub fonts, bibliography files.
    """
    single = [
        options.reference_doc,
        options.epub_metadata,
        options.epub_cover_image,
        options.csl,
        options.citation_abbreviations,
    ]
    files = [path for path in single if path]
    files.extend(options.epub_fonts)
    files.extend(options.bibliography)
    return files
