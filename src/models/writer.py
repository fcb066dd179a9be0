"""
Writer models

A writer renders a document for one output format. Writers come in two
variants that callers must tell apart before invoking them: TextWriter
produces str, BinaryWriter produces bytes. Both receive the file-access
capability they are allowed to read resources through.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union, TYPE_CHECKING

from .format import ExtensionsConfig

if TYPE_CHECKING:
    from ..lib.sandbox import FileAccess


class WriterKind(Enum):
    """Variant tag of a writer"""
    TEXT = "text"
    BINARY = "binary"


@dataclass(frozen=True)
class TextWriter:
    """
    Writer producing text output

    Attributes:
        render: Function (writer_options, document, files) -> str
    """
    render: Callable[[Any, Any, "FileAccess"], str]
    kind: WriterKind = field(default=WriterKind.TEXT, init=False)

    def __call__(self, options: Any, document: Any, files: Optional["FileAccess"] = None) -> str:
        from ..lib.sandbox import LocalFileAccess
        return self.render(options, document, files or LocalFileAccess())


@dataclass(frozen=True)
class BinaryWriter:
    """
    Writer producing binary output

    Attributes:
        render: Function (writer_options, document, files) -> bytes
    """
    render: Callable[[Any, Any, "FileAccess"], bytes]
    kind: WriterKind = field(default=WriterKind.BINARY, init=False)

    def __call__(self, options: Any, document: Any, files: Optional["FileAccess"] = None) -> bytes:
        from ..lib.sandbox import LocalFileAccess
        return self.render(options, document, files or LocalFileAccess())


Writer = Union[TextWriter, BinaryWriter]


@dataclass
class WriterSpec:
    """
    Specification of a built-in writer

    Used by WriterRegistry to map format names to writers.

    Attributes:
        name: Format name the writer is registered under
        kind: Text or binary output
        description: Human-readable description
        handler: Render function wrapped into the writer variant
        extensions: Extension defaults and supported set
    """
    name: str
    kind: WriterKind
    description: str
    handler: Callable
    extensions: ExtensionsConfig = field(default_factory=ExtensionsConfig)

    def writer_make(self) -> Writer:
        """Wrap the handler in the variant matching this spec's kind"""
        if self.kind == WriterKind.BINARY:
            return BinaryWriter(self.handler)
        return TextWriter(self.handler)
