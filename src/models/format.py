"""
Format data models

FlavoredFormat is a format name plus the extensions a user asked to enable
or disable; ExtensionsConfig describes which extensions a writer turns on by
default and which it accepts at all.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class FlavoredFormat:
    """
    A format name with an explicit extensions diff

    Attributes:
        name: Base format name (e.g. "markdown", "html5", "writer.py")
        enabled: Extensions switched on with "+ext", in source order
        disabled: Extensions switched off with "-ext", in source order

    Example:
        "markdown+pipe_tables-smart" ->
        FlavoredFormat(name="markdown", enabled=("pipe_tables",), disabled=("smart",))
    """
    name: str
    enabled: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtensionsConfig:
    """
    Extension defaults and capabilities of one writer

    Attributes:
        default: Extensions active when the user asks for nothing
        supported: Every extension the writer accepts
    """
    default: FrozenSet[str] = field(default_factory=frozenset)
    supported: FrozenSet[str] = field(default_factory=frozenset)
