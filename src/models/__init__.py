"""
Models package for docsettings

Contains data structures and type definitions for the resolution pipeline.
"""

from .state import ResolutionState, LogMessage, pipeline
from .format import FlavoredFormat, ExtensionsConfig
from .options import (
    Options,
    HTMLMathMethod,
    CiteMethod,
    WrapOption,
    TopLevelDivision,
    ReferenceLocation,
    ObfuscationMethod,
)
from .writer import Writer, TextWriter, BinaryWriter, WriterKind, WriterSpec
from .settings import WriterOptions, OutputSettings

__all__ = [
    "ResolutionState",
    "LogMessage",
    "pipeline",
    "FlavoredFormat",
    "ExtensionsConfig",
    "Options",
    "HTMLMathMethod",
    "CiteMethod",
    "WrapOption",
    "TopLevelDivision",
    "ReferenceLocation",
    "ObfuscationMethod",
    "Writer",
    "TextWriter",
    "BinaryWriter",
    "WriterKind",
    "WriterSpec",
    "WriterOptions",
    "OutputSettings",
]
