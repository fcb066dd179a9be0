"""
docsettings - conversion options to output settings

Resolves what a document conversion should produce: format, writer,
template, variables, syntax highlighting and PDF engine.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .resolver import options_resolve, options_resolveState
from .writers import WriterRegistry, builtinWriters
from .scripting import PythonScriptingEngine, ScriptingEngine
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "options_resolve",
    "options_resolveState",
    "WriterRegistry",
    "builtinWriters",
    "PythonScriptingEngine",
    "ScriptingEngine",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
