"""
docsettings - conversion options to output settings

Turns a document-conversion request into a validated, ready-to-run output
configuration: format, writer, template, variables, syntax map and PDF engine.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .lib import options_resolve, options_resolveState, WriterRegistry, LOG, state_connectToLogger
from .models import Options, OutputSettings, WriterOptions

__all__ = [
    "options_resolve",
    "options_resolveState",
    "WriterRegistry",
    "Options",
    "OutputSettings",
    "WriterOptions",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
