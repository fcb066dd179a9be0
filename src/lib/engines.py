"""
Output format and PDF engine resolution

Decides which writer produces the output and, for PDF output, which
external program turns that writer's output into a PDF. The writer/engine
compatibility table below is the single source of truth for PDF engine
validation; lookups take the first match in table order.
"""

import os
from typing import List, Optional, Tuple

from .errors import IncompatiblePdfEngineError
from .formats import customWriter_is, format_fromFilePaths
from .log import LOG


HTML_ENGINES: List[str] = ["wkhtmltopdf", "weasyprint", "pagedjs-cli", "prince"]
LATEX_ENGINES: List[str] = ["pdflatex", "lualatex", "xelatex", "latexmk", "tectonic"]

# (writer base name, engine program base name)
ENGINES: List[Tuple[str, str]] = (
    [("html", engine) for engine in HTML_ENGINES]
    + [("html5", engine) for engine in HTML_ENGINES]
    + [("latex", engine) for engine in LATEX_ENGINES]
    + [("beamer", engine) for engine in LATEX_ENGINES]
    + [("ms", "pdfroff"), ("context", "context")]
)

DEFAULT_PDF_WRITER = "latex"
DEFAULT_PDF_ENGINE = "pdflatex"


def writerBase_name(writer: str) -> str:
    """
    Writer name with any extension suffix removed.

    Example:
        >>> writerBase_name("latex+smart-raw_tex")
        'latex'
    """
    for index, char in enumerate(writer):
        if char in "+-":
            return writer[:index]
    return writer


def engineBase_name(engine: str) -> str:
    """
    Engine program name without directory or file extension.

    Example:
        >>> engineBase_name("/usr/local/bin/xelatex.exe")
        'xelatex'
    """
    return os.path.splitext(os.path.basename(engine))[0]


def engine_forWriter(writer: str) -> str:
    """First engine paired with the writer's base name"""
    if writer == "pdf":
        raise IncompatiblePdfEngineError("pdf writer")
    base = writerBase_name(writer)
    for candidate, engine in ENGINES:
        if candidate == base:
            return engine
    raise IncompatiblePdfEngineError(f"cannot produce pdf output from {writer}")


def writer_forEngine(engine: str) -> str:
    """First writer paired with an engine base name"""
    for writer, candidate in ENGINES:
        if candidate == engine:
            return writer
    raise IncompatiblePdfEngineError(f"pdf-engine {engine} not known")


def pdfWriterAndEngine_resolve(writer: Optional[str], engine: Optional[str]) -> Tuple[str, str]:
    """
    Resolve the writer and engine for PDF output.

    Args:
        writer: User-specified writer name (None lets the engine or default decide)
        engine: User-specified PDF engine (program name or path)

    Returns:
        Tuple of (writer name, engine program)

    Raises:
        IncompatiblePdfEngineError: No writer/engine pairing exists

    Examples:
        >>> pdfWriterAndEngine_resolve(None, None)
        ('latex', 'pdflatex')
        >>> pdfWriterAndEngine_resolve(None, "/opt/bin/weasyprint")
        ('html', '/opt/bin/weasyprint')
    """
    if writer is None and engine is None:
        return DEFAULT_PDF_WRITER, DEFAULT_PDF_ENGINE

    if engine is None:
        return writer, engine_forWriter(writer)

    if writer is None:
        return writer_forEngine(engineBase_name(engine)), engine

    # Custom writers can produce any format; trust the user
    if customWriter_is(writer):
        return writer, engine

    if (writerBase_name(writer), engineBase_name(engine)) in ENGINES:
        return writer, engine

    raise IncompatiblePdfEngineError(
        f"pdf-engine {engine} is not compatible with output format {writer}"
    )


def pdfOutput_is(to: Optional[str], output_file: str) -> bool:
    """PDF output is requested by a ".pdf" output file or the "pdf" format"""
    return os.path.splitext(output_file)[1].lower() == ".pdf" or to == "pdf"


def outputFormat_resolve(
    to: Optional[str], pdf_engine: Optional[str], output_file: str
) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Decide the writer name and PDF engine for a conversion.

    Args:
        to: Explicit output format, if any
        pdf_engine: Explicit PDF engine, if any
        output_file: Output path ("-" for standard output)

    Returns:
        Tuple of (writer name, engine or None, undeduced extension or None).
        The third element is set when the format could not be deduced from
        the output file name and "html" was substituted.

    Raises:
        IncompatiblePdfEngineError: PDF output with an impossible pairing
    """
    if pdfOutput_is(to, output_file):
        writer = None if to == "pdf" else to
        LOG(f"PDF output requested (writer={writer}, engine={pdf_engine})", level=2)
        writer_name, engine = pdfWriterAndEngine_resolve(writer, pdf_engine)
        return writer_name, engine, None

    if to is not None:
        return to, None, None

    if output_file == "-":
        return "html", None, None

    deduced = format_fromFilePaths([output_file])
    if deduced is None:
        return "html", None, os.path.splitext(output_file)[1]
    return deduced, None, None
