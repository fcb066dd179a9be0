"""
Options to output settings

Runs the resolution pipeline: each stage copies the ResolutionState, fills
in its own fields and hands the state on. A stage that raises aborts the
resolution; no OutputSettings is produced.

    args_dump            -> exit early when only the arguments are wanted
    epubMetadata_read    -> epub metadata text
    format_resolve       -> writer name, PDF engine, flavored format
    writer_select        -> writer, extensions, template
    syntax_load          -> syntax map
    highlightStyle_select-> highlighting style
    variables_populate   -> template variables
    settings_assemble    -> OutputSettings
"""

import os
import sys
from typing import Callable, Optional, Tuple

from ..config import appsettings
from ..models.options import Options
from ..models.settings import OutputSettings, WriterOptions
from ..models.state import LogMessage, ResolutionState, pipeline
from .engines import outputFormat_resolve, pdfOutput_is
from .errors import CouldNotDeduceFormatError
from .fetch import text_fetch
from .formats import flavoredFormat_parse, textFormat_is
from .log import LOG, WARN, state_connectToLogger
from .scripting import PythonScriptingEngine, ScriptingEngine
from .syntax import highlightStyle_lookup, syntaxMap_load
from .variables import VariableInputs, variables_build
from .writers import writer_acquire


def args_dump(inputstate: ResolutionState) -> ResolutionState:
    """
    Print the output path and the input paths, then exit successfully.

    Runs before anything else is read or validated. Does nothing unless
    options.dump_args is set.

    Exits:
        0 after printing, one path per line
    """
    options = inputstate.options
    if not options.dump_args:
        return inputstate

    print(options.outputFile_get())
    for path in options.input_files or []:
        print(path)
    sys.stdout.flush()
    sys.exit(0)


def format_resolve(inputstate: ResolutionState) -> ResolutionState:
    """
    Decide the writer name, PDF engine and flavored format.

    Returns:
        ResolutionState with pdfOutput, writerName, pdfEngine, flavored,
        format and standalone set

    Raises:
        IncompatiblePdfEngineError: PDF writer and engine cannot be paired
        CouldNotDeduceFormatError: Format not deducible and strict mode is on
        UnknownExtensionError: Malformed extensions suffix
    """
    state = inputstate.copy()
    options = state.options
    output_file = options.outputFile_get()

    LOG("Resolving output format...", level=1)
    state.pdfOutput = pdfOutput_is(options.to, output_file)
    writer_name, engine, undeduced = outputFormat_resolve(
        options.to, options.pdf_engine, output_file
    )

    if undeduced is not None:
        if appsettings.strict_mode:
            raise CouldNotDeduceFormatError(undeduced, writer_name)
        message = LogMessage(
            kind="CouldNotDeduceFormat",
            message=f"Could not deduce format from file extension {undeduced}; defaulting to {writer_name}",
        )
        state.messages.append(message)
        WARN(message.message)

    state.writerName = writer_name
    state.pdfEngine = engine
    state.flavored = flavoredFormat_parse(writer_name)
    state.format = state.flavored.name
    state.standalone = options.standalone or not textFormat_is(state.format) or state.pdfOutput
    LOG(
        f"Writer {writer_name} (format {state.format}, engine {engine}, standalone {state.standalone})",
        level=2,
    )
    return state


def epubMetadata_read(inputstate: ResolutionState) -> ResolutionState:
    """Read the epub metadata file, when one is given"""
    state = inputstate.copy()
    if state.options.epub_metadata:
        LOG(f"Reading epub metadata {state.options.epub_metadata}", level=2)
        state.epubMetadata = text_fetch(state.options.epub_metadata)
    return state


def writer_select(inputstate: ResolutionState) -> ResolutionState:
    """
    Obtain writer, effective extensions and template.

    Raises:
        UnknownWriterError, UnsupportedExtensionError, CustomWriterError,
        TemplateCompilationError, OSError
    """
    state = inputstate.copy()
    LOG(f"Acquiring writer for {state.format}...", level=1)
    state.writer, state.extensions, state.template = writer_acquire(
        state.flavored,
        state.options,
        state.scriptingEngine,
        state.standalone,
        state.dataDir,
    )
    LOG(f"Writer {state.writer.kind.value}; template {state.template.name if state.template else None}", level=2)
    return state


def syntax_load(inputstate: ResolutionState) -> ResolutionState:
    """
    Merge user syntax definitions into the default syntax map.

    Raises:
        SyntaxMapError: A definition file does not parse
    """
    state = inputstate.copy()
    state.syntaxMap = syntaxMap_load(state.options.syntax_definitions)
    return state


def highlightStyle_select(inputstate: ResolutionState) -> ResolutionState:
    """
    Look up the highlighting style.

    Raises:
        HighlightStyleError: Unknown style or bad style file
    """
    state = inputstate.copy()
    state.highlightStyle = highlightStyle_lookup(state.options.highlight_style)
    return state


def variables_populate(inputstate: ResolutionState) -> ResolutionState:
    """Build the template variable context"""
    from . import __version__

    state = inputstate.copy()
    inputs = VariableInputs(
        options=state.options,
        output_file=state.options.outputFile_get(),
        format=state.format,
        version=__version__,
        curdir=os.getcwd(),
        data_dir=state.dataDir,
    )
    state.variables = variables_build(inputs)
    LOG(f"Template variables: {', '.join(state.variables)}", level=3)
    return state


def settings_assemble(inputstate: ResolutionState) -> ResolutionState:
    """
    Combine everything resolved so far into OutputSettings.

    No validation happens here; earlier stages did it all.
    """
    state = inputstate.copy()
    options = state.options
    writer_options = WriterOptions(
        template=state.template,
        variables=state.variables,
        extensions=state.extensions,
        syntax_map=state.syntaxMap,
        highlight_style=state.highlightStyle,
        epub_metadata=state.epubMetadata,
        tab_stop=options.tab_stop,
        table_of_contents=options.table_of_contents,
        toc_depth=options.toc_depth,
        html_math_method=options.html_math_method,
        incremental=options.incremental,
        cite_method=options.cite_method,
        number_sections=options.number_sections,
        number_offset=list(options.number_offset),
        section_divs=options.section_divs,
        reference_links=options.reference_links,
        reference_location=options.reference_location,
        dpi=options.dpi,
        wrap_text=options.wrap,
        columns=options.columns,
        email_obfuscation=options.email_obfuscation,
        identifier_prefix=options.identifier_prefix,
        html_q_tags=options.html_q_tags,
        top_level_division=options.top_level_division,
        listings=options.listings,
        slide_level=options.slide_level,
        setext_headers=options.setext_headers,
        list_tables=options.list_tables,
        epub_subdirectory=options.epub_subdirectory,
        epub_fonts=list(options.epub_fonts),
        epub_chapter_level=options.epub_chapter_level,
        reference_doc=options.reference_doc,
        prefer_ascii=options.ascii,
    )
    state.outputSettings = OutputSettings(
        format=state.format,
        writer=state.writer,
        writer_name=state.writerName,
        writer_options=writer_options,
        pdf_engine=state.pdfEngine,
    )
    LOG("Output settings assembled", level=2)
    return state


RESOLUTION_STAGES: Tuple[Callable[[ResolutionState], ResolutionState], ...] = (
    args_dump,
    epubMetadata_read,
    format_resolve,
    writer_select,
    syntax_load,
    highlightStyle_select,
    variables_populate,
    settings_assemble,
)


def options_resolveState(
    options: Options, scripting_engine: Optional[ScriptingEngine] = None
) -> ResolutionState:
    """
    Run the full resolution pipeline and return its final state.

    Args:
        options: Options to resolve
        scripting_engine: Custom writer loader (defaults to PythonScriptingEngine)

    Returns:
        Final ResolutionState (outputSettings and messages populated)
    """
    state = ResolutionState.state_createFromOptions(
        options,
        scriptingEngine=scripting_engine or PythonScriptingEngine(),
        verbosity=3 if appsettings.debug_mode else options.verbosity,
        dataDir=appsettings.dataDir_get(options.data_dir),
    )
    state_connectToLogger(state)
    return pipeline(state, *RESOLUTION_STAGES)


def options_resolve(
    options: Options, scripting_engine: Optional[ScriptingEngine] = None
) -> OutputSettings:
    """
    Resolve options into output settings.

    Args:
        options: Options to resolve
        scripting_engine: Custom writer loader (defaults to PythonScriptingEngine)

    Returns:
        OutputSettings ready for the execution stage

    Raises:
        OutputSettingsError: Any resolution failure
        OSError: A file could not be read
    """
    return options_resolveState(options, scripting_engine).outputSettings
