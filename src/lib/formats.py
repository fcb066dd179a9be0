"""
Format names, extensions and filename heuristics

Parses flavored format strings ("markdown+pipe_tables-smart"), applies
their extension diffs to a writer's ExtensionsConfig, and guesses an output
format from a file name.
"""

import os
import re
from typing import Dict, FrozenSet, Iterable, List, Optional

from ..models.format import ExtensionsConfig, FlavoredFormat
from .errors import UnknownExtensionError, UnsupportedExtensionError


# Suffix marking a format name as a path to a custom writer script
CUSTOM_WRITER_SUFFIX = ".py"

# Formats whose output is not plain text: standalone output is implied
BINARY_FORMATS: FrozenSet[str] = frozenset(
    {"odt", "docx", "epub2", "epub3", "epub", "pptx", "pdf"}
)

ALL_EXTENSIONS: FrozenSet[str] = frozenset({
    "abbreviations", "all_symbols_escapable", "ascii_identifiers",
    "attributes", "auto_identifiers", "autolink_bare_uris",
    "backtick_code_blocks", "blank_before_blockquote", "blank_before_header",
    "bracketed_spans", "citations", "definition_lists", "east_asian_line_breaks",
    "element_citations", "emoji", "empty_paragraphs", "epub_html_exts",
    "escaped_line_breaks", "example_lists", "fancy_lists", "fenced_code_attributes",
    "fenced_code_blocks", "fenced_divs", "footnotes", "gfm_auto_identifiers",
    "grid_tables", "hard_line_breaks", "header_attributes", "implicit_figures",
    "implicit_header_references", "inline_code_attributes", "inline_notes",
    "intraword_underscores", "latex_macros", "line_blocks", "link_attributes",
    "mark", "multiline_tables", "native_divs", "native_numbering", "native_spans",
    "pipe_tables", "raw_attribute", "raw_html", "raw_tex", "shortcut_reference_links",
    "simple_tables", "smart", "space_in_atx_header", "startnum", "strikeout",
    "styles", "subscript", "superscript", "tagging", "task_lists",
    "tex_math_dollars", "tex_math_single_backslash", "xrefs_name", "xrefs_number",
    "yaml_metadata_block",
})

_MARKDOWN_DEFAULTS: FrozenSet[str] = frozenset({
    "all_symbols_escapable", "auto_identifiers", "backtick_code_blocks",
    "blank_before_blockquote", "blank_before_header", "bracketed_spans",
    "citations", "definition_lists", "escaped_line_breaks", "example_lists",
    "fancy_lists", "fenced_code_attributes", "fenced_code_blocks", "fenced_divs",
    "footnotes", "grid_tables", "header_attributes", "implicit_figures",
    "implicit_header_references", "inline_code_attributes", "inline_notes",
    "intraword_underscores", "line_blocks", "link_attributes", "multiline_tables",
    "native_divs", "native_spans", "pipe_tables", "raw_attribute", "raw_html",
    "raw_tex", "shortcut_reference_links", "simple_tables", "smart",
    "space_in_atx_header", "startnum", "strikeout", "subscript", "superscript",
    "task_lists", "tex_math_dollars", "yaml_metadata_block",
})

_GFM_DEFAULTS: FrozenSet[str] = frozenset({
    "autolink_bare_uris", "emoji", "gfm_auto_identifiers", "pipe_tables",
    "raw_html", "strikeout", "task_lists", "yaml_metadata_block",
})

_HTML_DEFAULTS: FrozenSet[str] = frozenset({
    "auto_identifiers", "line_blocks", "native_divs", "native_spans", "smart",
})

_LATEX_DEFAULTS: FrozenSet[str] = frozenset({
    "auto_identifiers", "latex_macros", "smart", "task_lists",
})

DEFAULT_EXTENSIONS: Dict[str, FrozenSet[str]] = {
    "markdown": _MARKDOWN_DEFAULTS,
    "plain": _MARKDOWN_DEFAULTS - {"raw_html", "raw_tex", "raw_attribute"},
    "gfm": _GFM_DEFAULTS,
    "commonmark": frozenset(),
    "html": _HTML_DEFAULTS,
    "html4": _HTML_DEFAULTS,
    "html5": _HTML_DEFAULTS,
    "dzslides": _HTML_DEFAULTS,
    "revealjs": _HTML_DEFAULTS,
    "epub": _HTML_DEFAULTS | {"epub_html_exts"},
    "epub2": _HTML_DEFAULTS | {"epub_html_exts"},
    "epub3": _HTML_DEFAULTS | {"epub_html_exts"},
    "latex": _LATEX_DEFAULTS,
    "beamer": _LATEX_DEFAULTS,
    "context": frozenset({"auto_identifiers", "smart", "tagging"}),
    "ms": frozenset({"smart"}),
    "man": frozenset(),
    "rst": frozenset({"auto_identifiers"}),
    "org": frozenset({"auto_identifiers", "citations", "task_lists"}),
    "asciidoc": frozenset({"auto_identifiers"}),
    "docx": frozenset({"auto_identifiers"}),
    "odt": frozenset({"auto_identifiers"}),
    "pptx": frozenset(),
    "native": frozenset(),
    "json": frozenset(),
}

# Output file extension -> format name. Every target has a built-in writer;
# ".pdf" is handled as PDF output before this table is consulted.
FILE_EXTENSION_FORMATS: Dict[str, str] = {
    ".adoc": "asciidoc",
    ".asciidoc": "asciidoc",
    ".context": "context",
    ".ctx": "context",
    ".docx": "docx",
    ".epub": "epub",
    ".htm": "html",
    ".html": "html",
    ".json": "json",
    ".latex": "latex",
    ".ltx": "latex",
    ".markdown": "markdown",
    ".md": "markdown",
    ".mdown": "markdown",
    ".mdwn": "markdown",
    ".mkd": "markdown",
    ".mkdn": "markdown",
    ".ms": "ms",
    ".native": "native",
    ".odt": "odt",
    ".org": "org",
    ".pdf": "pdf",
    ".pptx": "pptx",
    ".roff": "ms",
    ".rst": "rst",
    ".tex": "latex",
    ".text": "markdown",
    ".txt": "markdown",
    ".xhtml": "html",
}

_FLAVOR_TOKEN = re.compile(r"([+-])([A-Za-z0-9_]*)")


def customWriter_is(name: str) -> bool:
    """Check whether a format name designates a custom writer script"""
    return name.endswith(CUSTOM_WRITER_SUFFIX)


def textFormat_is(name: str) -> bool:
    """Check whether a format produces plain text output"""
    return name not in BINARY_FORMATS


def flavoredFormat_parse(format_string: str) -> FlavoredFormat:
    """
    Parse a possibly suffixed format string into a FlavoredFormat.

    A name ending in the custom writer suffix may itself contain "+" or "-"
    (e.g. "my-writer.py+smart"); otherwise the name stops at the first "+"
    or "-".

    Extension names of custom writers are not checked here; the script
    declares its own and writer acquisition validates against them.

    Args:
        format_string: Format string (e.g. "markdown+pipe_tables-smart")

    Returns:
        FlavoredFormat with enabled and disabled extension tuples

    Raises:
        UnknownExtensionError: Malformed suffix or unknown extension name

    Example:
        >>> flavoredFormat_parse("gfm-emoji")
        FlavoredFormat(name='gfm', enabled=(), disabled=('emoji',))
    """
    script = re.match(r"^(.*?\.py)(?=[+-]|$)", format_string)
    if script:
        name = script.group(1)
    else:
        name = re.split(r"[+-]", format_string, maxsplit=1)[0]
    rest = format_string[len(name):]
    known = None if script else ALL_EXTENSIONS

    enabled: List[str] = []
    disabled: List[str] = []
    position = 0
    for match in _FLAVOR_TOKEN.finditer(rest):
        if match.start() != position or not match.group(2):
            raise UnknownExtensionError(rest[position:])
        position = match.end()
        sign, extension = match.groups()
        if known is not None and extension not in known:
            raise UnknownExtensionError(extension)
        (enabled if sign == "+" else disabled).append(extension)
    if position != len(rest):
        raise UnknownExtensionError(rest[position:])

    return FlavoredFormat(name=name, enabled=tuple(enabled), disabled=tuple(disabled))


def extensionsConfig_get(format_name: str) -> ExtensionsConfig:
    """
    Extension configuration of a built-in format.

    native and json accept no extensions; every other format accepts all
    known extensions and starts from its defaults.
    """
    defaults = DEFAULT_EXTENSIONS.get(format_name, frozenset())
    if format_name in ("native", "json"):
        return ExtensionsConfig(default=defaults, supported=frozenset())
    return ExtensionsConfig(default=defaults, supported=ALL_EXTENSIONS)


def extensionsDiff_apply(config: ExtensionsConfig, flavored: FlavoredFormat) -> FrozenSet[str]:
    """
    Apply a flavored format's diff to a writer's extension configuration.

    Args:
        config: Writer's defaults and supported extensions
        flavored: Parsed format with enabled/disabled lists

    Returns:
        Effective extension set

    Raises:
        UnsupportedExtensionError: An enabled extension is not supported
    """
    for extension in flavored.enabled:
        if extension not in config.supported:
            raise UnsupportedExtensionError(extension, flavored.name)
    return frozenset((set(config.default) | set(flavored.enabled)) - set(flavored.disabled))


def format_fromFilePath(path: str) -> Optional[str]:
    """
    Guess a format from one file name.

    Man page sections (".1" to ".9") map to man.

    Example:
        >>> format_fromFilePath("report.DOCX")
        'docx'
    """
    lowered = os.path.basename(path).lower()
    extension = os.path.splitext(lowered)[1]
    if re.fullmatch(r"\.[1-9]", extension):
        return "man"
    return FILE_EXTENSION_FORMATS.get(extension)


def format_fromFilePaths(paths: Iterable[str]) -> Optional[str]:
    """Format of the first path whose extension is recognised"""
    for path in paths:
        found = format_fromFilePath(path)
        if found:
            return found
    return None
