#!/usr/bin/env python3
"""
docsettings - resolve conversion options into output settings

Reads conversion options from the command line, resolves them and prints
the resulting output settings: format, writer, template, PDF engine,
extensions and template variables. Nothing is converted; this is the
planning step a converter runs before invoking a writer.

Usage:
    python -m docsettings [INPUT ...] [-o OUTPUT] [-t FORMAT] [options]

Examples:
    # Format deduced from the output file name
    python -m docsettings notes.md -o notes.docx

    # PDF through xelatex with a custom template
    python -m docsettings notes.md -o notes.pdf --pdf-engine xelatex --template letter

    # Only print the paths that would be used
    python -m docsettings a.md b.md -o book.epub --dump-args
"""

import sys
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter, Namespace
from typing import List, Optional

from .lib import options_resolveState, __version__
from .lib.errors import OutputSettingsError
from .lib.variables import VariableContext
from .models import Options, OutputSettings, ResolutionState, WrapOption


parser = ArgumentParser(
    prog="docsettings",
    description="docsettings - resolve document conversion options into output settings",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("input_files", nargs="*", metavar="INPUT", help="Input files (none means stdin)")
parser.add_argument("-o", "--output", dest="output_file", default=None, help="Output file (- for stdout)")
parser.add_argument("-t", "--to", dest="to", default=None, help="Output format, optionally with +ext/-ext")
parser.add_argument("--pdf-engine", dest="pdf_engine", default=None, help="Program used to produce PDF")
parser.add_argument("--template", dest="template", default=None, help="Template file or URL")
parser.add_argument("-s", "--standalone", action="store_true", help="Produce a complete document")
parser.add_argument("--sandbox", action="store_true", help="Restrict writer file access")
parser.add_argument("--dump-args", dest="dump_args", action="store_true", help="Print output and input paths, then exit")
parser.add_argument("--data-dir", dest="data_dir", default=None, help="User data directory")
parser.add_argument(
    "-V", "--variable", dest="variable_pairs", action="append", default=[], metavar="KEY[=VALUE]",
    help="Template variable (repeatable; repeated keys build lists)",
)
parser.add_argument("-B", "--include-before-body", dest="include_before_body", action="append", default=[])
parser.add_argument("-A", "--include-after-body", dest="include_after_body", action="append", default=[])
parser.add_argument("-H", "--include-in-header", dest="include_in_header", action="append", default=[])
parser.add_argument("-c", "--css", dest="css", action="append", default=[])
parser.add_argument("--title-prefix", dest="title_prefix", default=None)
parser.add_argument("--syntax-definition", dest="syntax_definitions", action="append", default=[])
parser.add_argument("--highlight-style", dest="highlight_style", default="default")
parser.add_argument("--no-highlight", dest="no_highlight", action="store_true")
parser.add_argument("--reference-doc", dest="reference_doc", default=None)
parser.add_argument("--epub-metadata", dest="epub_metadata", default=None)
parser.add_argument("--epub-cover-image", dest="epub_cover_image", default=None)
parser.add_argument("--epub-embed-font", dest="epub_fonts", action="append", default=[])
parser.add_argument("--bibliography", dest="bibliography", action="append", default=[])
parser.add_argument("--csl", dest="csl", default=None)
parser.add_argument("--citation-abbreviations", dest="citation_abbreviations", default=None)
parser.add_argument("--toc", "--table-of-contents", dest="table_of_contents", action="store_true")
parser.add_argument("--toc-depth", dest="toc_depth", type=int, default=3)
parser.add_argument("-N", "--number-sections", dest="number_sections", action="store_true")
parser.add_argument("--columns", dest="columns", type=int, default=72)
parser.add_argument("--wrap", dest="wrap", choices=[w.value for w in WrapOption], default="auto")
parser.add_argument("--tab-stop", dest="tab_stop", type=int, default=4)
parser.add_argument("--id-prefix", dest="identifier_prefix", default="")
parser.add_argument("--ascii", action="store_true")
parser.add_argument(
    "-v", "--verbosity", action="count", default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)
parser.add_argument("-q", "--quiet", action="store_true", help="Suppress warnings")
parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")


def options_fromNamespace(args: Namespace) -> Options:
    """
    Turn parsed arguments into Options.

    KEY=VALUE variable pairs are folded with append semantics; a bare KEY
    is set to "true".
    """
    pairs = []
    for item in args.variable_pairs:
        key, sep, value = item.partition("=")
        pairs.append((key, value if sep else "true"))
    args.variables = VariableContext.pairs_create(pairs).dict_get()
    args.wrap = WrapOption(args.wrap)
    if args.no_highlight:
        args.highlight_style = ""
    if args.quiet:
        args.verbosity = 0
    if not args.input_files:
        args.input_files = None
    return Options.namespace_create(args)


def settings_report(state: ResolutionState) -> None:
    """Print a summary of resolved output settings"""
    settings: Optional[OutputSettings] = state.outputSettings
    if settings is None:
        print("Error: resolution produced no output settings", file=sys.stderr)
        sys.exit(1)

    writer_options = settings.writer_options
    print(f"format:      {settings.format}")
    print(f"writer:      {settings.writer_name} ({settings.writer.kind.value})")
    print(f"pdf-engine:  {settings.pdf_engine or '-'}")
    print(f"template:    {writer_options.template.name if writer_options.template else '-'}")
    print(f"extensions:  {' '.join(sorted(writer_options.extensions)) or '-'}")
    style = writer_options.highlight_style
    print(f"highlight:   {style.__name__ if style else '-'}")
    print("variables:")
    for key, value in (writer_options.variables or {}).items():
        if key == "dzslides-core":
            value = f"<{len(value)} characters>"
        print(f"  {key}: {value}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point - resolve options and report the output settings.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status
    """
    args = parser.parse_args(argv)
    options = options_fromNamespace(args)

    try:
        state = options_resolveState(options)
    except (OutputSettingsError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    settings_report(state)
    return 0


if __name__ == "__main__":
    sys.exit(main())
