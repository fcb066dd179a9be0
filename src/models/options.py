"""
Conversion options record

Options is the read-only input to a resolution: every user-specified knob,
as produced by the command line layer. It is frozen for the duration of a
resolution; stages only read from it.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type


class HTMLMathMethod(Enum):
    """How math is rendered in HTML-based output"""
    PLAIN = "plain"
    WEBTEX = "webtex"
    GLADTEX = "gladtex"
    MATHML = "mathml"
    MATHJAX = "mathjax"
    KATEX = "katex"


class CiteMethod(Enum):
    """Citation processing strategy"""
    CITEPROC = "citeproc"
    NATBIB = "natbib"
    BIBLATEX = "biblatex"


class WrapOption(Enum):
    """Line wrapping in generated text"""
    AUTO = "auto"
    NONE = "none"
    PRESERVE = "preserve"


class TopLevelDivision(Enum):
    """Which division top-level headings map to"""
    DEFAULT = "default"
    PART = "part"
    CHAPTER = "chapter"
    SECTION = "section"


class ReferenceLocation(Enum):
    """Where footnotes and reference links are placed"""
    BLOCK = "block"
    SECTION = "section"
    DOCUMENT = "document"


class ObfuscationMethod(Enum):
    """Email address obfuscation in HTML output"""
    NONE = "none"
    JAVASCRIPT = "javascript"
    REFERENCES = "references"


@dataclass(frozen=True)
class Options:
    """
    User-specified conversion options.

    Attributes:
        output_file: Output path; None means standard output ("-")
        input_files: Input paths; None means standard input
        to: Explicit output format (may carry +ext/-ext suffixes)
        pdf_engine: Explicit PDF engine program (name or path)
        template: Explicit template path
        standalone: Produce a complete document rather than a fragment
        sandbox: Restrict writer file access to the resources named here
        dump_args: Print output and input paths, then exit
        variables: Initial template variables (name -> str/list/dict)
        syntax_definitions: YAML syntax definition files to add
        highlight_style: Pygments style name or style file; None disables highlighting

    The remaining fields are per-format toggles copied through to
    WriterOptions unchanged.
    """

    # Paths and format selection
    output_file: Optional[str] = None
    input_files: Optional[List[str]] = None
    to: Optional[str] = None
    pdf_engine: Optional[str] = None
    template: Optional[str] = None
    standalone: bool = False
    sandbox: bool = False
    dump_args: bool = False
    data_dir: Optional[str] = None
    verbosity: int = 1

    # Resources a sandboxed writer may read
    reference_doc: Optional[str] = None
    epub_metadata: Optional[str] = None
    epub_cover_image: Optional[str] = None
    epub_fonts: List[str] = field(default_factory=list)
    bibliography: List[str] = field(default_factory=list)
    csl: Optional[str] = None
    citation_abbreviations: Optional[str] = None

    # Template variables and includes
    variables: Dict[str, Any] = field(default_factory=dict)
    include_before_body: List[str] = field(default_factory=list)
    include_after_body: List[str] = field(default_factory=list)
    include_in_header: List[str] = field(default_factory=list)
    css: List[str] = field(default_factory=list)
    title_prefix: Optional[str] = None

    # Highlighting
    syntax_definitions: List[str] = field(default_factory=list)
    highlight_style: Optional[str] = "default"

    # Per-format toggles
    tab_stop: int = 4
    table_of_contents: bool = False
    toc_depth: int = 3
    html_math_method: HTMLMathMethod = HTMLMathMethod.PLAIN
    incremental: bool = False
    cite_method: CiteMethod = CiteMethod.CITEPROC
    number_sections: bool = False
    number_offset: List[int] = field(default_factory=list)
    section_divs: bool = False
    reference_links: bool = False
    reference_location: ReferenceLocation = ReferenceLocation.DOCUMENT
    dpi: int = 96
    wrap: WrapOption = WrapOption.AUTO
    columns: int = 72
    email_obfuscation: ObfuscationMethod = ObfuscationMethod.NONE
    identifier_prefix: str = ""
    html_q_tags: bool = False
    top_level_division: TopLevelDivision = TopLevelDivision.DEFAULT
    listings: bool = False
    slide_level: Optional[int] = None
    setext_headers: bool = False
    list_tables: bool = False
    epub_subdirectory: str = "EPUB"
    epub_chapter_level: int = 1
    ascii: bool = False

    def outputFile_get(self) -> str:
        """Output path with standard output spelled "-" """
        return self.output_file or "-"

    @classmethod
    def namespace_create(cls: Type["Options"], options: Namespace) -> "Options":
        """
        Create Options from an argparse Namespace.

        Attributes of the namespace that are not Options fields are ignored,
        so a CLI parser may carry extra flags of its own.

        Args:
            options: Parsed CLI arguments

        Returns:
            Options instance with matching namespace attributes applied
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered = {
            k: v for k, v in vars(options).items()
            if k in valid_fields and v is not None
        }
        return cls(**filtered)
