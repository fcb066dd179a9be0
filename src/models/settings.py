"""
Output settings models

WriterOptions carries everything a writer needs; OutputSettings is the
final product of a resolution, handed as-is to whatever runs the writer.
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Mapping, Optional, TYPE_CHECKING

from .options import (
    CiteMethod,
    HTMLMathMethod,
    ObfuscationMethod,
    ReferenceLocation,
    TopLevelDivision,
    WrapOption,
)
from .writer import Writer

if TYPE_CHECKING:
    from ..lib.templates import Template
    from ..lib.variables import VariableContext


@dataclass(frozen=True)
class WriterOptions:
    """
    Options passed to a writer when it is invoked.

    Computed fields (template, variables, extensions, syntax_map,
    highlight_style, epub_metadata) come from the resolution stages; the
    others are copied from Options.
    """
    template: Optional["Template"] = None
    variables: Optional["VariableContext"] = None
    extensions: FrozenSet[str] = frozenset()
    syntax_map: Mapping[str, Any] = field(default_factory=dict)
    highlight_style: Optional[type] = None
    epub_metadata: Optional[str] = None

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
    wrap_text: WrapOption = WrapOption.AUTO
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
    epub_fonts: List[str] = field(default_factory=list)
    epub_chapter_level: int = 1
    reference_doc: Optional[str] = None
    prefer_ascii: bool = False


@dataclass(frozen=True)
class OutputSettings:
    """
    Fully resolved output configuration

    Attributes:
        format: Base output format name (extensions stripped)
        writer: Writer to invoke
        writer_name: Writer name as resolved (may carry extensions)
        writer_options: Options to pass to the writer
        pdf_engine: PDF engine program for PDF output, else None
    """
    format: str
    writer: Writer
    writer_name: str
    writer_options: WriterOptions
    pdf_engine: Optional[str] = None
