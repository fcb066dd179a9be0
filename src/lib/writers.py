"""
Writer registry and writer acquisition

Maps format names to built-in writers and decides, for a resolved format,
which writer, extension set and template a conversion uses. Custom
writers (formats ending in ".py") come from the scripting engine instead.

Built-in text writers render the document (its str()) into the template
when there is one. Built-in binary writers package the rendered text and
the resources they read (reference doc, cover image, fonts) into a zip
container; every read goes through the writer's FileAccess, so sandboxed
writers fail on anything outside their allow-list.
"""

import io
import os
import zipfile
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..models.format import FlavoredFormat
from ..models.options import Options
from ..models.writer import Writer, WriterKind, WriterSpec
from .errors import UnknownWriterError
from .formats import customWriter_is, extensionsConfig_get, extensionsDiff_apply
from .log import LOG
from .sandbox import FileAccess, SandboxedFileAccess, sandboxPaths_collect
from .scripting import ScriptingEngine
from .templates import Template, defaultTemplate_compile, template_resolve


TEXT_FORMATS: List[Tuple[str, str]] = [
    ("html", "HTML5 document"),
    ("html4", "XHTML 1.0 transitional document"),
    ("html5", "HTML5 document"),
    ("dzslides", "DZSlides HTML slide show"),
    ("revealjs", "reveal.js HTML slide show"),
    ("latex", "LaTeX document"),
    ("beamer", "LaTeX beamer slide show"),
    ("context", "ConTeXt document"),
    ("ms", "roff ms document"),
    ("man", "roff man page"),
    ("markdown", "Pandoc-flavored Markdown"),
    ("gfm", "GitHub-flavored Markdown"),
    ("commonmark", "CommonMark"),
    ("plain", "plain text"),
    ("rst", "reStructuredText"),
    ("org", "Emacs Org mode"),
    ("asciidoc", "AsciiDoc"),
    ("native", "native document dump"),
    ("json", "JSON document dump"),
]

BINARY_FORMATS: List[Tuple[str, str]] = [
    ("docx", "Word docx"),
    ("odt", "OpenDocument text"),
    ("pptx", "PowerPoint slide show"),
    ("epub", "EPUB v3 book"),
    ("epub2", "EPUB v2 book"),
    ("epub3", "EPUB v3 book"),
]


def body_render(options: Any, document: Any) -> str:
    """Render the document body, wrapped in the template when one is set"""
    body = str(document)
    if options.template is None:
        return body
    context: Dict[str, Any] = options.variables.dict_get() if options.variables is not None else {}
    context["body"] = body
    return options.template.render(context)


def text_render(options: Any, document: Any, files: FileAccess) -> str:
    return body_render(options, document)


def resources_list(options: Any) -> List[str]:
    """Files a binary writer embeds: reference doc, cover image, fonts"""
    resources: List[str] = []
    if options.reference_doc:
        resources.append(options.reference_doc)
    cover = options.variables.get("epub-cover-image") if options.variables is not None else None
    if isinstance(cover, str):
        resources.append(cover)
    resources.extend(options.epub_fonts)
    return resources


def container_render(options: Any, document: Any, files: FileAccess) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("content", body_render(options, document))
        for resource in resources_list(options):
            archive.writestr(f"resources/{os.path.basename(resource)}", files.read(resource))
    return buffer.getvalue()


class WriterRegistry:
    """
    Registry of built-in writer specifications

    Maps format names to WriterSpec objects.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in writers"""
        self.specs: Dict[str, WriterSpec] = {}
        self.textWriters_register()
        self.binaryWriters_register()

    def register(self, spec: WriterSpec) -> None:
        """Register a writer specification"""
        self.specs[spec.name] = spec

    def spec_get(self, name: str) -> Optional[WriterSpec]:
        """Get full writer specification by name"""
        return self.specs.get(name)

    def names_list(self) -> List[str]:
        """All registered format names, sorted"""
        return sorted(self.specs)

    def writersByKind_list(self, kind: WriterKind) -> List[WriterSpec]:
        """Get all writers of one kind"""
        return [spec for spec in self.specs.values() if spec.kind == kind]

    def textWriters_register(self) -> None:
        """Register writers producing text"""
        for name, description in TEXT_FORMATS:
            self.register(WriterSpec(
                name=name,
                kind=WriterKind.TEXT,
                description=description,
                handler=text_render,
                extensions=extensionsConfig_get(name),
            ))

    def binaryWriters_register(self) -> None:
        """Register writers producing binary containers"""
        for name, description in BINARY_FORMATS:
            self.register(WriterSpec(
                name=name,
                kind=WriterKind.BINARY,
                description=description,
                handler=container_render,
                extensions=extensionsConfig_get(name),
            ))

    def writer_get(self, flavored: FlavoredFormat) -> Tuple[Writer, FrozenSet[str]]:
        """
        Build the writer for a flavored format.

        Returns:
            Tuple of (fresh writer, effective extensions)

        Raises:
            UnknownWriterError: No writer is registered under the name
            UnsupportedExtensionError: The diff enables an unsupported extension
        """
        spec = self.spec_get(flavored.name)
        if spec is None:
            raise UnknownWriterError(flavored.name)
        return spec.writer_make(), extensionsDiff_apply(spec.extensions, flavored)


# Shared read-only registry of built-in writers
builtinWriters = WriterRegistry()


def writer_sandbox(writer: Writer, allowed: Iterable[str]) -> Writer:
    """
    Wrap a writer so every read goes through a sandboxed file access.

    The allow-list is fixed here; the FileAccess the caller passes at
    invocation time is ignored.
    """
    files = SandboxedFileAccess(allowed)
    inner = writer.render

    def sandboxed(options: Any, document: Any, _files: FileAccess) -> Any:
        return inner(options, document, files)

    return type(writer)(sandboxed)


def writer_acquire(
    flavored: FlavoredFormat,
    options: Options,
    scripting_engine: ScriptingEngine,
    standalone: bool,
    data_dir: Optional[Path] = None,
    registry: Optional[WriterRegistry] = None,
) -> Tuple[Writer, FrozenSet[str], Optional[Template]]:
    """
    Obtain the writer, extensions and template for a format.

    Args:
        flavored: Resolved format with extensions diff
        options: Options being resolved (template path, sandbox, resources)
        scripting_engine: Loader used when the format is a custom writer script
        standalone: Whether a template is needed at all
        data_dir: User data directory
        registry: Built-in writers (defaults to the shared registry)

    Returns:
        Tuple of (writer, effective extensions, template or None)
    """
    format_name = flavored.name

    if customWriter_is(format_name):
        custom = scripting_engine.writer_load(format_name, data_dir)
        extensions = extensionsDiff_apply(custom.extensions, flavored)
        template = template_resolve(
            standalone, options.template, format_name, custom.default_template, data_dir
        )
        return custom.writer, extensions, template

    template = template_resolve(
        standalone,
        options.template,
        format_name,
        lambda: defaultTemplate_compile(format_name, data_dir),
        data_dir,
    )
    writer, extensions = (registry or builtinWriters).writer_get(flavored)
    if options.sandbox:
        allowed = sandboxPaths_collect(options)
        LOG(f"Sandboxing {format_name} writer; allowed files: {allowed}", level=2)
        writer = writer_sandbox(writer, allowed)
    return writer, extensions, template
