"""
Writer registry, sandboxing and custom writer tests
"""

import io
import zipfile
from pathlib import Path

import pytest

from docsettings.lib.errors import (
    CustomWriterError,
    SandboxViolationError,
    UnknownWriterError,
    UnsupportedExtensionError,
)
from docsettings.lib.formats import flavoredFormat_parse
from docsettings.lib.sandbox import SandboxedFileAccess, sandboxPaths_collect
from docsettings.lib.scripting import PythonScriptingEngine, ScriptingEngine
from docsettings.lib.variables import VariableContext
from docsettings.lib.writers import WriterRegistry, builtinWriters, writer_acquire
from docsettings.models import BinaryWriter, Options, TextWriter, WriterKind, WriterOptions


TEXT_SCRIPT = '''
Extensions = {"smart": True, "fancy": False}

def Writer(document, options):
    return "custom:" + str(document)

def Template():
    return "<<{{ body }}>>"
'''

BINARY_SCRIPT = '''
def ByteStringWriter(document, options):
    return str(document).encode("utf-8")
'''


class TestRegistry:
    """Looking up built-in writers"""

    def test_text_and_binary_kinds(self):
        writer, _ = builtinWriters.writer_get(flavoredFormat_parse("html5"))
        assert isinstance(writer, TextWriter)
        assert writer.kind == WriterKind.TEXT
        writer, _ = builtinWriters.writer_get(flavoredFormat_parse("docx"))
        assert isinstance(writer, BinaryWriter)
        assert writer.kind == WriterKind.BINARY

    def test_unknown_writer(self):
        with pytest.raises(UnknownWriterError, match="Unknown output format nosuch"):
            builtinWriters.writer_get(flavoredFormat_parse("nosuch"))

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedExtensionError):
            builtinWriters.writer_get(flavoredFormat_parse("native+smart"))

    def test_names(self):
        names = WriterRegistry().names_list()
        assert "html5" in names
        assert "epub3" in names
        assert names == sorted(names)

    def test_kinds_listed(self):
        binary = {spec.name for spec in builtinWriters.writersByKind_list(WriterKind.BINARY)}
        assert binary == {"docx", "odt", "pptx", "epub", "epub2", "epub3"}

    def test_text_writer_renders_into_template(self):
        writer, _ = builtinWriters.writer_get(flavoredFormat_parse("plain"))
        options = WriterOptions()
        assert writer(options, "hello") == "hello"


class TestWriterAcquire:
    """Writer, extensions and template for a format"""

    def test_builtin_standalone(self):
        writer, extensions, template = writer_acquire(
            flavoredFormat_parse("html5-smart"), Options(), PythonScriptingEngine(), True
        )
        assert isinstance(writer, TextWriter)
        assert "smart" not in extensions
        assert template.name == "default.html5"

    def test_builtin_fragment_has_no_template(self):
        _, _, template = writer_acquire(
            flavoredFormat_parse("latex"), Options(), PythonScriptingEngine(), False
        )
        assert template is None

    def test_unknown_writer_checked_after_template(self, write_file):
        path = write_file("t.html", "{{ body }}")
        with pytest.raises(UnknownWriterError):
            writer_acquire(
                flavoredFormat_parse("nosuch"), Options(template=path), PythonScriptingEngine(), True
            )


class TestSandbox:
    """Restricting binary writer reads"""

    def test_allow_list_order(self):
        options = Options(
            reference_doc="ref.docx",
            epub_metadata="meta.xml",
            epub_cover_image="cover.png",
            csl="style.csl",
            citation_abbreviations="abbr.json",
            epub_fonts=["a.ttf", "b.ttf"],
            bibliography=["refs.bib"],
        )
        assert sandboxPaths_collect(options) == [
            "ref.docx", "meta.xml", "cover.png", "style.csl", "abbr.json",
            "a.ttf", "b.ttf", "refs.bib",
        ]

    def test_allows_normalised_paths(self, tmp_path: Path):
        files = SandboxedFileAccess([str(tmp_path / "x" / ".." / "ref.docx")])
        assert files.allows(str(tmp_path / "ref.docx"))
        assert not files.allows(str(tmp_path / "other.docx"))

    def test_violation(self, tmp_path: Path):
        files = SandboxedFileAccess([])
        with pytest.raises(SandboxViolationError, match="Sandbox does not allow access"):
            files.read(str(tmp_path / "secret.txt"))

    def test_sandboxed_writer_reads_allowed_resource(self, write_file):
        reference = write_file("ref.docx", "REFERENCE")
        options = Options(reference_doc=reference, sandbox=True)
        writer, _, _ = writer_acquire(
            flavoredFormat_parse("docx"), options, PythonScriptingEngine(), True
        )
        output = writer(WriterOptions(reference_doc=reference), "body")
        with zipfile.ZipFile(io.BytesIO(output)) as archive:
            assert archive.read("content") == b"body"
            assert archive.read("resources/ref.docx") == b"REFERENCE"

    def test_sandboxed_writer_rejects_other_files(self, write_file):
        allowed = write_file("ref.docx", "REFERENCE")
        other = write_file("secret.ttf", "SECRET")
        options = Options(reference_doc=allowed, sandbox=True)
        writer, _, _ = writer_acquire(
            flavoredFormat_parse("docx"), options, PythonScriptingEngine(), True
        )
        with pytest.raises(SandboxViolationError):
            writer(WriterOptions(reference_doc=allowed, epub_fonts=[other]), "body")

    def test_unsandboxed_writer_reads_anything(self, write_file):
        font = write_file("font.ttf", "FONT")
        writer, _, _ = writer_acquire(
            flavoredFormat_parse("epub"), Options(), PythonScriptingEngine(), True
        )
        output = writer(WriterOptions(epub_fonts=[font]), "body")
        with zipfile.ZipFile(io.BytesIO(output)) as archive:
            assert archive.read("resources/font.ttf") == b"FONT"

    def test_cover_image_variable_is_embedded(self, write_file):
        cover = write_file("cover.png", "PNG")
        writer, _, _ = writer_acquire(
            flavoredFormat_parse("epub3"), Options(), PythonScriptingEngine(), False
        )
        variables = VariableContext({"epub-cover-image": cover})
        output = writer(WriterOptions(variables=variables), "body")
        with zipfile.ZipFile(io.BytesIO(output)) as archive:
            assert archive.read("resources/cover.png") == b"PNG"


class TestCustomWriters:
    """Writers loaded from Python scripts"""

    def test_text_script(self, write_file):
        path = write_file("mine.py", TEXT_SCRIPT)
        writer, extensions, template = writer_acquire(
            flavoredFormat_parse(path + "+fancy"), Options(), PythonScriptingEngine(), True
        )
        assert isinstance(writer, TextWriter)
        assert writer(WriterOptions(), "doc") == "custom:doc"
        assert extensions == frozenset({"smart", "fancy"})
        assert template.render({"body": "B"}) == "<<B>>"

    def test_extension_not_declared(self, write_file):
        path = write_file("mine.py", TEXT_SCRIPT)
        with pytest.raises(UnsupportedExtensionError):
            writer_acquire(
                flavoredFormat_parse(path + "+emoji"), Options(), PythonScriptingEngine(), True
            )

    def test_binary_script_without_template(self, write_file):
        path = write_file("bin.py", BINARY_SCRIPT)
        writer, extensions, template = writer_acquire(
            flavoredFormat_parse(path), Options(), PythonScriptingEngine(), True
        )
        assert isinstance(writer, BinaryWriter)
        assert writer(WriterOptions(), "doc") == b"doc"
        assert extensions == frozenset()
        assert template is None

    def test_explicit_template_wins(self, write_file):
        path = write_file("mine.py", TEXT_SCRIPT)
        template_path = write_file("t.mine", "[{{ body }}]")
        _, _, template = writer_acquire(
            flavoredFormat_parse(path), Options(template=template_path), PythonScriptingEngine(), True
        )
        assert template.render({"body": "B"}) == "[B]"

    def test_script_found_in_data_dir(self, tmp_path: Path):
        (tmp_path / "custom").mkdir()
        (tmp_path / "custom" / "dd.py").write_text(BINARY_SCRIPT, encoding="utf-8")
        custom = PythonScriptingEngine().writer_load("dd.py", tmp_path)
        assert isinstance(custom.writer, BinaryWriter)

    def test_missing_script(self, tmp_path: Path):
        with pytest.raises(CustomWriterError, match="not found"):
            PythonScriptingEngine().writer_load(str(tmp_path / "absent.py"))

    def test_script_without_writer(self, write_file):
        path = write_file("empty.py", "X = 1\n")
        with pytest.raises(CustomWriterError, match="neither Writer nor ByteStringWriter"):
            PythonScriptingEngine().writer_load(path)

    def test_script_that_fails(self, write_file):
        path = write_file("boom.py", "raise RuntimeError('boom')\n")
        with pytest.raises(CustomWriterError, match="boom"):
            PythonScriptingEngine().writer_load(path)

    def test_bad_extensions_declaration(self, write_file):
        path = write_file("ext.py", "Extensions = ['smart']\ndef Writer(d, o):\n    return ''\n")
        with pytest.raises(CustomWriterError, match="must be a dict"):
            PythonScriptingEngine().writer_load(path)

    def test_no_scripting_engine(self):
        with pytest.raises(CustomWriterError):
            ScriptingEngine().writer_load("mine.py")
