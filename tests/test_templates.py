"""
Template loading, compilation and partial resolution tests
"""

from pathlib import Path

import pytest

from docsettings.lib.errors import TemplateCompilationError
from docsettings.lib.templates import (
    DEFAULT_TEMPLATE_ALIASES,
    defaultTemplate_compile,
    defaultTemplateName_get,
    template_compile,
    template_resolve,
    templatePath_normalize,
)
from docsettings.lib.variables import VariableContext
from docsettings.lib.writers import builtinWriters


def no_default():
    raise AssertionError("default template should not be requested")


class TestTemplateResolve:
    """Choosing the template for a writer"""

    def test_not_standalone_means_no_template(self, write_file):
        path = write_file("custom.html", "{{ body }}")
        assert template_resolve(False, path, "html", no_default) is None

    def test_default_provider_used_without_path(self):
        template = template_resolve(True, None, "html5", lambda: defaultTemplate_compile("html5"))
        assert template.name == "default.html5"

    def test_default_provider_may_decline(self):
        assert template_resolve(True, None, "custom.py", lambda: None) is None

    def test_explicit_path_gets_format_extension(self, tmp_path: Path):
        (tmp_path / "letter.latex").write_text("Dear {{ name }}", encoding="utf-8")
        template = template_resolve(True, str(tmp_path / "letter"), "latex", no_default)
        assert template.name.endswith("letter.latex")
        assert template.render({"name": "Ada"}) == "Dear Ada"

    def test_explicit_path_with_extension_kept(self, write_file):
        path = write_file("page.tpl", "<b>{{ title }}</b>")
        template = template_resolve(True, path, "html", no_default)
        assert template.render({"title": "T"}) == "<b>T</b>"

    def test_missing_template_raises_os_error(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            template_resolve(True, str(tmp_path / "absent.html"), "html", no_default)

    def test_relative_path_found_in_data_dir(self, tmp_path: Path, monkeypatch):
        data_dir = tmp_path / "data"
        (data_dir / "templates").mkdir(parents=True)
        (data_dir / "templates" / "mine.html").write_text("mine {{ body }}", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        template = template_resolve(True, "mine", "html", no_default, data_dir)
        assert template.render({"body": "x"}) == "mine x"


class TestPartials:
    """Partials are resolved when the template is compiled"""

    def test_partial_next_to_template(self, write_file):
        write_file("header.html", "<h1>{{ title }}</h1>")
        path = write_file("main.html", '{% include "header.html" %}{{ body }}')
        template = template_resolve(True, path, "html", no_default)
        assert template.render({"title": "T", "body": "B"}) == "<h1>T</h1>B"

    def test_nested_partials(self, write_file):
        write_file("inner.html", "[{{ x }}]")
        write_file("outer.html", '({% include "inner.html" %})')
        path = write_file("main.html", '{% include "outer.html" %}')
        template = template_resolve(True, path, "html", no_default)
        assert template.render({"x": "1"}) == "([1])"

    def test_builtin_partial_available(self, write_file):
        path = write_file("main.html", '{% import "listing.html" as listing %}{{ listing.each(items) }}')
        template = template_resolve(True, path, "html", no_default)
        assert template.render({"items": ["a", "b"]}) == "a\nb\n"

    def test_missing_partial_fails_compilation(self, write_file):
        path = write_file("main.html", '{% include "nowhere.html" %}')
        with pytest.raises(TemplateCompilationError, match="nowhere.html"):
            template_resolve(True, path, "html", no_default)

    def test_broken_partial_fails_compilation(self, write_file):
        write_file("bad.html", "{% if %}")
        path = write_file("main.html", '{% include "bad.html" %}')
        with pytest.raises(TemplateCompilationError):
            template_resolve(True, path, "html", no_default)


class TestCompile:
    """Compiling and rendering"""

    def test_syntax_error(self):
        with pytest.raises(TemplateCompilationError, match="broken"):
            template_compile("broken", "{% for x in %}", [])

    def test_hyphenated_variables(self):
        template = template_compile("t", "{{ header_includes }}|{{ vars['header-includes'] }}", [])
        assert template.render({"header-includes": "H"}) == "H|H"

    def test_render_variable_context(self):
        template = template_compile("t", "{% for s in sourcefile %}{{ s }};{% endfor %}", [])
        ctx = VariableContext().listVariable_set("sourcefile", ["a.md", "b.md"])
        assert template.render(ctx) == "a.md;b.md;"

    def test_path_normalize(self):
        assert templatePath_normalize("letter", "latex") == "letter.latex"
        assert templatePath_normalize("letter.tex", "latex") == "letter.tex"


class TestDefaults:
    """Built-in default templates"""

    @pytest.mark.parametrize("format_name, expected", [
        ("html", "html5"),
        ("beamer", "latex"),
        ("epub", "epub3"),
        ("gfm", "markdown"),
        ("rst", "rst"),
    ])
    def test_default_names(self, format_name, expected):
        assert defaultTemplateName_get(format_name) == expected

    @pytest.mark.parametrize("format_name", [
        "html", "html4", "html5", "dzslides", "revealjs", "latex", "beamer",
        "context", "ms", "man", "markdown", "gfm", "commonmark", "plain",
        "rst", "org", "asciidoc", "odt", "epub", "epub2", "epub3",
    ])
    def test_builtin_defaults_compile(self, format_name):
        assert defaultTemplate_compile(format_name).source

    @pytest.mark.parametrize("format_name", ["docx", "pptx", "native", "json"])
    def test_empty_defaults(self, format_name):
        assert defaultTemplate_compile(format_name).source == ""

    def test_aliased_formats_have_writers(self):
        for format_name in DEFAULT_TEMPLATE_ALIASES:
            assert builtinWriters.spec_get(format_name) is not None, format_name

    def test_unknown_format_has_no_default(self):
        with pytest.raises(FileNotFoundError):
            defaultTemplate_compile("nonexistent")

    def test_html5_default_renders(self):
        template = defaultTemplate_compile("html5")
        output = template.render({
            "title": "Hello",
            "title-prefix": "Site",
            "css": ["a.css"],
            "body": "<p>text</p>",
            "pandoc-version": "1.0.0",
        })
        assert "<title>Site – Hello</title>" in output
        assert '<link rel="stylesheet" href="a.css" />' in output
        assert "<p>text</p>" in output

    def test_user_default_overrides_builtin(self, tmp_path: Path):
        (tmp_path / "templates").mkdir()
        (tmp_path / "templates" / "default.rst").write_text("USER {{ body }}", encoding="utf-8")
        template = defaultTemplate_compile("rst", tmp_path)
        assert template.render({"body": "b"}) == "USER b"
