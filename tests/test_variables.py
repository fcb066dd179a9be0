"""
Template variable context tests

Covers append semantics of VariableContext and the ordered variable steps.
"""

from pathlib import Path

import pytest

from docsettings.lib.variables import (
    VARIABLE_STEPS,
    VariableContext,
    VariableInputs,
    dzslidesCore_add,
    dzslidesCore_extract,
    sourcefile_add,
    variables_build,
)
from docsettings.models import Options


def inputs_make(options: Options, format_name: str = "html", data_dir=None) -> VariableInputs:
    return VariableInputs(
        options=options,
        output_file=options.outputFile_get(),
        format=format_name,
        version="9.9",
        curdir="/work",
        data_dir=data_dir,
    )


class TestVariableContext:
    """Append-only semantics"""

    def test_new_key_holds_scalar(self):
        ctx = VariableContext().variable_set("title", "Report")
        assert ctx["title"] == "Report"

    def test_existing_scalar_becomes_list(self):
        ctx = VariableContext({"author": "Ada"}).variable_set("author", "Grace")
        assert ctx["author"] == ["Ada", "Grace"]

    def test_existing_list_is_extended(self):
        ctx = VariableContext({"css": ["a.css"]}).listVariable_set("css", ["b.css", "c.css"])
        assert ctx["css"] == ["a.css", "b.css", "c.css"]

    def test_list_on_new_key_is_list(self):
        ctx = VariableContext().listVariable_set("css", ["only.css"])
        assert ctx["css"] == ["only.css"]

    def test_empty_list_is_noop(self):
        ctx = VariableContext({"x": "1"})
        assert ctx.listVariable_set("css", []) is ctx
        assert "css" not in ctx

    def test_original_context_unchanged(self):
        original = VariableContext({"a": "1"})
        original.variable_set("a", "2")
        assert original["a"] == "1"

    def test_insertion_order_kept(self):
        ctx = VariableContext().variable_set("z", "1").variable_set("a", "2")
        assert list(ctx) == ["z", "a"]

    def test_pairs_create_folds_repeats(self):
        ctx = VariableContext.pairs_create([("k", "1"), ("other", "x"), ("k", "2")])
        assert ctx.dict_get() == {"k": ["1", "2"], "other": "x"}

    def test_nested_values_are_normalised(self):
        ctx = VariableContext({"meta": {"tags": ("a", "b")}})
        assert ctx["meta"] == {"tags": ["a", "b"]}


class TestDzslidesCore:
    """Extracting the dzslides core from the asset"""

    def test_from_marker_to_end(self):
        html = "<html>\n<!-- {{{{ dzslides core\ncore1\ncore2\n"
        assert dzslidesCore_extract(html) == "<!-- {{{{ dzslides core\ncore1\ncore2\n"

    def test_last_line_without_newline_is_terminated(self):
        assert dzslidesCore_extract("<!-- {{{{ dzslides core x\nend") == "<!-- {{{{ dzslides core x\nend\n"

    def test_missing_marker_is_empty(self):
        assert dzslidesCore_extract("<html>\n<body></body>\n") == ""

    def test_builtin_asset(self):
        ctx = dzslidesCore_add(VariableContext(), inputs_make(Options(), "dzslides"))
        core = ctx["dzslides-core"]
        assert core.startswith("<!-- {{{{ dzslides core")
        assert core.endswith("\n")

    def test_other_formats_skip(self):
        ctx = dzslidesCore_add(VariableContext(), inputs_make(Options(), "html"))
        assert "dzslides-core" not in ctx

    def test_user_data_dir_asset(self, tmp_path: Path):
        (tmp_path / "dzslides").mkdir()
        (tmp_path / "dzslides" / "template.html").write_text(
            "head\n<!-- {{{{ dzslides core custom\nmine\n", encoding="utf-8"
        )
        ctx = dzslidesCore_add(VariableContext(), inputs_make(Options(), "dzslides", tmp_path))
        assert ctx["dzslides-core"] == "<!-- {{{{ dzslides core custom\nmine\n"


class TestVariableSteps:
    """Building the full variable context"""

    def test_step_order(self):
        names = [step.__name__ for step in VARIABLE_STEPS]
        assert names == [
            "sourcefile_add",
            "outputfile_add",
            "version_add",
            "includeBefore_add",
            "includeAfter_add",
            "headerIncludes_add",
            "css_add",
            "titlePrefix_add",
            "epubCoverImage_add",
            "curdir_add",
            "dzslidesCore_add",
        ]

    def test_defaults(self):
        ctx = variables_build(inputs_make(Options()))
        assert ctx["sourcefile"] == ["-"]
        assert ctx["outputfile"] == "-"
        assert ctx["pandoc-version"] == "9.9"
        assert ctx["curdir"] == "/work"
        for absent in ("include-before", "include-after", "header-includes", "css",
                       "title-prefix", "epub-cover-image", "dzslides-core"):
            assert absent not in ctx

    def test_empty_input_list_is_noop(self):
        ctx = variables_build(inputs_make(Options(input_files=[])))
        assert "sourcefile" not in ctx

    def test_sourcefile_appended_twice(self):
        inputs = inputs_make(Options(input_files=["a.md", "b.md"]))
        ctx = sourcefile_add(sourcefile_add(VariableContext(), inputs), inputs)
        assert ctx["sourcefile"] == ["a.md", "b.md", "a.md", "b.md"]

    def test_user_variables_are_appended_to(self):
        options = Options(
            output_file="out.html",
            variables={"css": "base.css", "curdir": "mine"},
            css=["extra.css"],
        )
        ctx = variables_build(inputs_make(options))
        assert ctx["css"] == ["base.css", "extra.css"]
        assert ctx["curdir"] == ["mine", "/work"]
        assert ctx["outputfile"] == "out.html"

    def test_include_files_are_read(self, write_file):
        before = write_file("before.html", "<p>before</p>")
        header1 = write_file("h1.html", "<meta a>")
        header2 = write_file("h2.html", "\ufeff<meta b>")
        options = Options(include_before_body=[before], include_in_header=[header1, header2])
        ctx = variables_build(inputs_make(options))
        assert ctx["include-before"] == ["<p>before</p>"]
        assert ctx["header-includes"] == ["<meta a>", "<meta b>"]

    def test_missing_include_raises(self, tmp_path: Path):
        options = Options(include_after_body=[str(tmp_path / "nope.html")])
        with pytest.raises(FileNotFoundError):
            variables_build(inputs_make(options))

    def test_title_prefix_and_cover(self):
        options = Options(title_prefix="Docs", epub_cover_image="cover.png")
        ctx = variables_build(inputs_make(options))
        assert ctx["title-prefix"] == "Docs"
        assert ctx["epub-cover-image"] == "cover.png"

    def test_custom_steps(self):
        options = Options(input_files=["x.md"])
        ctx = variables_build(inputs_make(options), steps=(sourcefile_add,))
        assert ctx.dict_get() == {"sourcefile": ["x.md"]}
