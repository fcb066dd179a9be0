"""
Template variable context

VariableContext is an ordered, immutable mapping from variable name to a
value (a string, a list, or a nested mapping). Setting a name that already
has a value never overwrites it: a scalar becomes a one-element list and the
new values are appended.

The context handed to templates is built by applying VARIABLE_STEPS, in
order, to the user's variables. Order matters because later steps may
append to lists earlier steps created.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..models.options import Options
from .fetch import dataFile_read, text_fetch
from .log import LOG


DZSLIDES_MARKER = "<!-- {{{{ dzslides core"
VERSION_VARIABLE = "pandoc-version"


def value_convert(value: Any) -> Any:
    """Normalise a value: tuples become lists, mappings become dicts"""
    if isinstance(value, (list, tuple)):
        return [value_convert(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): value_convert(v) for k, v in value.items()}
    return value


class VariableContext(Mapping):
    """
    Ordered mapping of template variables

    Instances are never modified; variable_set() and listVariable_set()
    return new contexts.

    Example:
        >>> ctx = VariableContext({"author": "Ada"})
        >>> ctx.variable_set("author", "Grace")["author"]
        ['Ada', 'Grace']
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = {
            str(k): value_convert(v) for k, v in (values or {}).items()
        }

    @classmethod
    def pairs_create(cls, pairs: Iterable[Tuple[str, Any]]) -> "VariableContext":
        """Build a context by setting each (name, value) pair in turn"""
        return reduce(lambda ctx, pair: ctx.variable_set(*pair), pairs, cls())

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableContext({self._values!r})"

    def _appended(self, key: str, items: List[Any], as_list: bool) -> "VariableContext":
        updated = dict(self._values)
        if key not in updated:
            updated[key] = items if as_list else items[0]
        elif isinstance(updated[key], list):
            updated[key] = updated[key] + items
        else:
            updated[key] = [updated[key]] + items
        result = VariableContext()
        result._values = updated
        return result

    def variable_set(self, key: str, value: Any) -> "VariableContext":
        """
        Set one value. A new name holds the value itself; an existing name
        turns into a list with the value appended.
        """
        return self._appended(key, [value_convert(value)], as_list=False)

    def listVariable_set(self, key: str, values: Iterable[Any]) -> "VariableContext":
        """
        Append several values. A new name holds a list (even of one value);
        an empty values list leaves the context unchanged.
        """
        items = [value_convert(v) for v in values]
        if not items:
            return self
        return self._appended(key, items, as_list=True)

    def dict_get(self) -> Dict[str, Any]:
        """Plain dict copy of the variables"""
        return dict(self._values)


@dataclass(frozen=True)
class VariableInputs:
    """
    Everything the variable steps read besides the context itself

    Attributes:
        options: Options being resolved
        output_file: Resolved output path ("-" for stdout)
        format: Resolved output format
        version: Version string exposed to templates
        curdir: Current working directory
        data_dir: User data directory
    """
    options: Options
    output_file: str
    format: str
    version: str
    curdir: str
    data_dir: Optional[Path] = None


VariableStep = Callable[[VariableContext, VariableInputs], VariableContext]


def filesContents_read(paths: Iterable[str]) -> List[str]:
    """Read include files (paths or URLs) as UTF-8 text"""
    return [text_fetch(path) for path in paths]


def dzslidesCore_extract(template_html: str) -> str:
    """
    Everything from the dzslides core marker line to the end of the asset.

    Each returned line is newline-terminated. Without the marker the
    result is empty.
    """
    lines = template_html.split("\n")
    if template_html.endswith("\n"):
        lines = lines[:-1]
    for index, line in enumerate(lines):
        if line.startswith(DZSLIDES_MARKER):
            return "".join(f"{kept}\n" for kept in lines[index:])
    return ""


def sourcefile_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    files = ["-"] if inputs.options.input_files is None else inputs.options.input_files
    return ctx.listVariable_set("sourcefile", files)


def outputfile_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.variable_set("outputfile", inputs.output_file)


def version_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.variable_set(VERSION_VARIABLE, inputs.version)


def includeBefore_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.listVariable_set("include-before", filesContents_read(inputs.options.include_before_body))


def includeAfter_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.listVariable_set("include-after", filesContents_read(inputs.options.include_after_body))


def headerIncludes_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.listVariable_set("header-includes", filesContents_read(inputs.options.include_in_header))


def css_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.listVariable_set("css", inputs.options.css)


def titlePrefix_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    if inputs.options.title_prefix is None:
        return ctx
    return ctx.variable_set("title-prefix", inputs.options.title_prefix)


def epubCoverImage_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    if inputs.options.epub_cover_image is None:
        return ctx
    return ctx.variable_set("epub-cover-image", inputs.options.epub_cover_image)


def curdir_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    return ctx.variable_set("curdir", inputs.curdir)


def dzslidesCore_add(ctx: VariableContext, inputs: VariableInputs) -> VariableContext:
    if inputs.format != "dzslides":
        return ctx
    template_html = dataFile_read(os.path.join("dzslides", "template.html"), inputs.data_dir)
    return ctx.variable_set("dzslides-core", dzslidesCore_extract(template_html))


VARIABLE_STEPS: Tuple[VariableStep, ...] = (
    sourcefile_add,
    outputfile_add,
    version_add,
    includeBefore_add,
    includeAfter_add,
    headerIncludes_add,
    css_add,
    titlePrefix_add,
    epubCoverImage_add,
    curdir_add,
    dzslidesCore_add,
)


def variables_build(
    inputs: VariableInputs, steps: Tuple[VariableStep, ...] = VARIABLE_STEPS
) -> VariableContext:
    """
    Apply the variable steps, left to right, to the user's variables.

    Args:
        inputs: Options and resolved values the steps read
        steps: Steps to apply (defaults to VARIABLE_STEPS)

    Returns:
        Final variable context
    """
    initial = VariableContext(inputs.options.variables)
    LOG(f"Building variables from {len(initial)} user variable(s)", level=2)
    return reduce(lambda ctx, step: step(ctx, inputs), steps, initial)
