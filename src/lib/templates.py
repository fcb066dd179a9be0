"""
Template loading and compilation

Templates are Jinja2 sources. A template may include partials with
{% include %}, {% import %} or {% extends %}; partials are looked up next
to the template, then in the user data directory's templates/, then in the
built-in templates. All partials are resolved when the template is
compiled, so a missing or broken partial fails resolution rather than the
later render.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, TemplateSyntaxError, meta
from jinja2 import Template as JinjaTemplate
from jinja2.nodes import Template as TemplateAst

from .errors import TemplateCompilationError
from .fetch import DATA_DIR, text_fetch, url_is, dataFile_read
from .log import LOG


BUILTIN_TEMPLATES_DIR = DATA_DIR / "templates"

# Format name -> name of the built-in default template (templates/default.<name>)
DEFAULT_TEMPLATE_ALIASES: Dict[str, str] = {
    "html": "html5",
    "beamer": "latex",
    "epub": "epub3",
    "odt": "opendocument",
    "gfm": "markdown",
    "commonmark": "markdown",
}

# Formats whose default template is empty
EMPTY_DEFAULT_TEMPLATES = frozenset({"docx", "pptx", "native", "json"})


@dataclass(frozen=True)
class Template:
    """
    A compiled template

    Attributes:
        name: Where the template came from (path, URL or default.<format>)
        source: Template source text
        compiled: Jinja2 template ready to render
    """
    name: str
    source: str
    compiled: JinjaTemplate

    def render(self, context: Mapping[str, Any]) -> str:
        """
        Render the template.

        Variable names are exposed with hyphens replaced by underscores
        ("header-includes" becomes header_includes); the untouched mapping
        is available as ``vars``.
        """
        names = {key.replace("-", "_"): value for key, value in context.items()}
        names["vars"] = dict(context)
        return self.compiled.render(names)


def environment_build(search_paths: List[Path]) -> Environment:
    """Jinja2 environment whose loader resolves partials along search_paths"""
    return Environment(
        loader=FileSystemLoader([str(p) for p in search_paths]),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def searchPaths_get(template_dir: Optional[Path], data_dir: Optional[Path]) -> List[Path]:
    """Partial search path: template's own directory, user data, built-ins"""
    paths: List[Path] = []
    if template_dir is not None:
        paths.append(template_dir)
    if data_dir is not None:
        paths.append(Path(data_dir) / "templates")
    paths.append(BUILTIN_TEMPLATES_DIR)
    return paths


def partials_resolve(environment: Environment, ast: TemplateAst, seen: Set[str]) -> None:
    """
    Load every partial a template refers to, recursively.

    Raises:
        TemplateNotFound: A partial is missing
        TemplateSyntaxError: A partial does not compile
    """
    for partial in meta.find_referenced_templates(ast):
        # Dynamic names can only be resolved at render time
        if partial is None or partial in seen:
            continue
        seen.add(partial)
        source, _, _ = environment.loader.get_source(environment, partial)
        partials_resolve(environment, environment.parse(source, name=partial), seen)


def template_compile(name: str, source: str, search_paths: List[Path]) -> Template:
    """
    Compile template source with access to partials.

    Args:
        name: Template name used in error messages
        source: Jinja2 template text
        search_paths: Directories searched for partials

    Returns:
        Compiled Template

    Raises:
        TemplateCompilationError: Syntax error or missing partial
    """
    environment = environment_build(search_paths)
    try:
        ast = environment.parse(source, name=name)
        partials_resolve(environment, ast, set())
        compiled = environment.from_string(source)
    except TemplateSyntaxError as e:
        where = e.name or name
        raise TemplateCompilationError(f"{where} line {e.lineno}: {e.message}") from e
    except TemplateNotFound as e:
        raise TemplateCompilationError(f"{name}: partial {e.name} not found") from e
    return Template(name=name, source=source, compiled=compiled)


def templateSource_read(path: str, data_dir: Optional[Path]) -> str:
    """
    Read template source from a URL, a local path, or the user data dir.

    A relative path missing locally is looked up under
    <data_dir>/templates/. When neither exists the local read raises.
    """
    if url_is(path):
        return text_fetch(path)
    if not os.path.exists(path) and not os.path.isabs(path) and data_dir is not None:
        candidate = Path(data_dir) / "templates" / path
        if candidate.exists():
            return candidate.read_text(encoding="utf-8")
    return Path(path).read_text(encoding="utf-8")


def templatePath_normalize(path: str, format_name: str) -> str:
    """
    Append the format as extension when the path has none.

    Example:
        >>> templatePath_normalize("letter", "latex")
        'letter.latex'
    """
    if os.path.splitext(path)[1] == "":
        return f"{path}.{format_name}"
    return path


def defaultTemplateName_get(format_name: str) -> str:
    """Name of the built-in default template for a format"""
    return DEFAULT_TEMPLATE_ALIASES.get(format_name, format_name)


def defaultTemplate_compile(format_name: str, data_dir: Optional[Path] = None) -> Template:
    """
    Compile the default template of a built-in format.

    Raises:
        FileNotFoundError: No default template exists for the format
        TemplateCompilationError: The default template does not compile
    """
    name = f"default.{defaultTemplateName_get(format_name)}"
    if format_name in EMPTY_DEFAULT_TEMPLATES:
        source = ""
    else:
        source = dataFile_read(Path("templates") / name, data_dir)
    LOG(f"Using default template {name}", level=2)
    return template_compile(name, source, searchPaths_get(None, data_dir))


def template_resolve(
    standalone: bool,
    template_path: Optional[str],
    format_name: str,
    default_provider: Callable[[], Optional[Template]],
    data_dir: Optional[Path] = None,
) -> Optional[Template]:
    """
    Decide which template, if any, the writer uses.

    Args:
        standalone: Whether standalone output is produced
        template_path: User-specified template path or URL
        format_name: Output format (appended as extension when the path has none)
        default_provider: Supplies the default template when no path is given
        data_dir: User data directory

    Returns:
        Compiled template, or None when output is not standalone (or the
        default provider declines to supply one)

    Raises:
        TemplateCompilationError: The template or one of its partials fails
        OSError: The template file cannot be read
    """
    if not standalone:
        return None
    if template_path is None:
        return default_provider()

    path = templatePath_normalize(template_path, format_name)
    LOG(f"Loading template {path}", level=2)
    source = templateSource_read(path, data_dir)
    template_dir = None if url_is(path) else Path(path).resolve().parent
    return template_compile(path, source, searchPaths_get(template_dir, data_dir))
