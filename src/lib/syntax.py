"""
Syntax map and highlighting style loading

The syntax map maps lowercase language names to syntax definitions. It
starts from every lexer Pygments ships and is extended with user syntax
definitions written in YAML, each compiled into a Pygments RegexLexer
subclass:

    name: Foo
    aliases: [foo]
    filenames: ["*.foo"]
    flags: [MULTILINE]
    tokens:
      root:
        - ['#.*$', Comment.Single]
        - ['"', String, string]
        - include: whitespace
      string:
        - ['"', String, '#pop']
        - ['[^"]+', String]
      whitespace:
        - ['\\s+', Text]

Maps are never modified in place: adding a definition returns a new map.
"""

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml
from pygments.lexer import Lexer, RegexLexer, include
from pygments.lexers import get_all_lexers, get_lexer_by_name
from pygments.style import Style
from pygments.styles import get_style_by_name
from pygments.token import STANDARD_TYPES, string_to_tokentype
from pygments.util import ClassNotFound

from .errors import HighlightStyleError, SyntaxMapError
from .log import LOG


SyntaxMap = Mapping[str, "SyntaxDefinition"]


@dataclass(frozen=True)
class SyntaxDefinition:
    """
    Lexical rules for one language

    Attributes:
        name: Language name (map key is its lowercase form)
        aliases: Short names the language is known by
        filenames: Filename globs the language applies to
        lexer_class: Lexer class for user definitions; None for built-ins,
                     which are looked up in Pygments on demand
    """
    name: str
    aliases: Tuple[str, ...] = ()
    filenames: Tuple[str, ...] = ()
    lexer_class: Optional[type] = field(default=None, compare=False)

    def lexer_make(self, **options: Any) -> Lexer:
        """Instantiate a lexer for this language"""
        if self.lexer_class is not None:
            return self.lexer_class(**options)
        return get_lexer_by_name(self.aliases[0] if self.aliases else self.name, **options)


@lru_cache(maxsize=1)
def defaultSyntaxMap_get() -> SyntaxMap:
    """
    Built-in syntax map, one entry per Pygments lexer.

    Loaded once per process and returned read-only.
    """
    entries: Dict[str, SyntaxDefinition] = {}
    for name, aliases, filenames, _mimetypes in get_all_lexers():
        if not aliases:
            continue
        entries[name.lower()] = SyntaxDefinition(
            name=name, aliases=tuple(aliases), filenames=tuple(filenames)
        )
    return MappingProxyType(entries)


def syntaxDefinition_add(definition: SyntaxDefinition, syntax_map: SyntaxMap) -> SyntaxMap:
    """Return a new map with the definition added (replacing a same-named entry)"""
    merged = dict(syntax_map)
    merged[definition.name.lower()] = definition
    return MappingProxyType(merged)


def _tokenType_get(name: Any, state: str) -> Any:
    tokentype = string_to_tokentype(str(name))
    if tokentype not in STANDARD_TYPES:
        raise SyntaxMapError(f"unknown token type {name} in state {state}")
    return tokentype


def _rules_build(state: str, rules: Any) -> List[Any]:
    """Convert the YAML rules of one state into Pygments rule tuples"""
    if not isinstance(rules, list):
        raise SyntaxMapError(f"state {state} must be a list of rules")
    built: List[Any] = []
    for rule in rules:
        if isinstance(rule, dict) and set(rule) == {"include"}:
            built.append(include(str(rule["include"])))
            continue
        if not isinstance(rule, list) or len(rule) not in (2, 3):
            raise SyntaxMapError(f"malformed rule {rule!r} in state {state}")
        regex, tokentype = str(rule[0]), _tokenType_get(rule[1], state)
        if len(rule) == 3:
            built.append((regex, tokentype, rule[2]))
        else:
            built.append((regex, tokentype))
    return built


def syntaxDefinition_fromConfig(config: Any, origin: str = "<string>") -> SyntaxDefinition:
    """
    Build a syntax definition from parsed YAML.

    Args:
        config: Parsed YAML document
        origin: File name used in error messages

    Returns:
        SyntaxDefinition wrapping a freshly built RegexLexer subclass

    Raises:
        SyntaxMapError: Missing keys, bad regexes, unknown states or token types
    """
    if not isinstance(config, dict):
        raise SyntaxMapError(f"{origin}: syntax definition must be a mapping")
    name = config.get("name")
    tokens = config.get("tokens")
    if not name or not isinstance(tokens, dict) or "root" not in tokens:
        raise SyntaxMapError(f"{origin}: syntax definition needs a name and a root state")

    for key in ("flags", "aliases", "filenames"):
        if key in config and not isinstance(config[key], list):
            raise SyntaxMapError(f"{origin}: {key} must be a list")

    flags = 0
    for flag in config.get("flags", ["MULTILINE"]):
        if not isinstance(getattr(re, str(flag), None), re.RegexFlag):
            raise SyntaxMapError(f"{origin}: unknown regex flag {flag}")
        flags |= getattr(re, str(flag))

    aliases = [str(a) for a in config.get("aliases", [str(name).lower()])]
    filenames = [str(f) for f in config.get("filenames", [])]
    try:
        states = {str(state): _rules_build(str(state), rules) for state, rules in tokens.items()}
    except SyntaxMapError as e:
        raise SyntaxMapError(f"{origin}: {e}") from e

    class_name = re.sub(r"\W", "", str(name).title()) + "Lexer"
    lexer_class = type(class_name, (RegexLexer,), {
        "name": str(name),
        "aliases": aliases,
        "filenames": filenames,
        "flags": flags,
        "tokens": states,
    })

    # Pygments compiles the rules on first instantiation
    try:
        lexer_class()
    except (ValueError, AssertionError, TypeError, KeyError, re.error) as e:
        raise SyntaxMapError(f"{origin}: {e}") from e

    return SyntaxDefinition(
        name=str(name), aliases=tuple(aliases), filenames=tuple(filenames), lexer_class=lexer_class
    )


def syntaxDefinition_parse(path: str) -> SyntaxDefinition:
    """
    Parse a YAML syntax definition file.

    Raises:
        SyntaxMapError: The file is not valid YAML or not a valid definition
        OSError: The file cannot be read
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SyntaxMapError(f"{path}: {e}") from e
    return syntaxDefinition_fromConfig(config, origin=path)


def syntaxMap_load(paths: Iterable[str], base: Optional[SyntaxMap] = None) -> SyntaxMap:
    """
    Fold user syntax definition files into a syntax map.

    Args:
        paths: Definition files, applied in order (later ones win)
        base: Starting map (defaults to the built-in map, which is not modified)

    Returns:
        Merged read-only syntax map
    """
    syntax_map = defaultSyntaxMap_get() if base is None else base
    for path in paths:
        definition = syntaxDefinition_parse(path)
        LOG(f"Adding syntax definition '{definition.name}' from {path}", level=2)
        syntax_map = syntaxDefinition_add(definition, syntax_map)
    return syntax_map


def styleFile_load(path: str) -> type:
    """
    Build a Pygments style from a YAML style file.

    The file holds an optional background_color and a styles mapping of
    token type to Pygments style string ("bold #ff0000").
    """
    with open(path, 'r', encoding='utf-8') as f:
        try:
            config: Any = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise HighlightStyleError(f"Failed to parse {path}: {e}") from e
    if not isinstance(config, dict) or not isinstance(config.get("styles", {}), dict):
        raise HighlightStyleError(f"{path}: style file must map token types to styles")

    styles = {string_to_tokentype(str(k)): str(v) for k, v in config.get("styles", {}).items()}
    attributes: Dict[str, Any] = {"styles": styles}
    if "background_color" in config:
        attributes["background_color"] = str(config["background_color"])
    try:
        return type("CustomStyle", (Style,), attributes)
    except (ValueError, AssertionError) as e:
        raise HighlightStyleError(f"{path}: {e}") from e


def highlightStyle_lookup(name: Optional[str]) -> Optional[type]:
    """
    Resolve a highlighting style name.

    Args:
        name: Pygments style name, or a path to a YAML style file; None or ""
              disables highlighting

    Returns:
        Pygments Style subclass, or None

    Raises:
        HighlightStyleError: Unknown style name or invalid style file
    """
    if not name:
        return None
    if name.endswith((".yaml", ".yml")) and os.path.exists(name):
        return styleFile_load(name)
    try:
        return get_style_by_name(name)
    except ClassNotFound as e:
        raise HighlightStyleError(f"Unknown highlight-style {name}") from e
