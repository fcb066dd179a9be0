"""
Custom writers written in Python

A custom writer is a Python file named as the output format
("-t mywriter.py"). The file is executed as a module and may define:

    Writer(document, options) -> str              text output
    ByteStringWriter(document, options) -> bytes  binary output
    Extensions = {"smart": True, "fancy": False}  extension defaults
    Template() -> str                             default template source

Exactly one of Writer or ByteStringWriter must be present. Extensions
lists every extension the writer supports, mapped to whether it is on by
default. Without Template the writer declines a default template.
"""

import importlib.util
import os
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Optional

from ..models.format import ExtensionsConfig
from ..models.writer import BinaryWriter, TextWriter, Writer
from .errors import CustomWriterError
from .log import LOG
from .templates import Template, searchPaths_get, template_compile


@dataclass(frozen=True)
class CustomWriter:
    """
    What a scripting engine returns for a custom writer

    Attributes:
        writer: Text or binary writer calling into the script
        extensions: Extension defaults and supported set declared by the script
        default_template: Provider of the script's default template (may return None)
    """
    writer: Writer
    extensions: ExtensionsConfig
    default_template: Callable[[], Optional[Template]]


class ScriptingEngine:
    """Interface for loaders of custom writers"""

    name = "none"

    def writer_load(self, path: str, data_dir: Optional[Path] = None) -> CustomWriter:
        raise CustomWriterError(f"No scripting engine available to load {path}")


class PythonScriptingEngine(ScriptingEngine):
    """Loads custom writers from Python files"""

    name = "python"

    def scriptPath_find(self, path: str, data_dir: Optional[Path]) -> str:
        """The script path, falling back to <data_dir>/custom/<path>"""
        if os.path.exists(path) or data_dir is None:
            return path
        candidate = Path(data_dir) / "custom" / path
        return str(candidate) if candidate.exists() else path

    def module_load(self, path: str) -> ModuleType:
        """Execute the script as a fresh module"""
        if not os.path.exists(path):
            raise CustomWriterError(f"Custom writer {path} not found")
        module_name = "docsettings_custom_" + Path(path).stem.replace("-", "_")
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise CustomWriterError(f"Cannot load custom writer {path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            raise CustomWriterError(f"Error running custom writer {path}: {e}") from e
        return module

    def writer_load(self, path: str, data_dir: Optional[Path] = None) -> CustomWriter:
        """
        Load a custom writer script.

        Args:
            path: Script path (the format name)
            data_dir: User data directory searched under custom/

        Returns:
            CustomWriter with writer, extensions and default template provider

        Raises:
            CustomWriterError: Missing script, script error, or no writer function
        """
        script = self.scriptPath_find(path, data_dir)
        LOG(f"Loading custom writer {script}", level=2)
        module = self.module_load(script)

        text_fn: Any = getattr(module, "Writer", None)
        bytes_fn: Any = getattr(module, "ByteStringWriter", None)
        if callable(text_fn):
            writer: Writer = TextWriter(lambda options, document, files: text_fn(document, options))
        elif callable(bytes_fn):
            writer = BinaryWriter(lambda options, document, files: bytes_fn(document, options))
        else:
            raise CustomWriterError(
                f"Custom writer {script} defines neither Writer nor ByteStringWriter"
            )

        declared = getattr(module, "Extensions", None) or {}
        if not isinstance(declared, dict):
            raise CustomWriterError(f"Extensions in {script} must be a dict")
        extensions = ExtensionsConfig(
            default=frozenset(name for name, enabled in declared.items() if enabled),
            supported=frozenset(declared),
        )

        template_fn: Any = getattr(module, "Template", None)

        def default_template() -> Optional[Template]:
            if not callable(template_fn):
                LOG(f"Custom writer {script} has no default template", level=2)
                return None
            return template_compile(
                f"{script} (default template)",
                str(template_fn()),
                searchPaths_get(Path(script).resolve().parent, data_dir),
            )

        return CustomWriter(writer=writer, extensions=extensions, default_template=default_template)
