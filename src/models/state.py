"""
Resolution state model and pipeline helper

Defines the ResolutionState dataclass for the functional pipeline pattern and
the pipeline() helper for composing resolution stages.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, FrozenSet, List, Mapping, Optional, Type, TypeVar, TYPE_CHECKING

from .format import FlavoredFormat
from .options import Options

if TYPE_CHECKING:
    from ..lib.templates import Template
    from ..lib.variables import VariableContext
    from .settings import OutputSettings
    from .writer import Writer


RS = TypeVar("RS", bound="ResolutionState")


@dataclass(frozen=True)
class LogMessage:
    """
    Recoverable condition reported during resolution

    Attributes:
        kind: Message identifier (e.g. "CouldNotDeduceFormat")
        message: Human-readable text
    """
    kind: str
    message: str


@dataclass
class ResolutionState:
    """
    Central state container for the resolution pipeline (state bus pattern).

    Each stage receives the previous state, copies it and fills in the
    fields it is responsible for.

    Pipeline stages and their state additions:
        - Initial: options, scriptingEngine, verbosity, dataDir
        - args_dump: (exits the process when options.dump_args is set)
        - epubMetadata_read: epubMetadata
        - format_resolve: pdfOutput, writerName, pdfEngine, flavored, format, standalone
        - writer_select: writer, extensions, template
        - syntax_load: syntaxMap
        - highlightStyle_select: highlightStyle
        - variables_populate: variables
        - settings_assemble: outputSettings

    Attributes:
        options: The options being resolved (never modified)
        scriptingEngine: Loader for custom writer scripts
        verbosity: Logging verbosity level (0-3)
        messages: Recoverable conditions reported so far
        dataDir: User data directory searched before built-in data
    """

    options: Options = field(default_factory=Options)
    scriptingEngine: Optional[Any] = field(default=None)
    verbosity: int = field(default=1)
    messages: List[LogMessage] = field(default_factory=list)
    dataDir: Optional[Path] = field(default=None)

    # Format & engine
    pdfOutput: bool = field(default=False)
    writerName: str = field(default="")
    pdfEngine: Optional[str] = field(default=None)
    flavored: Optional[FlavoredFormat] = field(default=None)
    format: str = field(default="")
    standalone: bool = field(default=False)

    # Resources and writer
    epubMetadata: Optional[str] = field(default=None)
    writer: Optional["Writer"] = field(default=None)
    extensions: FrozenSet[str] = field(default_factory=frozenset)
    template: Optional["Template"] = field(default=None)

    # Highlighting and variables
    syntaxMap: Optional[Mapping[str, Any]] = field(default=None)
    highlightStyle: Optional[type] = field(default=None)
    variables: Optional["VariableContext"] = field(default=None)

    outputSettings: Optional["OutputSettings"] = field(default=None)

    @classmethod
    def state_createFromOptions(
        cls: Type["ResolutionState"],
        options: Options,
        scriptingEngine: Any = None,
        verbosity: Optional[int] = None,
        dataDir: Optional[Path] = None,
    ) -> "ResolutionState":
        """
        Create the initial ResolutionState for a set of options.

        Args:
            options: Options to resolve
            scriptingEngine: Custom writer loader (defaults are filled in by the resolver)
            verbosity: Overrides options.verbosity when given
            dataDir: Effective user data directory

        Returns:
            ResolutionState ready for the first pipeline stage
        """
        return cls(
            options=options,
            scriptingEngine=scriptingEngine,
            verbosity=options.verbosity if verbosity is None else verbosity,
            dataDir=dataDir,
        )

    def copy(self: RS) -> RS:
        """
        Creates a shallow copy of the ResolutionState instance.

        The messages list is copied so stages never share it.

        Returns:
            A new ResolutionState instance.
        """
        new_state = type(self)(**self.__dict__)
        new_state.messages = list(self.messages)
        return new_state


def pipeline(
    initial_state: ResolutionState, *stages: Callable[[ResolutionState], ResolutionState]
) -> ResolutionState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ResolutionState) -> ResolutionState that receives
    the output of the previous stage and returns a new state. A stage that
    raises aborts the pipeline; later stages never run.

    Args:
        initial_state: Starting ResolutionState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ResolutionState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            args_dump,
            format_resolve,
            writer_select,
        )

    This is equivalent to:
        writer_select(format_resolve(args_dump(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
