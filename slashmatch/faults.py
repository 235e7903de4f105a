"""
Slashmatch faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can report. Codes are grouped by stage so logs and searches stay predictable.
- CommandException: base type that carries a message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- Families: DecodeError, MatchError, ArgumentError, ResolveError, one per stage
  (codec, walker, argument accessors, resolver). DecodeError is a MatchError,
  since the walker lets decode faults through with the offending path attached.
- trigger(): central entry point to surface any fault (raise or render).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Name-first messages: every message quotes the option or command path at fault.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- Codec, walker, accessors and resolver raise these faults directly, so a handler
  chaining `match.required(...)` calls exits at the first failure.
- The dispatch loop catches CommandException and calls trigger(fault, **options):
  in non-shell mode the fault is raised again, in shell mode it is rendered via rich.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by stage)
    - decoding (21xxx)
      • TYPE_MISMATCH, OUT_OF_RANGE, MALFORMED_ID
    - matching (22xxx)
      • SCHEMA_VIOLATION, INCOMPLETE_INTERACTION, AMBIGUOUS_INTERACTION, UNKNOWN_OPTION
    - arguments (23xxx)
      • MISSING_ARGUMENT, WRONG_TYPE
    - routing (24xxx)
      • UNREGISTERED_COMMAND

    normalize() lets hosts remap codes to their own labels (see __codes__).
    """
    # --- decoding errors (21xxx) ---
    TYPE_MISMATCH               = 21101
    OUT_OF_RANGE                = 21102
    MALFORMED_ID                = 21103

    # --- matching errors (22xxx) ---
    SCHEMA_VIOLATION            = 22101
    INCOMPLETE_INTERACTION      = 22102
    AMBIGUOUS_INTERACTION       = 22103
    UNKNOWN_OPTION              = 22104

    # --- argument errors (23xxx) ---
    MISSING_ARGUMENT            = 23101
    WRONG_TYPE                  = 23102

    # --- routing errors (24xxx) ---
    UNREGISTERED_COMMAND        = 24101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a one-sentence lowercase message plus read-only options.

    options
    - title, code, hint, docs: presentation (title/code default to the class ones).
    - name, path, kind, expected, found, value: context about the failure.
    - shell, fancy, colorful, ratio: rendering switches (see trigger()).
    """
    __code__ = Unset
    __title__ = "command fault"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message else self.title

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        path = self.options.get("path")
        prog = text(getattr(main, "__prog__", path[0] if path else "slashmatch"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " - ",
            text(code, styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            width = console.width - 4
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MatchError(CommandException):
    __title__ = "interaction mismatch"


class DecodeError(MatchError):
    __title__ = "undecodable option value"


class ArgumentError(CommandException):
    __title__ = "bad argument"


class ResolveError(CommandException):
    __title__ = "unroutable command"


class TypeMismatchError(DecodeError):
    __code__ = FaultCode.TYPE_MISMATCH
    __title__ = "type mismatch"


class OutOfRangeError(DecodeError):
    __code__ = FaultCode.OUT_OF_RANGE
    __title__ = "value out of range"


class MalformedIdError(DecodeError):
    __code__ = FaultCode.MALFORMED_ID
    __title__ = "malformed id"


class SchemaViolationError(MatchError):
    __code__ = FaultCode.SCHEMA_VIOLATION
    __title__ = "schema violation"


class IncompleteInteractionError(MatchError):
    __code__ = FaultCode.INCOMPLETE_INTERACTION
    __title__ = "incomplete interaction"


class AmbiguousInteractionError(MatchError):
    __code__ = FaultCode.AMBIGUOUS_INTERACTION
    __title__ = "ambiguous interaction"


class UnknownOptionError(MatchError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class MissingArgumentError(ArgumentError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"


class WrongTypeError(ArgumentError):
    __code__ = FaultCode.WRONG_TYPE
    __title__ = "wrong argument type"


class UnregisteredCommandError(ResolveError):
    __code__ = FaultCode.UNREGISTERED_COMMAND
    __title__ = "unregistered command"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.

    typical options
    - shell, fancy, colorful, ratio, and any context the reporter may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "MatchError",
    "DecodeError",
    "ArgumentError",
    "ResolveError",
    "TypeMismatchError",
    "OutOfRangeError",
    "MalformedIdError",
    "SchemaViolationError",
    "IncompleteInteractionError",
    "AmbiguousInteractionError",
    "UnknownOptionError",
    "MissingArgumentError",
    "WrongTypeError",
    "UnregisteredCommandError",
    "FaultCode",
    "trigger",
    "getdoc",
)
