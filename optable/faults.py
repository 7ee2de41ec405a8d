"""
optable faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse-time and
  table-construction problem. The hundreds digit groups encode the process exit
  status the problem maps to (128xx → programmer error, 129xx → usage error).
- ExitStatus: the three statuses a command built on optable exits with.
- OptionException: base type that carries message + options and knows how to
  render itself (one-line diagnostic, or a panel when fancy).
- TableExit: an exception group collecting every table bug found in one pass.
- trigger(): central entry point to surface a fault (raise, or render and exit).

Integration
- The matchers and the value extractor raise faults; the parse loop catches them
  and maps them to a terminal state, keeping the fault on the context.
- parse_options() triggers the fault with shell=True to print it and exit.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class ExitStatus(IntEnum):
    """
    process exit statuses of the convenience entry point.
    """
    SUCCESS = 0
    BUG = 128
    USAGE = 129


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - programmer errors (128xx): the option table or the parse flags are wrong;
      always fatal, surfaced before any token is looked at.
    - usage errors (129xx): the argument vector does not fit the table.

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- programmer errors (128xx) ---
    TABLE_BUG                = 12801
    CONFLICTING_PARSE_FLAGS  = 12802

    # --- usage errors (129xx) ---
    MISSING_VALUE            = 12901
    UNEXPECTED_VALUE         = 12902
    TYPE_MISMATCH            = 12903
    NEGATION_DISALLOWED      = 12904
    MODE_CONFLICT            = 12905
    AMBIGUOUS_ABBREVIATION   = 12906
    UNKNOWN_OPTION           = 12907
    TYPO_SUGGESTION          = 12908
    CALLBACK_FAILURE         = 12909

    @property
    def status(self):
        """
        exit status implied by the code's domain.
        """
        return ExitStatus.BUG if self.value // 100 == ExitStatus.BUG else ExitStatus.USAGE

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    main = __import__("__main__")
    return getattr(main, "__prog__", options.get("prog") or os.path.basename(sys.argv[0]))


class OptionException(Exception):
    code = FaultCode.UNKNOWN_OPTION
    title = "option error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def status(self):
        return self.options.get("code", self.code).status

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-label": "bold #FF4DA6",  # pinky label
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), style)

        message = Text.assemble(text("error", styler("error-label")), ": ", text(self.message, styler("error-message")))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            header = Text.assemble(
                "[ ",
                text(_program(self.options), styler("prog-name")),
                " — ",
                text(self.options.get("code", self.code).normalize(), styler("code")),
                " | ",
                text(self.options.get("title", self.title).title(), styler("error-title")),
                " ]"
            )
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(*renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class TableBugError(OptionException):
    code = FaultCode.TABLE_BUG
    title = "option table bug"
class MissingValueError(OptionException):
    code = FaultCode.MISSING_VALUE
    title = "missing value"
class UnexpectedValueError(OptionException):
    code = FaultCode.UNEXPECTED_VALUE
    title = "unexpected value"
class TypeMismatchError(OptionException):
    code = FaultCode.TYPE_MISMATCH
    title = "bad value"
class NegationDisallowedError(OptionException):
    code = FaultCode.NEGATION_DISALLOWED
    title = "negation unavailable"
class ModeConflictError(OptionException):
    code = FaultCode.MODE_CONFLICT
    title = "incompatible modes"
class AmbiguousAbbreviationError(OptionException):
    code = FaultCode.AMBIGUOUS_ABBREVIATION
    title = "ambiguous option"
class UnknownOptionError(OptionException):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"
class TypoSuggestionError(UnknownOptionError):
    code = FaultCode.TYPO_SUGGESTION
    title = "did you mean"
class CallbackFailureError(OptionException):
    code = FaultCode.CALLBACK_FAILURE
    title = "rejected value"


class TableExit(ExceptionGroup[TableBugError]):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad option table", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad option table", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def status(self):
        return ExitStatus.BUG

    def __rich__(self):
        renders = [exception.__replace__(**self.options | {"fancy": False}) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title="[ %s — %s ]" % (_program(self.options), self.message), title_align="left")

        return Group(*renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - shell=False raises the fault; shell=True renders it on the stderr console and
      exits with its status (deferred=True renders without exiting).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "ExitStatus",
    "FaultCode",
    "OptionException",
    "TableBugError",
    "MissingValueError",
    "UnexpectedValueError",
    "TypeMismatchError",
    "NegationDisallowedError",
    "ModeConflictError",
    "AmbiguousAbbreviationError",
    "UnknownOptionError",
    "TypoSuggestionError",
    "CallbackFailureError",
    "TableExit",
    "trigger",
)
