r"""
optable option descriptors and builders.

Overview
- Kind: closed enumeration of every descriptor kind (one variant per handling rule).
- OptionFlags: independent per-descriptor modifiers (no-argument, optional-argument, ...).
- Slot: a caller-owned mutable cell the engine writes parsed values into.
- Descriptor: one immutable row of an option table.

- Builders
  • group/end/argument: structural rows (help headings, sentinel, pass-through literal).
  • bit/negbit/boolean/countup/set_int/cmdmode: scalar toggles writing into a Slot.
  • string/filename/integer/magnitude: value-taking options writing into a Slot.
  • callback/lowlevel_callback/number: options handing their value to a function;
    usable as decorators.

Metadata (sanitized on construction)
- kind: Kind (required).
- short: None | single character string.
- long: None | non-empty string without leading dashes, '=' or whitespace.
- value: None | Slot (required for every kind that writes into a slot).
- callback: callable (required for callback kinds).
- flags: OptionFlags.
- help: str (heading text for groups).
- argh: None | str (value placeholder shown in usage).

Combination rules (e.g. a toggle that accepts an argument) are not checked here:
they are table bugs, collected all at once by optable.table.Table.

Quick example:
    >>> from optable.options import Slot, countup, string, callback
    >>> verbose, output = Slot(0), Slot()
    >>> table = [
    ...     countup("v", "verbose", verbose, "be more verbose"),
    ...     string("o", "output", output, "file", "write the result to <file>"),
    ... ]
    >>> @callback("C", "color", "when", "colorize the output")
    ... def color(option, value, unset): ...
"""
import functools
import operator
import re
from enum import Enum, IntFlag

from .utils import *


class Kind(Enum):
    GROUP = "group"
    END = "end"
    ARGUMENT = "argument"
    BIT = "bit"
    NEGBIT = "negbit"
    CMDMODE = "cmdmode"
    COUNTUP = "countup"
    SET_INT = "set-int"
    STRING = "string"
    FILENAME = "filename"
    INTEGER = "integer"
    MAGNITUDE = "magnitude"
    CALLBACK = "callback"
    LOWLEVEL_CALLBACK = "lowlevel-callback"
    NUMBER = "number"


class OptionFlags(IntFlag):
    NONE = 0
    NOARG = 1 << 0
    OPTARG = 1 << 1
    LASTARG_DEFAULT = 1 << 2
    NONEG = 1 << 3
    KEEPDASHES = 1 << 4
    HIDDEN = 1 << 5
    NOCOMPLETE = 1 << 6
    NODASH = 1 << 7
    LITERAL_ARGHELP = 1 << 8
    COMP_ARG = 1 << 9


# Kinds that never take an argument and must declare NOARG.
TOGGLES = frozenset({Kind.COUNTUP, Kind.BIT, Kind.NEGBIT, Kind.SET_INT, Kind.NUMBER})

# Kinds whose value comes from the command line (string, file, numbers, callbacks).
VALUED = frozenset({Kind.STRING, Kind.FILENAME, Kind.INTEGER, Kind.MAGNITUDE, Kind.CALLBACK})

# Kinds that have a "no-" form.
NEGATABLE = VALUED | frozenset({Kind.BIT, Kind.NEGBIT, Kind.COUNTUP, Kind.SET_INT})

# Kinds that write into a Slot.
SLOTTED = frozenset({
    Kind.BIT, Kind.NEGBIT, Kind.CMDMODE, Kind.COUNTUP, Kind.SET_INT,
    Kind.STRING, Kind.FILENAME, Kind.INTEGER, Kind.MAGNITUDE,
})

# Kinds that hand their value to a function.
CALLABLE = frozenset({Kind.CALLBACK, Kind.LOWLEVEL_CALLBACK, Kind.NUMBER})


class Slot:
    """
    caller-owned storage for one option's value.

    the engine only ever assigns `slot.value`; it never replaces the slot itself,
    so several descriptors may share one slot (bit masks, mode groups).
    """
    __slots__ = ("value",)

    def __init__(self, value=None):
        self.value = value

    def __repr__(self):
        return "Slot(%r)" % (self.value,)


def _sanitize_names(metadata, /):
    r"""
    Internal: validate the short and long spellings of a descriptor.

    - short: None or exactly one character. Range and uniqueness are table checks.
    - long: None or a non-empty string; leading dashes, '=' and whitespace are
      rejected because the matcher splits on '=' and strips the dashes itself.
    """
    short = coalesce(metadata["short"])
    if short is not None:
        if not isinstance(short, str):
            raise TypeError("descriptor 'short' must be a string")
        if len(short) != 1:
            raise ValueError("descriptor 'short' must be a single character")
    metadata["short"] = short

    long = coalesce(metadata["long"])
    if long is not None:
        if not isinstance(long, str):
            raise TypeError("descriptor 'long' must be a string")
        if not re.fullmatch(r"[^\s=-][^\s=]*", long):
            raise ValueError("descriptor 'long' must not be empty, start with '-', or contain '=' or spaces")
    metadata["long"] = long


def _sanitize_payload(metadata, /):
    """
    Internal: validate the kind-dependent parts (slot, callback, flags, texts).
    """
    kind = metadata["kind"]

    value = coalesce(metadata["value"])
    if kind in SLOTTED and not isinstance(value, Slot):
        raise TypeError("%s descriptor 'value' must be a Slot" % kind.value)
    if value is not None and not isinstance(value, Slot):
        raise TypeError("descriptor 'value' must be a Slot")
    metadata["value"] = value

    callback = coalesce(metadata["callback"])
    if kind in CALLABLE and not callable(callback):
        raise TypeError("%s descriptor 'callback' must be callable" % kind.value)
    metadata["callback"] = callback

    if not isinstance(flags := metadata["flags"], int):
        raise TypeError("descriptor 'flags' must be OptionFlags")
    metadata["flags"] = OptionFlags(flags)

    if not isinstance(metadata["help"], str):
        raise TypeError("descriptor 'help' must be a string")

    argh = coalesce(metadata["argh"])
    if argh is not None and not isinstance(argh, str):
        raise TypeError("descriptor 'argh' must be a string")
    metadata["argh"] = argh

    metadata["default"] = coalesce(metadata["default"])


class Descriptor:
    """
    One row of an option table.

    Descriptors are immutable: every field is mirrored into a private attribute at
    construction time and exposed through a read-only property. Identity matters:
    tables and mode groups refer to descriptors by object identity.

    Properties
    - kind, short, long, value, default, flags, help, argh, callback.
    """

    __introspectable__ = (
        "kind",
        "short",
        "long",
        "value",
        "default",
        "flags",
        "help",
        "argh",
        "callback",
    )

    def __new__(
            cls,
            kind,
            short=Unset,
            long=Unset,
            value=Unset,
            default=Unset,
            *,
            flags=OptionFlags.NONE,
            help="",
            argh=Unset,
            callback=Unset
    ):
        if not isinstance(kind, Kind):
            raise TypeError("descriptor 'kind' must be a Kind")

        metadata = {
            "kind": kind,
            "short": short,
            "long": long,
            "value": value,
            "default": default,
            "flags": flags,
            "help": help,
            "argh": argh,
            "callback": callback,
        }
        _sanitize_names(metadata)
        _sanitize_payload(metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __setattr__(self, name, value, /):
        if not name.startswith("_") or name[1:] not in type(self).__introspectable__:
            raise AttributeError("descriptor fields are read-only")
        if name in self.__dict__:
            raise AttributeError("descriptor fields are read-only")
        object.__setattr__(self, name, value)

    kind = view("kind")
    short = view("short")
    long = view("long")
    value = view("value")
    default = view("default")
    flags = view("flags")
    help = view("help")
    argh = view("argh")
    callback = view("callback")

    def spelling(self):
        """
        the user-facing spelling: '--long' when there is a long name, else '-c'.
        """
        if self.long:
            return "--" + self.long
        if self.short:
            return "-" + self.short
        return ""

    def has(self, flag, /):
        return bool(self.flags & flag)

    def __rich_repr__(self):
        yield "kind", self.kind
        for name in type(self).__introspectable__[1:]:
            value = getattr(self, name)
            if value is None or (name in ("help", "flags") and not value):
                continue
            yield name, value

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__,
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        )


def group(help="", /):
    """
    heading that starts a new section of the usage text; never matched.
    """
    return Descriptor(Kind.GROUP, help=help)


def end():
    """
    table sentinel; optional, Table appends one when missing.
    """
    return Descriptor(Kind.END)


def argument(long, help="", /, *, flags=OptionFlags.NONE):
    """
    literal '--long' passed through to the output untouched (exact match only).
    """
    return Descriptor(Kind.ARGUMENT, Unset, long, flags=OptionFlags.NOARG | flags, help=help)


def bit(short, long, slot, mask, help="", /, *, flags=OptionFlags.NONE):
    return Descriptor(Kind.BIT, short, long, slot, mask, flags=OptionFlags.NOARG | flags, help=help)


def negbit(short, long, slot, mask, help="", /, *, flags=OptionFlags.NONE):
    return Descriptor(Kind.NEGBIT, short, long, slot, mask, flags=OptionFlags.NOARG | flags, help=help)


def set_int(short, long, slot, value, help="", /, *, flags=OptionFlags.NONE):
    return Descriptor(Kind.SET_INT, short, long, slot, value, flags=OptionFlags.NOARG | flags, help=help)


def boolean(short, long, slot, help="", /, *, flags=OptionFlags.NONE):
    """
    on/off switch: stores 1, and 0 for the --no- form.
    """
    return set_int(short, long, slot, 1, help, flags=flags)


def countup(short, long, slot, help="", /, *, flags=OptionFlags.NONE):
    return Descriptor(Kind.COUNTUP, short, long, slot, flags=OptionFlags.NOARG | flags, help=help)


def cmdmode(short, long, slot, mode, help="", /, *, flags=OptionFlags.NONE):
    """
    mutually exclusive mode: every cmdmode sharing `slot` forms one group.
    """
    return Descriptor(
        Kind.CMDMODE, short, long, slot, mode, flags=OptionFlags.NOARG | OptionFlags.NONEG | flags, help=help
    )


def string(short, long, slot, argh, help="", /, *, flags=OptionFlags.NONE, default=Unset):
    return Descriptor(Kind.STRING, short, long, slot, default, flags=flags, help=help, argh=argh)


def filename(short, long, slot, help="", /, *, argh="file", flags=OptionFlags.NONE, default=Unset):
    """
    string value rewritten relative to the parse prefix (unless absolute or '-').
    """
    return Descriptor(Kind.FILENAME, short, long, slot, default, flags=flags, help=help, argh=argh)


def integer(short, long, slot, help="", /, *, argh="n", flags=OptionFlags.NONE, default=Unset):
    return Descriptor(Kind.INTEGER, short, long, slot, default, flags=flags, help=help, argh=argh)


def magnitude(short, long, slot, help="", /, *, argh="n", flags=OptionFlags.NONE, default=Unset):
    """
    non-negative integer with an optional k/m/g (binary) multiplier suffix.
    """
    return Descriptor(Kind.MAGNITUDE, short, long, slot, default, flags=flags, help=help, argh=argh)


def callback(short=Unset, long=Unset, argh=Unset, help="", /, *, value=Unset, flags=OptionFlags.NONE,
             default=Unset, function=Unset):
    """
    Decorator/factory for an option that hands its value to a function.

    Usage
    - As a decorator:
        @callback("C", "color", "when", "colorize the output", flags=OptionFlags.OPTARG)
        def color(option, value, unset): ...
      The decorated name becomes the descriptor.
    - Directly: callback("C", "color", "when", "...", function=on_color)

    Contract
    - function(descriptor, value, unset) -> falsy on success; a truthy return rejects
      the value (a string return is used as the error message).
    """
    @rename("callback")
    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@callback() must be applied to a callable")
        return Descriptor(
            Kind.CALLBACK, short, long, value, default, flags=flags, help=help, argh=argh, callback=function
        )

    return wrapper(function) if function is not Unset else wrapper


def lowlevel_callback(short=Unset, long=Unset, argh=Unset, help="", /, *, value=Unset,
                      flags=OptionFlags.NONE, default=Unset, function=Unset):
    """
    Decorator/factory for an option whose function drives value extraction itself.

    Contract
    - function(context, descriptor, unset) -> falsy on success; the function may
      read context.pending or call optable.values.fetch(context, descriptor) to
      consume its argument.
    """
    @rename("lowlevel_callback")
    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@lowlevel_callback() must be applied to a callable")
        return Descriptor(
            Kind.LOWLEVEL_CALLBACK, short, long, value, default, flags=flags, help=help, argh=argh, callback=function
        )

    return wrapper(function) if function is not Unset else wrapper


def number(help="", /, *, value=Unset, flags=OptionFlags.NONE, function=Unset):
    """
    Decorator/factory for the numeric-suffix option ('-5', '-32').

    function(descriptor, digits, False) receives the digit string.
    """
    @rename("number")
    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@number() must be applied to a callable")
        return Descriptor(Kind.NUMBER, Unset, Unset, value, flags=OptionFlags.NOARG | flags, help=help,
                          callback=function)

    return wrapper(function) if function is not Unset else wrapper


__all__ = (
    "Kind",
    "OptionFlags",
    "Slot",
    "Descriptor",
    "group",
    "end",
    "argument",
    "bit",
    "negbit",
    "set_int",
    "boolean",
    "countup",
    "cmdmode",
    "string",
    "filename",
    "integer",
    "magnitude",
    "callback",
    "lowlevel_callback",
    "number",
)
