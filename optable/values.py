"""
optable value extraction: turn a matched descriptor into a side effect.

Flow
- extract(context, option, negated, short) is called by the matchers once a token
  (or one character of a short cluster) has been attributed to `option`.
- fetch() resolves the raw value: pending inline text first, then the
  descriptor default for a trailing LASTARG_DEFAULT option, then the next whole
  token; anything else is a MissingValueError.
- Conversion and storage depend on the descriptor kind (see extract()).

Every failure is raised as an OptionException subclass naming the option the way
it was spelled ("switch `c'", "option `no-name'", "option `name'"); nothing is
written into the slot when a value is rejected.
"""
import logging
import os.path
import re

from .faults import *
from .options import Kind, OptionFlags
from .utils import quote

logger = logging.getLogger(__name__)

# binary multipliers accepted by magnitude values
UNITS = {"": 1, "k": 1 << 10, "m": 1 << 20, "g": 1 << 30}


def optname(option, /, short=False, negated=False):
    """
    diagnostic spelling of an option as matched.
    """
    if short:
        return "switch %s" % quote(option.short)
    if negated:
        return "option %s" % quote(negate(option.long))
    return "option %s" % quote(option.long)


def negate(long, /):
    """
    the --no- form of a long name; a name that already starts with 'no-' loses it.
    """
    return long[3:] if long.startswith("no-") else "no-" + long


def typed(option, /, short=False, negated=False):
    """
    the option as a user would type it on the command line.
    """
    if short:
        return ("" if option.has(OptionFlags.NODASH) else "-") + option.short
    return "--" + (negate(option.long) if negated else option.long)


def parse_integer(text, /):
    """
    base-10 integer with an optional sign; leading whitespace is tolerated.
    """
    if not re.fullmatch(r"\s*[-+]?[0-9]+", text):
        raise ValueError("invalid integer: %r" % text)
    return int(text)


def parse_magnitude(text, /):
    """
    non-negative base-10 integer with an optional k/m/g suffix (powers of 1024).
    """
    match = re.fullmatch(r"\s*\+?([0-9]+)([kKmMgG]?)", text)
    if not match:
        raise ValueError("invalid magnitude: %r" % text)
    return int(match[1]) * UNITS[match[2].lower()]


def fix_filename(prefix, value, /, option=None):
    """
    rewrite a relative filename against `prefix`.

    left untouched: no prefix, no value, absolute paths, the "-" (stdin/stdout)
    sentinel, and, for KEEPDASHES options, any value starting with a dash.
    """
    if not prefix or not isinstance(value, str) or not value:
        return value
    if os.path.isabs(value) or value == "-":
        return value
    if option is not None and option.has(OptionFlags.KEEPDASHES) and value.startswith("-"):
        return value
    return os.path.join(prefix, value)


def fetch(context, option, /, short=False, negated=False):
    """
    obtain the raw value of `option` from the parse context.
    """
    if context.pending is not None:
        return context.take()
    remaining = len(context.remaining)
    if remaining == 1 and option.has(OptionFlags.LASTARG_DEFAULT):
        return option.default
    if remaining > 1:
        return context.shift()
    raise MissingValueError(
        "%s requires a value" % optname(option, short, negated),
        input=typed(option, short, negated),
        argument=option,
    )


def _called(option, result, name, input, /):
    if not result:
        return
    message = result if isinstance(result, str) else "%s rejected its value" % name
    raise CallbackFailureError(message, input=input, argument=option)


def _mode(context, option, name, input, /):
    """
    store a mode value, or name the other mode already selected in the same group.
    """
    slot = option.value
    if slot.value and slot.value != option.default:
        for that in context.table.modes(context.table.group(option)):
            if that is option or that.default != slot.value:
                continue
            raise ModeConflictError(
                "%s is incompatible with %s" % (name, that.spelling()),
                input=input,
                argument=option,
                conflict=that,
            )
        raise ModeConflictError("%s: incompatible with something else" % name, input=input, argument=option)
    slot.value = option.default


def extract(context, option, /, negated=False, short=False):
    """
    apply `option` to the context: check negation and inline values, then
    convert and store (or call back) according to the descriptor kind.
    """
    name = optname(option, short, negated)
    input = typed(option, short, negated)
    pending = context.pending

    if negated and pending is not None:
        raise UnexpectedValueError("%s takes no value" % name, input=input, argument=option)
    if negated and option.has(OptionFlags.NONEG):
        raise NegationDisallowedError("%s isn't available" % name, input=input, argument=option)
    if not short and pending is not None and option.has(OptionFlags.NOARG):
        raise UnexpectedValueError("%s takes no value" % name, input=input, argument=option)

    logger.debug("extract %s (%s)", input, option.kind.value)
    slot = option.value
    optional = option.has(OptionFlags.OPTARG) and pending is None

    match option.kind:
        case Kind.LOWLEVEL_CALLBACK:
            _called(option, option.callback(context, option, negated), name, input)

        case Kind.BIT:
            if negated:
                slot.value = (slot.value or 0) & ~option.default
            else:
                slot.value = (slot.value or 0) | option.default

        case Kind.NEGBIT:
            if negated:
                slot.value = (slot.value or 0) | option.default
            else:
                slot.value = (slot.value or 0) & ~option.default

        case Kind.COUNTUP:
            current = max(slot.value or 0, 0)
            slot.value = 0 if negated else current + 1

        case Kind.SET_INT:
            slot.value = 0 if negated else option.default

        case Kind.CMDMODE:
            _mode(context, option, name, input)

        case Kind.STRING | Kind.FILENAME:
            if negated:
                value = None
            elif optional:
                value = option.default
            else:
                value = fetch(context, option, short, negated)
            if option.kind is Kind.FILENAME:
                value = fix_filename(context.prefix, value, option)
            slot.value = value

        case Kind.CALLBACK:
            if negated:
                result = option.callback(option, None, True)
            elif option.has(OptionFlags.NOARG) or optional:
                result = option.callback(option, None, False)
            else:
                result = option.callback(option, fetch(context, option, short, negated), False)
            _called(option, result, name, input)

        case Kind.INTEGER:
            if negated:
                slot.value = 0
            elif optional:
                slot.value = option.default
            else:
                text = fetch(context, option, short, negated)
                try:
                    slot.value = parse_integer(text)
                except ValueError:
                    raise TypeMismatchError(
                        "%s expects a numerical value, not %r" % (name, text),
                        input=input,
                        argument=option,
                        token=text,
                    ) from None

        case Kind.MAGNITUDE:
            if negated:
                slot.value = 0
            elif optional:
                slot.value = option.default
            else:
                text = fetch(context, option, short, negated)
                try:
                    slot.value = parse_magnitude(text)
                except ValueError:
                    raise TypeMismatchError(
                        "%s expects a non-negative integer value with an optional k/m/g suffix, not %r" % (name, text),
                        input=input,
                        argument=option,
                        token=text,
                    ) from None

        case Kind.GROUP | Kind.END | Kind.ARGUMENT | Kind.NUMBER:
            raise RuntimeError("descriptor kind %s cannot be extracted" % option.kind.value)


def numeric(option, digits, /):
    """
    hand the digits of a numeric-suffix option ('-32') to its callback.
    """
    _called(option, option.callback(option, digits, False), "number %s" % quote("-" + digits), "-" + digits)


__all__ = (
    "UNITS",
    "optname",
    "negate",
    "typed",
    "parse_integer",
    "parse_magnitude",
    "fix_filename",
    "fetch",
    "extract",
    "numeric",
)
