"""
optable matchers: attribute a command-line token to a descriptor.

- match_long(context, arg): `arg` is a '--' token without its dashes. Handles the
  '=value' split, pass-through ARGUMENT rows, exact and negated spellings, names
  that already start with 'no-', and unique abbreviations.
- match_short(context): one character of the current short cluster, with the
  numeric-suffix descriptor ('-5') as the fallback.
- match_dashless(context, arg): single-character tokens without a dash.
- check_typos(arg, table): catch '-long' written with a single dash.

Matchers return True once the token (or character) was consumed, False when no
descriptor claims it, and raise an OptionException for a claimed but unusable one.
"""
import logging
import re

from .faults import AmbiguousAbbreviationError, TypoSuggestionError, UnexpectedValueError
from .options import Kind, OptionFlags
from .values import extract, negate, numeric, optname

logger = logging.getLogger(__name__)


def _spelled(option, negated):
    return "--" + (negate(option.long) if negated else option.long)


def match_long(context, arg, /):
    name, separator, value = arg.partition("=")
    inline = None
    abbrev = ambiguous = None
    abbrev_negated = ambiguous_negated = False

    for option in context.table:
        long = option.long
        if not long:
            continue
        # typed: 'no-' written on the command line; named: 'no-' dropped from the long name
        typed = named = False

        while True:
            rest = arg[len(long):] if arg.startswith(long) else None

            if option.kind is Kind.ARGUMENT:
                if rest is None:
                    break
                if rest.startswith("="):
                    raise UnexpectedValueError(
                        "%s takes no value" % optname(option),
                        input="--" + long,
                        argument=option,
                    )
                if rest:
                    break
                logger.debug("pass through --%s", arg)
                context.emit("--" + arg)
                return True

            if rest is None:
                abbreviated = False
                if long.startswith(name):
                    abbreviated = True
                elif option.has(OptionFlags.NONEG):
                    break
                elif "no-".startswith(arg):
                    # '--n', '--no' and '--no-' abbreviate every negatable option
                    typed = True
                    abbreviated = True
                elif not arg.startswith("no-"):
                    if long.startswith("no-"):
                        # '--foo' against 'no-foo': match the positive remainder negated
                        long = long[3:]
                        named = True
                        continue
                    break
                else:
                    typed = True
                    if arg[3:].startswith(long):
                        rest = arg[3 + len(long):]
                    elif long.startswith(arg[3:]):
                        abbreviated = True
                    else:
                        break

                if abbreviated:
                    if not typed and separator:
                        inline = value
                    if abbrev is not None:
                        ambiguous, ambiguous_negated = abbrev, abbrev_negated
                    abbrev, abbrev_negated = option, typed != named
                    break

            if rest:
                if not rest.startswith("="):
                    break
                context.supply(rest[1:])
            extract(context, option, negated=typed != named)
            return True

    if ambiguous is not None:
        raise AmbiguousAbbreviationError(
            "ambiguous option: %s (could be %s or %s)" % (
                arg, _spelled(ambiguous, ambiguous_negated), _spelled(abbrev, abbrev_negated)
            ),
            input="--" + arg,
            candidates=(ambiguous, abbrev),
        )
    if abbrev is not None:
        logger.debug("--%s abbreviates %s", arg, _spelled(abbrev, abbrev_negated))
        if inline is not None:
            context.supply(inline)
        extract(context, abbrev, negated=abbrev_negated)
        return True
    return False


def match_short(context, /):
    cluster = context.cluster
    char = cluster.rest[0]
    suffix = None

    for option in context.table:
        if option.short == char:
            cluster.advance(1)
            extract(context, option, short=True)
            return True
        if option.kind is Kind.NUMBER:
            suffix = option

    if suffix is not None and char in "0123456789":
        digits = re.match(r"[0-9]+", cluster.rest)[0]
        cluster.advance(len(digits))
        numeric(suffix, digits)
        return True
    return False


def match_dashless(context, arg, /):
    for option in context.table:
        if not option.has(OptionFlags.NODASH):
            continue
        if option.short == arg:
            extract(context, option, short=True)
            return True
    return False


def check_typos(arg, table, /):
    """
    raise TypoSuggestionError when a single-dash cluster looks like a long option.
    """
    if len(arg) < 3:
        return
    if arg.startswith("no-"):
        raise TypoSuggestionError("did you mean `--%s' (with two dashes)?" % arg, input="-" + arg)
    for option in table:
        if option.long and option.long.startswith(arg):
            raise TypoSuggestionError(
                "did you mean `--%s' (with two dashes)?" % arg, input="-" + arg, argument=option
            )


__all__ = (
    "match_long",
    "match_short",
    "match_dashless",
    "check_typos",
)
