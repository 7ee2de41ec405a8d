"""
optable parse context: the resumable scanning state machine.

Lifecycle
- start(options, argv, prefix, flags) validates the table and returns a Context
  positioned on the first argument (argv[0] is the program name).
- Context.step() scans until something needs the caller: it returns the State it
  stopped in. HELP and COMPLETE advance past their token; ERROR, UNKNOWN and
  NON_OPTION stay on the offending token (Context.token) so the caller may
  inspect it, forward() it and call step() again. DONE reached on '--' is final:
  later calls return DONE without scanning the tokens after it.
- Context.end() returns the Partition of forwarded tokens followed by every
  token not consumed.

parse_options() wraps the three calls for commands that just want their
operands: help, completion and errors are rendered and terminate the process in
shell mode (see optable.rendering and optable.faults).
"""
import logging
import shlex
import sys
from enum import Enum, IntFlag
from typing import NamedTuple

from .faults import *
from .matching import check_typos, match_dashless, match_long, match_short
from .table import totable
from .utils import Unset, quote

logger = logging.getLogger(__name__)

# lone argument asking for the completion listing
COMPLETION_HELPER = "--completion-helper"


class ParseFlags(IntFlag):
    NONE = 0
    KEEP_DASHDASH = 1 << 0
    STOP_AT_NON_OPTION = 1 << 1
    KEEP_ARGV0 = 1 << 2
    KEEP_UNKNOWN = 1 << 3
    NO_INTERNAL_HELP = 1 << 4
    SHELL_EVAL = 1 << 5


class State(Enum):
    SCANNING = "scanning"
    DONE = "done"
    ERROR = "error"
    NON_OPTION = "non-option"
    HELP = "help"
    COMPLETE = "complete"
    UNKNOWN = "unknown"


class Cluster:
    """
    a short-option cluster ('-abc') and how much of it has been consumed.

    offset starts at 1 (after the dash); `rest` is what is left to match.
    """
    __slots__ = ("token", "offset")

    def __init__(self, token, offset=1):
        self.token = token
        self.offset = offset

    @property
    def rest(self):
        return self.token[self.offset:]

    def advance(self, count=1, /):
        self.offset += count

    def exhaust(self):
        self.offset = len(self.token)

    def remainder(self):
        """
        the unconsumed characters as a token of their own ('-' + rest).
        """
        return "-" + self.rest

    def __repr__(self):
        return "Cluster(%r, %d)" % (self.token, self.offset)


class Partition(NamedTuple):
    """
    final token arrangement: `tokens[:boundary]` were forwarded, the rest was
    never consumed.
    """
    tokens: tuple
    boundary: int

    @property
    def forwarded(self):
        return self.tokens[:self.boundary]

    @property
    def unconsumed(self):
        return self.tokens[self.boundary:]


def _tokens(argv):
    if argv is Unset:
        return list(sys.argv)
    if isinstance(argv, str):
        return shlex.split(argv)
    tokens = list(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("argv must be a string or an iterable of strings")
    return tokens


class Context:
    """
    Parse context over one argument vector.

    Properties
    - table: the validated Table.
    - program: argv[0].
    - prefix, flags: per-parse configuration.
    - total: number of arguments (argv[0] excluded), fixed at start.
    - remaining: tuple of tokens from the cursor on.
    - output: tuple of tokens forwarded so far.
    - cluster: the short cluster being matched, or None.
    - pending: inline value waiting to be consumed, or None.
    - token: the token the last step() stopped on.
    - state, fault, show_hidden: outcome of the last step().
    """

    def __init__(self, options, argv, /, prefix=None, flags=ParseFlags.NONE):
        flags = ParseFlags(flags)
        if flags & ParseFlags.KEEP_UNKNOWN and flags & ParseFlags.STOP_AT_NON_OPTION:
            raise TableExit([TableBugError(
                "BUG: STOP_AT_NON_OPTION and KEEP_UNKNOWN don't go together",
                code=FaultCode.CONFLICTING_PARSE_FLAGS,
            )])

        self._table = totable(options)
        argv = list(argv)
        self._program = argv[0] if argv else ""
        self._argv = argv[1:]
        self._index = 0
        self._total = len(self._argv)
        self._output = [self._program] if flags & ParseFlags.KEEP_ARGV0 and argv else []
        self._prefix = prefix
        self._flags = flags
        self._cluster = None
        self._inline = None
        self._token = None
        self._state = State.SCANNING
        self._fault = None
        self._hidden = False
        self._finished = False

    @property
    def table(self):
        return self._table

    @property
    def program(self):
        return self._program

    @property
    def prefix(self):
        return self._prefix

    @property
    def flags(self):
        return self._flags

    @property
    def total(self):
        return self._total

    @property
    def remaining(self):
        return tuple(self._argv[self._index:])

    @property
    def output(self):
        return tuple(self._output)

    @property
    def cluster(self):
        return self._cluster

    @property
    def pending(self):
        if self._inline is not None:
            return self._inline
        if self._cluster is not None and self._cluster.rest:
            return self._cluster.rest
        return None

    @property
    def token(self):
        if self._token is not None:
            return self._token
        if self._index < len(self._argv):
            return self._argv[self._index]
        return None

    @property
    def state(self):
        return self._state

    @property
    def fault(self):
        return self._fault

    @property
    def show_hidden(self):
        return self._hidden

    def take(self):
        """
        consume and return the pending inline value.
        """
        value = self.pending
        if value is None:
            raise LookupError("no pending value")
        self._inline = None
        if self._cluster is not None:
            self._cluster.exhaust()
        return value

    def shift(self):
        """
        consume and return the token after the current one.
        """
        if self._index + 1 >= len(self._argv):
            raise LookupError("no token left")
        self._index += 1
        return self._argv[self._index]

    def supply(self, value, /):
        """
        set the inline value ('--name=value') for the option being extracted.
        """
        self._inline = value

    def emit(self, token, /):
        """
        append a token to the forwarded region.
        """
        self._output.append(token)

    def forward(self):
        """
        forward the token the last step() stopped on and move past it.
        """
        if self._index >= len(self._argv):
            raise LookupError("no token to forward")
        self._output.append(self.token)
        self._index += 1
        self._token = None
        self._fault = None
        self._state = State.SCANNING

    def _halt(self, state, fault=None, /):
        self._state = state
        self._fault = fault
        logger.debug("%s at %r", state.value, self.token)
        return state

    def _help(self, hidden=False, fault=None, /):
        self._hidden = hidden
        self._index += 1
        return self._halt(State.HELP, fault)

    def _unknown(self, token, /):
        if self._flags & ParseFlags.KEEP_UNKNOWN:
            logger.debug("keep unknown %r", token)
            self._output.append(token)
            return None
        self._token = token
        if token.startswith("--"):
            message = "unknown option %s" % quote(token[2:])
        elif self._cluster is not None and self._cluster.rest[:1].isascii():
            message = "unknown switch %s" % quote(self._cluster.rest[:1])
        else:
            message = "unknown non-ascii option in string: %s" % quote(self._argv[self._index])
        return self._halt(State.UNKNOWN, UnknownOptionError(message, input=token))

    def _short(self, arg, internal_help, /):
        self._cluster = Cluster(arg)
        if not match_short(self):
            check_typos(arg[1:], self._table)
            if internal_help and self._cluster.rest.startswith("h"):
                return self._help()
            return self._unknown(arg)
        if self._cluster.rest:
            check_typos(arg[1:], self._table)
        while self._cluster.rest:
            if not match_short(self):
                if internal_help and self._cluster.rest.startswith("h"):
                    return self._help()
                return self._unknown(self._cluster.remainder())
        return None

    def _dispatch(self, arg, /):
        internal_help = not self._flags & ParseFlags.NO_INTERNAL_HELP

        if not arg.startswith("-") or arg == "-":
            if match_dashless(self, arg):
                return None
            if self._flags & ParseFlags.STOP_AT_NON_OPTION:
                return self._halt(State.NON_OPTION)
            self._output.append(arg)
            return None

        if internal_help and self._total == 1 and arg == "-h":
            return self._help()
        if self._total == 1 and arg == COMPLETION_HELPER:
            self._index += 1
            return self._halt(State.COMPLETE)

        if arg[1] != "-":
            return self._short(arg, internal_help)

        if arg == "--":
            if not self._flags & ParseFlags.KEEP_DASHDASH:
                self._index += 1
            self._finished = True
            return self._halt(State.DONE)

        if internal_help and arg == "--help-all":
            return self._help(True)
        if internal_help and arg == "--help":
            return self._help()
        try:
            if match_long(self, arg[2:]):
                return None
        except AmbiguousAbbreviationError as fault:
            return self._help(False, fault)
        return self._unknown(arg)

    def step(self):
        """
        scan until the next stop and return the State reached.
        """
        self._state = State.SCANNING
        self._fault = None
        self._token = None
        if self._finished:
            return self._halt(State.DONE)

        while self._index < len(self._argv):
            arg = self._argv[self._index]
            index = self._index
            self._cluster = None
            self._inline = None
            try:
                state = self._dispatch(arg)
            except OptionException as fault:
                # a value may have been shifted before it was rejected
                self._index = index
                return self._halt(State.ERROR, fault)
            finally:
                self._inline = None
            if state is not None:
                return state
            self._index += 1

        return self._halt(State.DONE)

    def end(self):
        """
        forwarded tokens followed by every unconsumed token.
        """
        return Partition(tuple(self._output) + tuple(self._argv[self._index:]), len(self._output))

    def __repr__(self):
        return "Context(state=%s, index=%d, total=%d)" % (self._state.value, self._index, self._total)


def start(options, argv=Unset, /, prefix=None, flags=ParseFlags.NONE):
    """
    validate `options` and position a new Context on argv[1].

    argv: Unset → sys.argv; str → shlex.split; otherwise an iterable of strings.
    raises TableExit when the table (or the flag combination) is a programmer error.
    """
    return Context(options, _tokens(argv), prefix=prefix, flags=flags)


def parse_options(options, argv=Unset, usage=(), prefix=None, flags=ParseFlags.NONE, *,
                  shell=False, colorful=False, fancy=False):
    """
    Parse `argv` against `options` and return the tokens left for the command.

    Parameters
    - options: Table or iterable of descriptors.
    - argv: see start(); argv[0] is the program name.
    - usage: usage line(s) rendered on help and on errors.
    - prefix: directory that relative filename values are joined to.
    - flags: ParseFlags.
    - shell: render faults and exit instead of raising.
    - colorful, fancy: rendering switches (colors, panels).

    Behavior
    - HELP exits with status 0 after rendering the usage on stdout; a help caused
      by an ambiguous abbreviation renders the diagnostic and the usage on stderr
      and exits 129 in shell mode (raises otherwise).
    - COMPLETE prints the completion listing and exits 0.
    - ERROR/UNKNOWN raise the fault, or in shell mode print it with the usage and
      exit 129.
    """
    from .rendering import render_completion, render_usage

    runtime = {"shell": shell, "colorful": colorful, "fancy": fancy}
    try:
        context = start(options, argv, prefix=prefix, flags=flags)
    except TableExit as exit:
        trigger(exit, **runtime)
        raise

    runtime["prog"] = context.program
    shell_eval = bool(context.flags & ParseFlags.SHELL_EVAL)
    state = context.step()

    match state:
        case State.HELP if context.fault is not None:
            trigger(context.fault, deferred=True, **runtime)
            render_usage(usage, context.table, error=True, colorful=colorful, fancy=fancy)
            sys.exit(ExitStatus.USAGE)
        case State.HELP:
            render_usage(
                usage, context.table, context.show_hidden, shell_eval=shell_eval, colorful=colorful, fancy=fancy
            )
            sys.exit(ExitStatus.SUCCESS)
        case State.COMPLETE:
            render_completion(context.table)
            sys.exit(ExitStatus.SUCCESS)
        case State.ERROR | State.UNKNOWN:
            trigger(context.fault, deferred=True, **runtime)
            if not isinstance(context.fault, TypoSuggestionError):
                render_usage(usage, context.table, error=True, colorful=colorful, fancy=fancy)
            sys.exit(ExitStatus.USAGE)

    return list(context.end().tokens)


__all__ = (
    "COMPLETION_HELPER",
    "ParseFlags",
    "State",
    "Cluster",
    "Partition",
    "Context",
    "start",
    "parse_options",
)
