"""
optable option table: an ordered, validated, read-only sequence of descriptors.

Construction
- Table(descriptors) keeps every descriptor up to the first END sentinel and
  appends one when the caller left it out. Rows after an END are ignored.
- The whole table is validated once; every problem becomes a TableBugError and
  all of them are raised together in a TableExit group, so a broken table shows
  all of its bugs in one run.
- CMDMODE descriptors writing the same Slot are given a shared mode-group id,
  used to name the conflicting option without comparing slots by identity at
  parse time.

Iteration yields the real rows (END excluded); `sentinel` is the END row.
"""
import logging

from .faults import TableBugError, TableExit
from .options import Descriptor, Kind, OptionFlags, TOGGLES, end

logger = logging.getLogger(__name__)

# A space inside an argument placeholder is only allowed right next to one of these.
SEPARATORS = "|,"


def optbug(option, reason, /):
    """
    build the table-bug fault for `option`, spelled the way the usage shows it.
    """
    if option.long:
        if option.short:
            message = "BUG: switch '%s' (--%s) %s" % (option.short, option.long, reason)
        else:
            message = "BUG: option '%s' %s" % (option.long, reason)
    else:
        message = "BUG: switch '%s' %s" % (option.short, reason)
    return TableBugError(message, option=option, reason=reason)


def _placeholder_bug(argh):
    if "_" in argh:
        return True
    for index, char in enumerate(argh):
        if char != " ":
            continue
        before = argh[index - 1:index]
        after = argh[index + 1:index + 2]
        if before and before in SEPARATORS or after and after in SEPARATORS:
            continue
        return True
    return False


def check(options, /):
    """
    validate every descriptor and return the list of table bugs found.
    """
    bugs = []
    shorts = set()

    for option in options:
        flags = option.flags

        if flags & OptionFlags.LASTARG_DEFAULT and flags & OptionFlags.OPTARG:
            bugs.append(optbug(option, "uses incompatible flags LASTARG_DEFAULT and OPTARG"))

        if option.short:
            if not " " < option.short < "\x7f":
                bugs.append(optbug(option, "invalid short name"))
            elif option.short in shorts:
                bugs.append(optbug(option, "short name already used"))
            else:
                shorts.add(option.short)

        if flags & OptionFlags.NODASH and (
            flags & OptionFlags.OPTARG or
            not flags & OptionFlags.NOARG or
            not flags & OptionFlags.NONEG or
            option.long
        ):
            bugs.append(optbug(option, "uses feature not supported for dashless options"))

        if option.kind in TOGGLES and (flags & OptionFlags.OPTARG or not flags & OptionFlags.NOARG):
            bugs.append(optbug(option, "should not accept an argument"))

        if option.argh and _placeholder_bug(option.argh):
            bugs.append(optbug(option, "multi-word argh should use dash to separate words"))

    return bugs


class Table:
    """
    Read-only option table.

    Properties
    - options: tuple of real rows (END excluded).
    - sentinel: the terminating END descriptor.
    """

    def __init__(self, descriptors, /):
        options = []
        sentinel = None
        for descriptor in descriptors:
            if not isinstance(descriptor, Descriptor):
                raise TypeError("option table rows must be descriptors")
            if descriptor.kind is Kind.END:
                sentinel = descriptor
                break
            options.append(descriptor)

        self._options = tuple(options)
        self._sentinel = sentinel or end()

        if bugs := check(self._options):
            for bug in bugs:
                logger.debug("table bug: %s", bug.message)
            raise TableExit(bugs)

        # mode groups: the id of a group is the position of its first member
        self._groups = {}
        self._members = {}
        slots = {}
        for index, option in enumerate(self._options):
            if option.kind is not Kind.CMDMODE:
                continue
            group = slots.setdefault(id(option.value), index)
            self._groups[option] = group
            self._members.setdefault(group, []).append(option)

    @property
    def options(self):
        return self._options

    @property
    def sentinel(self):
        return self._sentinel

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __getitem__(self, index):
        return self._options[index]

    def group(self, option, /):
        """
        mode-group id of a CMDMODE descriptor (KeyError for anything else).
        """
        return self._groups[option]

    def modes(self, group, /):
        """
        CMDMODE descriptors belonging to mode-group `group`, in table order.
        """
        return tuple(self._members.get(group, ()))

    def __repr__(self):
        return "Table(%r)" % (self._options,)


def totable(options, /):
    """
    accept a Table or any iterable of descriptors.
    """
    return options if isinstance(options, Table) else Table(options)


__all__ = (
    "Table",
    "check",
    "optbug",
    "totable",
)
