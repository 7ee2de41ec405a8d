"""
optable renderers: usage text and the shell-completion listing.

Usage layout
- "usage: LINE", further lines up to the first empty one as "   or: LINE", the
  rest indented by four spaces (empty lines kept).
- Options in table order: four spaces, '-c', ', ', '--long', '-NUM' for the
  numeric-suffix option, then the value placeholder. The description starts at
  column 26 (a 24 cell option column plus a 2 cell gap); a wider option column
  pushes it to the next line. Descriptions wrap at the console width with a
  hanging indent.
- Group rows print a blank line and their heading.
- Hidden options are listed only in the full (--help-all) form.

Palette keys
- usage-label, usage-section, group-label, option-name, metavar,
  argument-description, panel-title.
Define a mapping named __styles__ in __main__ to override any palette entry;
styling is suppressed unless colorful=True.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .options import Kind, OptionFlags, NEGATABLE, VALUED
from .table import totable
from .utils import Unset

# option column width and the gap before descriptions
COLUMN = 24
GAP = 2


def placeholder(option, /):
    """
    value placeholder of an option: ' <file>', '[=<when>]', '[<n>]', ...

    placeholders already containing one of ()<>[]| (or LITERAL_ARGHELP) are
    shown as written; a missing placeholder is shown as '...'.
    """
    argh = option.argh or "..."
    literal = (
        option.has(OptionFlags.LITERAL_ARGHELP) or
        not option.argh or
        any(char in option.argh for char in "()<>[]|")
    )
    if option.has(OptionFlags.OPTARG):
        if option.long:
            form = "[=%s]" if literal else "[=<%s>]"
        else:
            form = "[%s]" if literal else "[<%s>]"
    else:
        form = " %s" if literal else " <%s>"
    return form % argh


def render_usage(usage, options, full=False, *, error=False, shell_eval=False, colorful=False, fancy=False,
                 console=Unset):
    """
    Render the usage text of `options` to the console.

    - usage: one line (str) or a sequence of lines; nothing is printed when empty.
    - full: include HIDDEN options.
    - error: render on stderr (diagnostic context); disables the shell_eval wrapper.
    - shell_eval: wrap the text in a `cat <<\\EOF` ... `EOF` here-document.
    - console: rich Console to print on (default: stdout, or stderr when error).
    """
    table = totable(options)
    usage = [usage] if isinstance(usage, str) else list(usage)
    if not usage:
        return

    console = Console(stderr=error) if console is Unset else console
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "usage-section": "bold #36C5F0",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "metavar": "bold #FFD600",  # placeholders
        "argument-description": "#9CA3AF",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__('__main__'), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), style)

    width = console.width - 4 * fancy  # panel gutters
    wrapper = shell_eval and not error

    section = Text()
    if wrapper:
        section.append("cat <<\\EOF\n")

    section.append(text("usage", styler("usage-label"))).append(": ")
    section.append(text(usage.pop(0), styler("usage-section"))).append("\n")
    while usage and usage[0]:
        section.append("   or: ").append(text(usage.pop(0), styler("usage-section"))).append("\n")
    for line in usage:
        if line:
            section.append("    ").append(text(line, styler("usage-section")))
        section.append("\n")

    newline = True
    for option in table:
        if option.kind is Kind.GROUP:
            section.append("\n")
            newline = False
            if option.help:
                section.append(text(option.help, styler("group-label"))).append("\n")
            continue
        if not full and option.has(OptionFlags.HIDDEN):
            continue
        if newline:
            section.append("\n")
            newline = False

        line = Text("    ")
        if option.short:
            spelled = option.short if option.has(OptionFlags.NODASH) else "-" + option.short
            line.append(text(spelled, styler("option-name")))
        if option.long and option.short:
            line.append(", ")
        if option.long:
            line.append(text("--" + option.long, styler("option-name")))
        if option.kind is Kind.NUMBER:
            line.append(text("-NUM", styler("option-name")))
        if option.has(OptionFlags.LITERAL_ARGHELP) or not option.has(OptionFlags.NOARG):
            line.append(text(placeholder(option), styler("metavar")))

        # description column: wrap with a hanging indent, or start below a wide option column
        if line.cell_len <= COLUMN:
            line.append(" " * (COLUMN - line.cell_len + GAP))
        else:
            line.append("\n").append(" " * (COLUMN + GAP))
        section.append(line)

        if descr := text(option.help, styler("argument-description")):
            wrapped = descr.wrap(console, max(width - COLUMN - GAP, 8))
            for index, segment in enumerate(wrapped):
                if index:
                    section.append("\n").append(" " * (COLUMN + GAP))
                section.append(segment)
        section.append("\n")

    section.append("\n")
    if wrapper:
        section.append("EOF\n")

    if fancy:
        section.rstrip()
        console.print(Panel(section, title=Text("[ USAGE ]", style=styler("panel-title")), title_align="left"))
        return
    console.print(section, end="", soft_wrap=True)


def _negated(table, count, /):
    """
    the '--no-' half of the completion listing.

    count < 0: positive forms of the options whose long name starts with 'no-'.
    count >= 0: '--no-NAME' forms, after a '--' separator when `count` names
    beginning with 'no-' were already listed.
    """
    separated = False
    for option in table:
        if not option.long:
            continue
        if option.flags & (OptionFlags.HIDDEN | OptionFlags.NOCOMPLETE | OptionFlags.NONEG):
            continue
        if option.kind not in NEGATABLE:
            continue
        if option.long.startswith("no-"):
            if count < 0:
                yield "--" + option.long[3:]
        elif count >= 0:
            if count and not separated:
                yield "--"
                separated = True
            yield "--no-" + option.long
            count += 1


def completion(options, /):
    """
    the completion listing: ' --name[=]' for every visible long option, then the
    negated forms.
    """
    table = totable(options)
    words = []
    count = 0
    for option in table:
        if not option.long:
            continue
        if option.flags & (OptionFlags.HIDDEN | OptionFlags.NOCOMPLETE):
            continue
        if option.kind is Kind.GROUP:
            continue
        suffix = ""
        if option.kind in VALUED and not option.flags & (
                OptionFlags.NOARG | OptionFlags.OPTARG | OptionFlags.LASTARG_DEFAULT
        ):
            suffix = "="
        if option.has(OptionFlags.COMP_ARG):
            suffix = "="
        if option.long.startswith("no-"):
            count += 1
        words.append("--%s%s" % (option.long, suffix))
    words.extend(_negated(table, -1))
    words.extend(_negated(table, count))
    return "".join(" " + word for word in words)


def render_completion(options, /, console=Unset):
    """
    print the completion listing on stdout (or on `console`).
    """
    console = Console() if console is Unset else console
    console.out(completion(options), highlight=False)


__all__ = (
    "COLUMN",
    "GAP",
    "placeholder",
    "render_usage",
    "completion",
    "render_completion",
)
