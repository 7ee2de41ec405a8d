from rich.pretty import pprint

from optable import *

verbose = Slot(0)
output = Slot()
mode = Slot()
depth = Slot()


@callback("C", "color", "when", "colorize the output", flags=OptionFlags.OPTARG)
def color(option, value, unset):
    if value not in (None, "always", "never", "auto"):
        return "unknown color mode: %s" % value
    return 0


options = [
    countup("v", "verbose", verbose, "be more verbose"),
    filename("o", "output", output, "write the result to <file>"),
    color,
    group("Modes"),
    cmdmode("a", "add", mode, "add", "add entries"),
    cmdmode("r", "remove", mode, "remove", "remove entries"),
    group("Limits"),
    integer(None, "depth", depth, "descend at most <n> levels"),
]

usage = [
    "main.py [<options>] [--] <path>...",
    "main.py --remove <path>...",
]


if __name__ == '__main__':
    paths = parse_options(options, usage=usage, shell=True, colorful=True)
    pprint({"verbose": verbose.value, "output": output.value, "mode": mode.value, "depth": depth.value,
            "paths": paths})
