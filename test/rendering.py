"""
Renderer tests.

Scope
- Usage layout: usage lines, option column, group headings, hidden options,
  placeholders, wrapping, the shell-eval wrapper.
- Completion listing order and the '--' separator.

Console output is captured through a rich Console writing into a StringIO with
colors disabled; trailing spaces are ignored.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from optable.options import *
from optable.rendering import *


def row(left, help=""):
    if len(left) <= COLUMN:
        return (left.ljust(COLUMN + GAP) + help).rstrip()
    return left + "\n" + (" " * (COLUMN + GAP) + help).rstrip()


class Fixture(TestCase):

    def setUp(self):
        self.file = io.StringIO()
        self.console = Console(file=self.file, width=100, color_system=None, force_terminal=False)
        self.table = [
            countup("v", "verbose", Slot(0), "be more verbose"),
            string("o", "output", Slot(), "file", "write to <file>"),
            group("Advanced"),
            callback(None, "color", "when", "colorize", flags=OptionFlags.OPTARG, function=lambda *args: 0),
            integer(None, "depth", Slot(), "limit depth"),
            boolean(None, "secret", Slot(), "not shown", flags=OptionFlags.HIDDEN),
            number("show NUM entries", function=lambda *args: 0),
        ]

    def lines(self):
        return [line.rstrip() for line in self.file.getvalue().split("\n")]


class TestUsage(Fixture):

    def testLayout(self):
        render_usage(["prog [options]", "prog --other", "", "extra text"], self.table, console=self.console)
        expected = "\n".join([
            "usage: prog [options]",
            "   or: prog --other",
            "",
            "    extra text",
            "",
            row("    -v, --verbose", "be more verbose"),
            row("    -o, --output <file>", "write to <file>"),
            "",
            "Advanced",
            row("    --color[=<when>]", "colorize"),
            row("    --depth <n>", "limit depth"),
            row("    -NUM", "show NUM entries"),
            "",
            "",
        ])
        self.assertEqual("\n".join(self.lines()), expected)

    def testFullShowsHidden(self):
        render_usage("prog", self.table, True, console=self.console)
        self.assertIn(row("    --secret", "not shown"), self.lines())

    def testHiddenOmitted(self):
        render_usage("prog", self.table, console=self.console)
        self.assertNotIn("--secret", self.file.getvalue())

    def testWideOptionColumn(self):
        table = [string(None, "a-very-long-option-name", Slot(), "value", "the help")]
        render_usage("prog", table, console=self.console)
        self.assertIn("    --a-very-long-option-name <value>\n" + " " * 26 + "the help", self.file.getvalue())

    def testDescriptionWraps(self):
        console = Console(file=self.file, width=60, color_system=None, force_terminal=False)
        table = [countup("v", "verbose", Slot(0), " ".join(["word"] * 20))]
        render_usage("prog", table, console=console)
        lines = [line for line in self.lines() if "word" in line]
        self.assertGreater(len(lines), 1)
        for line in lines[1:]:
            self.assertTrue(line.startswith(" " * 26 + "word"))
        for line in lines:
            self.assertLessEqual(len(line), 60)
        self.assertEqual(sum(line.count("word") for line in lines), 20)

    def testShellEvalWrapper(self):
        render_usage("prog", self.table, shell_eval=True, console=self.console)
        lines = self.lines()
        self.assertEqual(lines[0], "cat <<\\EOF")
        self.assertEqual(lines[-2:], ["EOF", ""])

    def testShellEvalNotOnErrors(self):
        render_usage("prog", self.table, shell_eval=True, error=True, console=self.console)
        self.assertNotIn("EOF", self.file.getvalue())

    def testEmptyUsagePrintsNothing(self):
        render_usage((), self.table, console=self.console)
        self.assertEqual(self.file.getvalue(), "")

    def testDashless(self):
        table = [Descriptor(Kind.SET_INT, "x", value=Slot(), default=1, help="expand",
                            flags=OptionFlags.NOARG | OptionFlags.NONEG | OptionFlags.NODASH)]
        render_usage("prog", table, console=self.console)
        self.assertIn(row("    x", "expand"), self.lines())

    def testFancyPanel(self):
        render_usage("prog", self.table, fancy=True, console=self.console)
        output = self.file.getvalue()
        self.assertIn("USAGE", output)
        self.assertIn("usage: prog", output)


class TestPlaceholder(TestCase):

    def testRequired(self):
        self.assertEqual(placeholder(string(None, "output", Slot(), "file")), " <file>")

    def testOptionalLong(self):
        self.assertEqual(placeholder(string(None, "color", Slot(), "when", flags=OptionFlags.OPTARG)), "[=<when>]")

    def testOptionalShort(self):
        self.assertEqual(placeholder(string("n", None, Slot(), "n", flags=OptionFlags.OPTARG)), "[<n>]")

    def testLiteral(self):
        self.assertEqual(placeholder(string(None, "mode", Slot(), "a|b")), " a|b")
        self.assertEqual(
            placeholder(string(None, "pair", Slot(), "a b", flags=OptionFlags.LITERAL_ARGHELP)), " a b"
        )
        self.assertEqual(
            placeholder(string(None, "color", Slot(), "(when)", flags=OptionFlags.OPTARG)), "[=(when)]"
        )

    def testMissing(self):
        self.assertEqual(placeholder(string(None, "output", Slot(), None)), " ...")


class TestCompletion(Fixture):

    def setUp(self):
        super().setUp()
        self.table = [
            group("Basic"),
            boolean("v", "verbose", Slot()),
            string("o", "output", Slot(), "file"),
            callback(None, "color", "when", flags=OptionFlags.OPTARG, function=lambda *args: 0),
            boolean(None, "no-verify", Slot()),
            boolean(None, "secret", Slot(), flags=OptionFlags.HIDDEN),
            cmdmode(None, "add", Slot(), 1),
            integer(None, "depth", Slot(), flags=OptionFlags.NOCOMPLETE),
            string(None, "message", Slot(), "text", flags=OptionFlags.OPTARG | OptionFlags.COMP_ARG),
            countup("q", None, Slot(0)),
        ]

    def testListing(self):
        self.assertEqual(
            completion(self.table),
            " --verbose --output= --color --no-verify --add --message="
            " --verify -- --no-verbose --no-output --no-color --no-message",
        )

    def testSeparatorAfterFirstNegation(self):
        table = [boolean(None, "force", Slot()), boolean(None, "quiet", Slot())]
        self.assertEqual(completion(table), " --force --quiet --no-force -- --no-quiet")

    def testRenderCompletion(self):
        render_completion([boolean(None, "force", Slot())], console=self.console)
        self.assertEqual(self.file.getvalue(), " --force --no-force\n")


if __name__ == "__main__":
    unittest.main()
