"""
Matcher tests.

Scope
- Long options: exact, negated, abbreviated, ambiguous, 'no-' names,
  pass-through arguments.
- Short clusters and the numeric-suffix option.
- Dashless options.
- Single-dash typo detection.
"""
import unittest
from unittest import TestCase

from optable.context import State, parse_options, start
from optable.faults import *
from optable.matching import *
from optable.options import *
from optable.table import Table


def parse(options, *args, **kwargs):
    return parse_options(options, ["prog", *args], **kwargs)


class TestLongMatching(TestCase):

    def setUp(self):
        self.color = Slot(1)
        self.verbose = Slot(0)
        self.output = Slot()
        self.table = [
            boolean(None, "color", self.color),
            countup("v", "verbose", self.verbose),
            string("o", "output", self.output, "file", flags=OptionFlags.NONEG),
        ]

    def testExactBeatsAbbreviation(self):
        first, second = Slot(0), Slot(0)
        table = [boolean(None, "foo-bar", first), boolean(None, "foo", second)]
        parse(table, "--foo")
        self.assertEqual((first.value, second.value), (0, 1))

    def testUniqueAbbreviation(self):
        parse(self.table, "--verb", "--out=x")
        self.assertEqual(self.verbose.value, 1)
        self.assertEqual(self.output.value, "x")

    def testAbbreviationTakesNextToken(self):
        self.assertEqual(parse(self.table, "--out", "x", "y"), ["y"])
        self.assertEqual(self.output.value, "x")

    def testNegatedExactAndAbbreviated(self):
        parse(self.table, "--no-color")
        self.assertEqual(self.color.value, 0)
        self.color.value = 1
        parse(self.table, "--no-col")
        self.assertEqual(self.color.value, 0)

    def testBareNoAbbreviatesNegatable(self):
        table = [boolean(None, "color", self.color), string("o", "output", self.output, "file",
                                                           flags=OptionFlags.NONEG)]
        parse(table, "--no")
        self.assertEqual(self.color.value, 0)

    def testBareNoIsAmbiguous(self):
        with self.assertRaises(AmbiguousAbbreviationError) as raised:
            parse(self.table, "--n")
        self.assertEqual(raised.exception.message, "ambiguous option: n (could be --no-color or --no-verbose)")

    def testAmbiguity(self):
        table = [boolean(None, "foo-one", Slot()), boolean(None, "foo-two", Slot())]
        context = start(table, ["prog", "--foo-"])
        self.assertIs(context.step(), State.HELP)
        self.assertIsInstance(context.fault, AmbiguousAbbreviationError)
        self.assertEqual(context.fault.message, "ambiguous option: foo- (could be --foo-one or --foo-two)")

    def testNoPrefixedLongName(self):
        verify = Slot(1)
        table = [boolean(None, "no-verify", verify)]
        parse(table, "--verify")
        self.assertEqual(verify.value, 0)
        parse(table, "--no-verify")
        self.assertEqual(verify.value, 1)
        parse(table, "--ver")
        self.assertEqual(verify.value, 0)
        parse(table, "--no-v")
        self.assertEqual(verify.value, 1)

    def testNoPrefixedAmbiguityIsSpelledAsMatched(self):
        table = [boolean(None, "no-foo", Slot()), boolean(None, "fool", Slot())]
        with self.assertRaises(AmbiguousAbbreviationError) as raised:
            parse(table, "--fo")
        self.assertEqual(raised.exception.message, "ambiguous option: fo (could be --foo or --fool)")

    def testNegatedExactRejectsValue(self):
        with self.assertRaises(UnexpectedValueError) as raised:
            parse(self.table, "--no-color=red")
        self.assertEqual(raised.exception.message, "option `no-color' takes no value")
        self.assertEqual(self.color.value, 1)

    def testNegatedAbbreviationWithValueIsUnknown(self):
        when = Slot("auto")
        table = [string(None, "color", when, "when")]
        context = start(table, ["prog", "--no-col=red"])
        self.assertIs(context.step(), State.UNKNOWN)
        self.assertEqual(context.fault.message, "unknown option `no-col=red'")
        self.assertEqual(when.value, "auto")

    def testNoPrefixedAbbreviationRejectsValue(self):
        verify = Slot(1)
        context = start([boolean(None, "no-verify", verify)], ["prog", "--ver=bar"])
        self.assertIs(context.step(), State.ERROR)
        self.assertIsInstance(context.fault, UnexpectedValueError)
        self.assertEqual(context.fault.message, "option `verify' takes no value")
        self.assertEqual(verify.value, 1)

    def testUnknownLong(self):
        with self.assertRaises(UnknownOptionError) as raised:
            parse(self.table, "--colour")
        self.assertEqual(raised.exception.message, "unknown option `colour'")


class TestArguments(TestCase):

    def setUp(self):
        self.table = [argument("stdin", "read from stdin"), boolean("f", "force", Slot(0))]

    def testForwarded(self):
        self.assertEqual(parse(self.table, "a", "--stdin", "-f", "b"), ["a", "--stdin", "b"])

    def testValueRejected(self):
        with self.assertRaises(UnexpectedValueError) as raised:
            parse(self.table, "--stdin=x")
        self.assertEqual(raised.exception.message, "option `stdin' takes no value")

    def testNeverAbbreviated(self):
        with self.assertRaises(UnknownOptionError):
            parse(self.table, "--std")


class TestShortMatching(TestCase):

    def setUp(self):
        self.all = Slot(0)
        self.brief = Slot(0)
        self.config = Slot()
        self.digits = []
        self.table = [
            boolean("a", "all", self.all),
            boolean("b", "brief", self.brief),
            string("c", "config", self.config, "file"),
            number("show NUM entries", function=lambda option, digits, unset: self.digits.append(digits)),
        ]

    def testClusterWithSeparateValue(self):
        self.assertEqual(parse(self.table, "-abc", "VALUE"), [])
        self.assertEqual((self.all.value, self.brief.value, self.config.value), (1, 1, "VALUE"))

    def testClusterWithInlineValue(self):
        parse(self.table, "-abcVALUE")
        self.assertEqual((self.all.value, self.brief.value, self.config.value), (1, 1, "VALUE"))

    def testNumber(self):
        parse(self.table, "-3")
        self.assertEqual(self.digits, ["3"])

    def testNumberThenSwitch(self):
        parse(self.table, "-32a")
        self.assertEqual(self.digits, ["32"])
        self.assertEqual(self.all.value, 1)

    def testExactShortBeatsNumber(self):
        three = Slot(0)
        parse([*self.table, boolean("3", None, three)], "-3")
        self.assertEqual(three.value, 1)
        self.assertEqual(self.digits, [])

    def testUnknownSwitch(self):
        with self.assertRaises(UnknownOptionError) as raised:
            parse(self.table, "-az")
        self.assertEqual(raised.exception.message, "unknown switch `z'")
        self.assertEqual(self.all.value, 1)


class TestDashless(TestCase):

    def setUp(self):
        self.slot = Slot(0)
        self.table = [
            Descriptor(Kind.SET_INT, "x", value=self.slot, default=1,
                       flags=OptionFlags.NOARG | OptionFlags.NONEG | OptionFlags.NODASH),
        ]

    def testMatched(self):
        self.assertEqual(parse(self.table, "a", "x", "xy"), ["a", "xy"])
        self.assertEqual(self.slot.value, 1)

    def testMatchDashless(self):
        context = start(self.table, ["prog", "x"])
        self.assertTrue(match_dashless(context, "x"))
        self.assertFalse(match_dashless(context, "y"))


class TestTypos(TestCase):

    def setUp(self):
        self.table = Table([countup("v", "verbose", Slot(0)), boolean(None, "force", Slot(0))])

    def testLongWithOneDash(self):
        with self.assertRaises(TypoSuggestionError) as raised:
            check_typos("verbose", self.table)
        self.assertEqual(raised.exception.message, "did you mean `--verbose' (with two dashes)?")

    def testNoPrefix(self):
        with self.assertRaises(TypoSuggestionError):
            check_typos("no-anything", self.table)

    def testShortClustersPass(self):
        self.assertIsNone(check_typos("vv", self.table))
        self.assertIsNone(check_typos("vvv", self.table))

    def testDetectedDuringParse(self):
        with self.assertRaises(TypoSuggestionError):
            parse(self.table, "-force")
        with self.assertRaises(TypoSuggestionError):
            parse(self.table, "-verbose")


if __name__ == "__main__":
    unittest.main()
