"""
Utility tests.

Scope
- The Unset sentinel.
- coalesce(), rename(), view() and quote().
"""
import unittest
from types import MappingProxyType
from unittest import TestCase

from optable.utils import *


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "default"), "default")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, "default"), 0)
        self.assertIsNone(coalesce(None, "default"))


class TestRename(TestCase):

    def testInPlace(self):
        function = rename(lambda: None, name="handler")
        self.assertEqual((function.__name__, function.__qualname__), ("handler", "handler"))

    def testCurried(self):
        @rename("handler")
        def function():
            pass

        self.assertEqual(function.__name__, "handler")

    def testRejectsNonStringName(self):
        with self.assertRaises(TypeError):
            rename(lambda: None, name=1)


class TestView(TestCase):

    class Holder:
        items = view("items")
        mapping = view("mapping")
        names = view("names")
        text = view("text")

        def __init__(self):
            self._items = [1, 2]
            self._mapping = {"a": 1}
            self._names = {"x"}
            self._text = "abc"

    def testImmutableViews(self):
        holder = self.Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.mapping, MappingProxyType)
        self.assertEqual(holder.names, frozenset({"x"}))
        self.assertEqual(holder.text, "abc")

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().items = ()


class TestQuote(TestCase):

    def testQuote(self):
        self.assertEqual(quote("verbose"), "`verbose'")


if __name__ == "__main__":
    unittest.main()
