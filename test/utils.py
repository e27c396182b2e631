"""
Tests for the shared helpers in conch.utils.

- Unset sentinel semantics (singleton, falsy, sealed).
- coalesce / rename / mirror behavior.
- pluralize / quantify wording used by fault messages.
- make_console prints text verbatim.
"""
import io
import unittest
from unittest import TestCase

from conch.utils import *


class UnsetTest(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Sub", (UnsetType,), {})


class HelperTest(TestCase):
    def testCoalesceKeepsFalsyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testRenameForms(self):
        def original():
            pass

        self.assertIs(rename(original, "renamed"), original)
        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__name__, "decorated")

        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorHandsOutCopies(self):
        class Box:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        box = Box()
        box.items.append(3)
        self.assertEqual(box.items, [1, 2])
        with self.assertRaises(AttributeError):
            box.items = []

    def testPluralize(self):
        self.assertEqual(pluralize("command"), "commands")
        self.assertEqual(pluralize("whitespace character"), "whitespace characters")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("box"), "boxes")
        self.assertEqual(pluralize("Child"), "Children")

    def testQuantify(self):
        self.assertEqual(quantify(1, "space"), "1 space")
        self.assertEqual(quantify(2, "space"), "2 spaces")
        self.assertEqual(quantify(0, "space"), "0 spaces")


class ConsoleTest(TestCase):
    def testPrintsMarkupVerbatim(self):
        stream = io.StringIO()
        console = make_console(stream)
        console.print("[-top] [bold]x[/bold] :smile:")
        self.assertEqual(stream.getvalue(), "[-top] [bold]x[/bold] :smile:\n")

    def testLongLinesAreNotWrapped(self):
        stream = io.StringIO()
        make_console(stream).print("word " * 40)
        self.assertEqual(stream.getvalue().count("\n"), 1)


if __name__ == "__main__":
    unittest.main()
