"""
Tests for the internal helpers.

This module verifies semantic guarantees of the utilities shared by the
metadata, restriction and usage layers:
- The Unset sentinel (singleton identity, falsy, final, union syntax).
- coalesce(), rename(), mirror() and frozen().
- ordinal() labels used by diagnostics.
"""
import copy
import unittest
from unittest import TestCase

from argosy.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` builds a union usable with isinstance().
        """
        self.assertTrue(isinstance("text", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertFalse(isinstance(None, str | Unset))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class HelpersTest(TestCase):

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(None, "fallback"))

    def testRename(self) -> None:
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__qualname__, "decorated")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsImmutableViews(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a", "b"]
                self._table = {"k": "v"}

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(TypeError):
            holder.table["k"] = "w"

    def testFrozenSealsAfterInit(self) -> None:
        @frozen
        class Point:
            def __init__(self, x):
                self.x = x

        @frozen
        class Labelled(Point):
            def __init__(self, x, label):
                super().__init__(x)
                self.label = label

        point = Labelled(1, "origin")
        self.assertEqual((point.x, point.label), (1, "origin"))
        with self.assertRaises(AttributeError):
            point.x = 2
        with self.assertRaises(AttributeError):
            del point.label

    def testOrdinal(self) -> None:
        self.assertEqual([ordinal(n) for n in (1, 2, 10)], ["first", "second", "tenth"])
        self.assertEqual([ordinal(n) for n in (11, 21, 22, 23, 112)], ["11th", "21st", "22nd", "23rd", "112th"])
        with self.assertRaises(ValueError):
            ordinal(0)
        with self.assertRaises(TypeError):
            ordinal(True)


if __name__ == "__main__":
    unittest.main()
