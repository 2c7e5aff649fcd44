"""
Tests for the shared utilities: the Unset sentinel, coalesce, rename, mirror and
the name codec (internalize/externalize).
"""
import copy
import unittest
from unittest import TestCase

from climan.utils import *


class TestUnset(TestCase):
    """
    The Unset sentinel is a falsy, sealed, process-wide singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsyButNotNone(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testCannotSubclass(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA
                pass

    def testUnionWithTypes(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)


class TestCoalesce(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalsyValues(self) -> None:
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")


class TestRename(TestCase):

    def testFunctionForm(self) -> None:
        def original():
            pass
        renamed = rename(original, "renamed")
        self.assertIs(renamed, original)
        self.assertEqual(renamed.__name__, "renamed")
        self.assertEqual(renamed.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("pretty")
        def ugly():
            pass
        self.assertEqual(ugly.__name__, "pretty")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename("name", 42)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testReadOnlyViews(self) -> None:
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")
            name = mirror("name")

            def __init__(self):
                self._items = ["a", "b"]
                self._mapping = {"key": "value"}
                self._name = "holder"

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(TypeError):
            holder.mapping["key"] = "other"  # type: ignore[index]
        with self.assertRaises(AttributeError):
            holder.name = "other"


class TestNameCodec(TestCase):
    """
    internalize("full-name") == "fullName" and externalize is its inverse.
    """

    def testInternalize(self) -> None:
        self.assertEqual(internalize("full-name"), "fullName")
        self.assertEqual(internalize("dry-run"), "dryRun")
        self.assertEqual(internalize("use-fertilizer"), "useFertilizer")
        self.assertEqual(internalize("plain"), "plain")

    def testExternalize(self) -> None:
        self.assertEqual(externalize("fullName"), "full-name")
        self.assertEqual(externalize("sectorId"), "sector-id")
        self.assertEqual(externalize("plain"), "plain")

    def testRoundTrip(self) -> None:
        for token in ("a", "sector-id", "use-fertilizer", "a-b-c", "x1-y2"):
            with self.subTest(token=token):
                self.assertEqual(externalize(internalize(token)), token)

    def testTrailingHyphenKept(self) -> None:
        self.assertEqual(internalize("name-"), "name-")

    def testRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            internalize(42)
        with self.assertRaises(TypeError):
            externalize(None)


if __name__ == "__main__":
    unittest.main()
