"""
Help renderer tests: layout, option grouping and determinism.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console
from rich.text import Text

from climan import Command, Group, Flag, Option, Parameter, help, render

from forest import build

MOVE = """\
usage: forest move <object> [destination=1] [source]

move objects between forest sectors

Warning! Operator must make sure the dentation forest sector has correct habitat for the moved object!

Parameters:
  object      : name of object to be moved
  destination : destination sector id
  source      : source sector id, can be omitted when object is present only in one sector or if --all flag is used

Options:
  -a, --all     : when source ambiguous move all matching objects instead of failing

Global options:
  -h, --help    : display help and exit
  --version     : display application version and exit
  -v, --verbose : enable verbose output"""

ROOT = """\
usage: forest (...)

national forest manager cli

Commands:
  add (...)                              : add objects to the forest
  move <object> [destination=1] [source] : move objects between forest sectors

Options:
  -h, --help    : display help and exit
  --version     : display application version and exit
  -v, --verbose : enable verbose output"""

TREE = """\
usage: forest add tree

add a tree(s) to a forest sector

Required options:
  -s, --sector-id <value>        : destination forest sector to add object

Options:
  -t, --type <TYPE=pine>         : type of tree to add
  -c, --count <N=1>              : amount of trees to add (max 10)
  -f, --use-fertilizer <NAME>, + : use a fertilizer during planting, can be repeated to use multiple fertilizers

Inherited options (add):
  --dry-run                      : to a test run without changing any actual state

Global options:
  -h, --help                     : display help and exit
  --version                      : display application version and exit
  -v, --verbose                  : enable verbose output"""


class TestRender(TestCase):

    def setUp(self):
        self.forest = build([])
        self.add = self.forest.children["add"]

    def testLeafLayout(self):
        path = (self.forest, self.forest.children["move"])
        self.assertEqual(help(path, True), MOVE)

    def testRootLayout(self):
        self.assertEqual(help((self.forest,), True), ROOT)

    def testOptionGroups(self):
        path = (self.forest, self.add, self.add.children["tree"])
        self.assertEqual(help(path, True), TREE)

    def testRepeatableParameterSignature(self):
        text = help((self.forest, self.add, self.add.children["animal"]), True)
        self.assertTrue(text.startswith("usage: forest add animal [species]+\n"))
        self.assertIn("\n\nInherited options (add):\n", text)
        self.assertIn("\n\nRequired options:\n  -s, --sector-id <value> :", text)

    def testGroupPlaceholderInUsage(self):
        text = help((self.forest, self.add), True)
        self.assertTrue(text.startswith("usage: forest add (...)\n\nadd objects to the forest\n\nCommands:\n"))
        self.assertIn("  tree              : add a tree(s) to a forest sector", text)
        self.assertIn("  animal [species]+ : add an animal(s) to a forest sector", text)

    def testDeterministic(self):
        path = (self.forest, self.add, self.add.children["tree"])
        self.assertEqual(render(path).plain, render(path).plain)
        self.assertEqual(help(path, True), help(path, True))

    def testColourDoesNotChangeText(self):
        path = (self.forest, self.forest.children["move"])
        colored = render(path, colorful=True)
        plain = render(path, colorful=False)
        self.assertIsInstance(colored, Text)
        self.assertEqual(colored.plain, plain.plain)
        self.assertTrue(colored.spans)
        self.assertFalse(plain.spans)

    def testMinimalCommand(self):
        self.assertEqual(help((Command(lambda options, path: None, "noop"),), True), "usage: noop")

    def testPaddingIsCapped(self):
        long = Option("a" * 100, help="long")
        root = Command(lambda options, path: None, "tool", options=[long, Flag("x", help="short")])
        lines = help((root,), True).splitlines()
        self.assertEqual(lines[-1], "  --x" + " " * 77 + " : short")
        self.assertEqual(lines[-2], "  --" + "a" * 100 + " <value> : long")

    def testSharedRequiredOptionListedOnce(self):
        shared = Option("token", required=True)
        leaf = Command(lambda options, path: None, "leaf", options=[shared])
        root = Group("root", [leaf], options=[shared])
        text = help((root, leaf), True)
        self.assertEqual(text.count("--token"), 1)
        self.assertNotIn("Options:", text)

    def testEmptyPathRejected(self):
        with self.assertRaises(ValueError):
            render(())


class TestHelpOutput(TestCase):

    def testPrintsToConsole(self):
        forest = build([])
        console = Console(file=io.StringIO(), width=300)
        self.assertIsNone(help((forest,), console=console))
        self.assertEqual(console.file.getvalue(), ROOT + "\n")


if __name__ == "__main__":
    unittest.main()
