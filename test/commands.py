"""
Commands module behavioral tests (Group, Command, command).

Scope
- Validate node construction, docstring-derived metadata and read-only views.
- Validate the switch table (long names and symbols) used for option lookup.
- Validate the fail-closed tree checks (duplicates, parameter ordering, foreign children).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from climan import Group, Command, Flag, Option, Parameter, command


def _noop(*arguments):
    pass


class TestCommand(TestCase):
    """Behavioral tests for Command (leaf) nodes."""

    def testNameAndHelpFromCallback(self):
        def add_tree(options, path):
            """
            add a tree(s) to a forest sector

            trees are planted at the sector entrance.
            """

        node = Command(add_tree)
        self.assertEqual(node.name, "addTree")
        self.assertEqual(node.help, "add a tree(s) to a forest sector")
        self.assertEqual(node.extended, "trees are planted at the sector entrance.")
        self.assertIs(node.callback, add_tree)

    def testExplicitMetadataWins(self):
        def handler(options, path):
            """docstring help"""

        node = Command(handler, "move", "move objects", "be careful")
        self.assertEqual(node.name, "move")
        self.assertEqual(node.help, "move objects")
        self.assertEqual(node.extended, "be careful")

    def testWithoutDocstring(self):
        node = Command(_noop, "noop")
        self.assertIsNone(node.help)
        self.assertIsNone(node.extended)
        self.assertEqual(node.parameters, ())
        self.assertEqual(node.options, ())

    def testCallbackMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("move")

    def testNamesStartLowerCase(self):
        def Tool(options, path):
            pass

        with self.assertRaises(ValueError):
            Command(_noop, "Tool")
        with self.assertRaises(ValueError):
            Command(_noop, "add-Tree")
        with self.assertRaises(ValueError):
            Command(Tool)

    def testSwitchTable(self):
        verbose = Flag("verbose", "v")
        count = Option("count", "c", default="1")
        node = Command(_noop, "tree", options=[verbose, count])
        self.assertEqual(dict(node.switches), {
            "--verbose": verbose,
            "-v": verbose,
            "--count": count,
            "-c": count,
        })
        with self.assertRaises(TypeError):
            node.switches["--other"] = verbose  # type: ignore[index]

    def testDuplicateOptionNameRejected(self):
        with self.assertRaises(ValueError):
            Command(_noop, "tree", options=[Flag("all"), Option("all")])

    def testDuplicateSymbolRejected(self):
        with self.assertRaises(ValueError):
            Command(_noop, "tree", options=[Flag("all", "a"), Flag("any", "a")])

    def testForeignOptionRejected(self):
        with self.assertRaises(TypeError):
            Command(_noop, "tree", options=[Parameter("object")])

    def testRepeatableParameterMustBeLast(self):
        with self.assertRaises(ValueError):
            Command(_noop, "animal", parameters=[
                Parameter("species", repeatable=True),
                Parameter("sector", optional=True),
            ])

    def testRequiredParameterCannotFollowOptional(self):
        with self.assertRaises(ValueError):
            Command(_noop, "move", parameters=[
                Parameter("destination", default="1"),
                Parameter("object"),
            ])
        with self.assertRaises(ValueError):
            Command(_noop, "move", parameters=[
                Parameter("source", optional=True),
                Parameter("object", repeatable=True),
            ])

    def testDuplicateParameterRejected(self):
        with self.assertRaises(ValueError):
            Command(_noop, "move", parameters=[Parameter("object"), Parameter("object", optional=True)])

    def testRepr(self):
        self.assertEqual(
            repr(Command(_noop, "noop")),
            "command(name='noop', help=None, options=(), parameters=())",
        )


class TestGroup(TestCase):
    """Behavioral tests for Group (branch) nodes."""

    def testChildrenByInternalName(self):
        tree = Command(_noop, "tree")
        dry = Command(_noop, "dry-run")
        node = Group("add", [tree, dry], "add objects to the forest")
        self.assertEqual(node.commands, (tree, dry))
        self.assertIs(node.children["tree"], tree)
        self.assertIs(node.children["dryRun"], dry)
        self.assertEqual(node.help, "add objects to the forest")

    def testNestedGroups(self):
        inner = Group("add", [Command(_noop, "tree")])
        outer = Group("forest", [inner])
        self.assertIs(outer.children["add"], inner)

    def testDuplicateChildRejected(self):
        with self.assertRaises(ValueError) as context:
            Group("forest", [Command(_noop, "move"), Command(_noop, "move")])
        self.assertIn("'move' is already in use", str(context.exception))

    def testForeignChildRejected(self):
        with self.assertRaises(TypeError):
            Group("forest", [_noop])

    def testNamesStartLowerCase(self):
        with self.assertRaises(ValueError):
            Group("Forest")

    def testColorfulPolicy(self):
        self.assertFalse(Group("forest").colorful)
        self.assertTrue(Group("forest", colorful=True).colorful)


class TestCommandFactory(TestCase):
    """Behavioral tests for the command() factory/decorator."""

    def testDirect(self):
        node = command(_noop, "noop")
        self.assertIsInstance(node, Command)
        self.assertEqual(node.name, "noop")

    def testDecorator(self):
        @command(parameters=[Parameter("object")])
        def move(object, options, path):
            """move objects between forest sectors"""

        self.assertIsInstance(move, Command)
        self.assertEqual(move.name, "move")
        self.assertEqual(move.help, "move objects between forest sectors")
        self.assertEqual(move.parameters[0].name, "object")

    def testDecoratorRequiresCallable(self):
        with self.assertRaises(TypeError):
            command()("move")


if __name__ == "__main__":
    unittest.main()
