"""
Climan resolver: walk a command tree over an argument sequence.

Contract
- resolve(root, tokens) consumes the tokens left to right, descending into groups
  by name, filling command parameters and option values on the way, and returns an
  Invocation: the callback to run and the arguments to run it with.
- It never calls a handler itself. A short-circuit option (a flag or option with a
  handler) ends the walk early and is returned as an Invocation of its handler.
- Every failure raises a ParseError subclass immediately; nothing is aggregated.

Per-parse state
- A private _Resolution object owns the remaining tokens, the path, the option
  values and the current token position. It is created per call and never shared,
  so a tree can be resolved concurrently from any number of threads.

Values
- Options: a dict keyed by internal option name, shared by the whole path. A node
  seeds the entries it declares only when they are not already present:
  defaults (parsed), [] for repeatable options, False for plain flags.
- Parameters: one slot per parameter of the command. A defaulted slot starts with
  its parsed default, a repeatable one with [], an optional one with None; any
  other slot starts as Unset ("missing") and must be filled.
"""
import collections
import difflib
import functools

from .arguments import Flag, Option
from .commands import Group, Command
from .faults import *
from .parsers import Reject, convert
from .utils import *


class Invocation(collections.namedtuple("Invocation", ("callback", "arguments", "path"))):
    """
    Outcome of a successful resolution.

    Fields
    - callback: the command callback, or the handler of a short-circuit option.
    - arguments: positional arguments for the callback:
      • command: (*parameter values, options dict, path)
      • short-circuit flag: (path,)
      • short-circuit option: (value, path)
    - path: tuple of nodes from the root to the node where resolution stopped.

    Calling the invocation runs the callback and returns its result.
    """
    __slots__ = ()

    def __call__(self):
        return self.callback(*self.arguments)


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _default(argument):
    """
    Parse the declared default of an option or parameter.

    A default rejected by its own parser is a defect of the tree, not of the
    input, hence a ValueError rather than a ParseError.
    """
    if (value := convert(argument.parser, argument.default)) is Reject:
        raise ValueError(f"{type(argument).__typename__} {externalize(argument.name)!r} "
                         f"default {argument.default!r} is rejected by its parser")
    return value


class _Resolution:
    """
    State of one resolution: remaining tokens, path, option values, position.
    """

    def __init__(self, tokens):
        self._tokens = collections.deque(tokens)
        self._path = []
        self._values = {}
        self._index = 0

    @property
    def path(self):
        return tuple(self._path)

    def _pop(self):
        self._index += 1
        return self._tokens.popleft()

    def _usage(self):
        return " ".join(externalize(node.name) for node in self._path)

    def descend(self, node):
        """
        Resolve the remaining tokens from node; return an Invocation.
        """
        self._path.append(node)
        self._prime(node)
        slots = self._slots(node) if isinstance(node, Command) else []
        cursor = 0

        while self._tokens:
            token = self._pop()
            if token.startswith("-"):
                if (invocation := self._switch(token)) is not None:
                    return invocation
            elif isinstance(node, Group):
                return self.descend(self._child(node, token))
            else:
                cursor = self._fill(node, slots, cursor, token)

        return self._complete(node, slots)

    def _prime(self, node):
        for option in node.options:
            if option.name in self._values:
                continue
            if isinstance(option, Flag):
                if option.handler is None:
                    self._values[option.name] = False
            elif option.default is not None:
                self._values[option.name] = _default(option)
            elif option.repeatable:
                self._values[option.name] = []

    def _slots(self, node):
        slots = []
        for parameter in node.parameters:
            if parameter.default is not None:
                slots.append(_default(parameter))
            elif parameter.repeatable:
                slots.append([])
            elif parameter.optional:
                slots.append(None)
            else:
                slots.append(Unset)
        return slots

    def _lookup(self, token):
        """
        Find the option a dash token refers to, nearest declaration first.
        """
        if len(token) > 2 and token.startswith("--"):
            key = "--" + internalize(token[2:])
        elif len(token) == 2:
            key = token
        else:
            raise InvalidArgumentError(
                self.path,
                "invalid argument %r at %s position" % (token, _ordinal(self._index)),
                hint="options are spelled '--name' or '-x'; try '%s --help'" % self._usage(),
                index=self._index,
                input=token,
            )

        for node in reversed(self._path):
            if key in node.switches:
                return node.switches[key]

        candidates = []
        for node in reversed(self._path):
            for option in node.options:
                candidates.append("--" + externalize(option.name))
                if option.symbol:
                    candidates.append("-" + option.symbol)
        suggestions = difflib.get_close_matches(token, candidates, 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all options" % (
                suggestions[0], self._usage()
            )
        except IndexError:
            hint = "try '%s --help' to see all available options" % self._usage()
        raise UnknownOptionError(
            self.path,
            "unknown option %r at %s position" % (token, _ordinal(self._index)),
            hint=hint,
            suggestions=tuple(suggestions),
            index=self._index,
            input=token,
        )

    def _switch(self, token):
        """
        Apply a dash token; return an Invocation when it short-circuits.
        """
        option = self._lookup(token)

        if isinstance(option, Flag):
            if option.handler is not None:
                return Invocation(option.handler, (self.path,), self.path)
            self._values[option.name] = True
            return None

        start = self._index
        if not self._tokens:
            raise MissingOptionValueError(
                self.path,
                "option %r at %s position requires a value" % (token, _ordinal(start)),
                hint="pass a value after %r, e.g. '%s %s'" % (token, token, "<" + (option.metavar or "value") + ">"),
                index=start,
                input=token,
            )
        raw = self._pop()
        if (value := convert(option.parser, raw)) is Reject:
            raise InvalidOptionValueError(
                self.path,
                "invalid value %r for option %r at %s position" % (raw, token, _ordinal(self._index)),
                index=self._index,
                input=raw,
            )

        if option.handler is not None:
            return Invocation(option.handler, (value, self.path), self.path)
        if option.repeatable:
            current = self._values.get(option.name)
            self._values[option.name] = [*current, value] if isinstance(current, list) else [value]
        else:
            self._values[option.name] = value
        return None

    def _child(self, node, token):
        try:
            return node.children[internalize(token)]
        except KeyError:
            pass

        suggestions = difflib.get_close_matches(token, [externalize(name) for name in node.children], 5)
        try:
            hint = "did you mean %r? you can also run '%s --help' to see all commands" % (
                suggestions[0], self._usage()
            )
        except IndexError:
            hint = "try '%s --help' to see all available commands" % self._usage()
        raise UnknownCommandError(
            self.path,
            "unrecognized command %r at %s position" % (token, _ordinal(self._index)),
            hint=hint,
            suggestions=tuple(suggestions),
            index=self._index,
            input=token,
        )

    def _fill(self, node, slots, cursor, token):
        """
        Store a positional token in the slot under the cursor; return the new cursor.
        """
        if cursor >= len(node.parameters):
            raise UnexpectedParameterError(
                self.path,
                "unexpected parameter %r at %s position" % (token, _ordinal(self._index)),
                hint="%r takes at most %d parameter(s)" % (externalize(node.name), len(node.parameters)),
                index=self._index,
                input=token,
            )

        parameter = node.parameters[cursor]
        if (value := convert(parameter.parser, token)) is Reject:
            raise InvalidParameterValueError(
                self.path,
                "invalid value %r for parameter %r at %s position" % (
                    token, externalize(parameter.name), _ordinal(self._index)
                ),
                index=self._index,
                input=token,
            )

        if parameter.repeatable:
            slots[cursor].append(value)
            return cursor
        slots[cursor] = value
        return cursor + 1

    def _complete(self, node, slots):
        """
        End of input: validate what was collected and build the Invocation.
        """
        if isinstance(node, Group):
            raise IncompleteCommandError(self.path, index=self._index)

        for parameter, slot in zip(node.parameters, slots):
            if slot is Unset or (parameter.repeatable and not parameter.optional and not slot):
                raise MissingParameterError(
                    self.path,
                    "no value provided for required parameter %r" % externalize(parameter.name),
                    hint="try '%s --help' to see the expected parameters" % self._usage(),
                    index=self._index,
                )

        for owner in self._path:
            for option in owner.options:
                if not (isinstance(option, Option) and option.required):
                    continue
                value = self._values.get(option.name, Unset)
                if value is Unset or (option.repeatable and not value):
                    raise MissingOptionError(
                        self.path,
                        "missing required option %r" % ("--" + externalize(option.name)),
                        hint="%r is declared by %r" % (
                            "--" + externalize(option.name), externalize(owner.name)
                        ),
                        index=self._index,
                    )

        return Invocation(node.callback, (*slots, dict(self._values), self.path), self.path)


def resolve(root, tokens, /):
    """
    Resolve an argument sequence against a command tree.

    Parameters
    - root: Group | Command, the root of the tree.
    - tokens: iterable of str (e.g. sys.argv[1:]).

    Returns
    - Invocation of the reached command, or of a short-circuit option handler.

    Raises
    - ParseError subclasses on invalid input.
    - ValueError when a declared default is rejected by its parser.
    """
    if not isinstance(root, Group | Command):
        raise TypeError("resolve() root must be a group or a command")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("resolve() tokens must be strings")
    return _Resolution(tokens).descend(root)


__all__ = (
    "Invocation",
    "resolve",
)
