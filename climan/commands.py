"""
Climan command layer: describe the command tree.

What this module provides
- Command: a leaf of the tree. Wraps a Python callable (the handler) together
  with its positional parameters and its options. The handler is called with
  the positional values in declaration order, then the option values mapping,
  then the path (tuple of nodes from the root to the command).
- Group: a branch of the tree. Dispatches to named child commands/groups and
  declares options inherited by all of its descendants.
- command(...): create a Command or a decorator that produces one.

Core ideas
- Declarative and immutable: a tree is built once, holds no per-parse state,
  and can be shared by any number of parses (sequential or concurrent).
- Fail closed: malformed trees (duplicate names/symbols, misplaced repeatable or
  required parameters, foreign children) are rejected at construction time.
- Option inheritance: options are visible to the node declaring them and to all
  of its descendants; the nearest declaration wins.

Quick start
    from climan import Group, Command, Option, Parameter, command, run, parsers

    @command(parameters=[Parameter("object", "name of object to be moved")])
    def move(object, options, path):
        \"\"\"move objects between forest sectors\"\"\"
        print(object, options)

    forest = Group("forest", [move], "national forest manager cli")

    if __name__ == "__main__":
        run(forest)
"""
import functools
import inspect
import operator
import re

from rich.text import Text

from .arguments import Flag, Option, Parameter
from .utils import *


class CommandType(type):
    """
    Metaclass that turns nodes into immutable, introspectable classes.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics; only the
      fields in __displayable__ are shown to keep nested trees readable.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in messages.
    """
    __introspectable__ = ()
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='move', help='move objects between forest sectors')
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_strings(cls, metadata):
    """
    Validate and normalize the textual metadata of a node.

    - name: str in external or internal form, stored internal.
    - help/extended: Unset | str | Text; trimmed, non-empty; None when Unset.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\dA-Z_][^\W_]*(-[^\W\dA-Z_][^\W_]*)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be letters and digits starting with a lower-case letter")
    metadata["name"] = internalize(name)

    for key in ("help", "extended"):
        if not isinstance(value := metadata[key], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {key!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {key!r} cannot be empty")
        metadata[key] = coalesce(value)


def _process_options(cls, metadata):
    """
    Validate the options of a node and build its switch table.

    The switch table maps every accepted token key to its option:
    - "--<internal name>" (long form; tokens are internalized before lookup)
    - "-<symbol>" (short form)

    Raises
    - TypeError: when an entry is not a Flag or an Option.
    - ValueError: when two options share a name or a symbol.
    """
    options = tuple(metadata["options"])
    switches = {}
    for option in options:
        if not isinstance(option, Flag | Option):
            raise TypeError(f"{cls.__typename__} 'options' must contain flags or options")
        for key in ("--" + option.name, *(("-" + option.symbol,) if option.symbol else ())):
            if switches.setdefault(key, option) is not option:
                raise ValueError(f"{cls.__typename__} {metadata['name']!r} option {key!r} is already in use")
    metadata["options"] = options
    metadata["switches"] = switches


def _process_parameters(cls, metadata):
    """
    Validate the positional parameters of a command.

    Rules
    - only the last parameter may be repeatable;
    - once a parameter is optional or defaulted, every following parameter
      must be optional or defaulted too;
    - names are unique.
    """
    parameters = tuple(metadata["parameters"])
    names = set()
    lenient = False
    for index, parameter in enumerate(parameters):
        if not isinstance(parameter, Parameter):
            raise TypeError(f"{cls.__typename__} 'parameters' must contain parameters")
        if parameter.name in names:
            raise ValueError(f"{cls.__typename__} parameter name {parameter.name!r} is already in use")
        names.add(parameter.name)
        if parameter.repeatable and index != len(parameters) - 1:
            raise ValueError(f"{cls.__typename__} repeatable parameter {parameter.name!r} must be the last one")
        if lenient and parameter.mandatory:
            raise ValueError(f"{cls.__typename__} required parameter {parameter.name!r} "
                             f"cannot follow an optional one")
        lenient |= not parameter.mandatory
    metadata["parameters"] = parameters


def _process_children(cls, metadata):
    """
    Register the children of a group under their names, enforcing unique names.
    """
    children = {}
    for child in metadata["commands"]:
        if not isinstance(child, Group | Command):
            raise TypeError(f"{cls.__typename__} 'commands' must contain commands or groups")
        if children.setdefault(child.name, child) is not child:
            raise ValueError(f"{cls.__typename__} command name {externalize(child.name)!r} is already in use")
    metadata["commands"] = tuple(children.values())
    metadata["children"] = children


class Group(metaclass=CommandType):
    """
    Branch node: dispatches to named sub-commands.

    Reaching the end of the input on a group is not an error in itself: it
    means "show the help of this group" (see IncompleteCommandError).

    Properties
    - name, help, extended, options, switches, commands, children, colorful
    """

    __introspectable__ = (
        "name",
        "help",
        "extended",
        "options",
        "switches",
        "commands",
        "children",
        "colorful",
    )

    __displayable__ = (
        "name",
        "help",
        "options",
        "commands",
    )

    def __init__(self, name, /, commands=(), help=Unset, extended=Unset, options=(), *, colorful=False):
        metadata = {
            "name": name,
            "help": help,
            "extended": extended,
            "options": options,
            "commands": commands,
            "colorful": bool(colorful),
        }
        _process_strings(type(self), metadata)
        _process_options(type(self), metadata)
        _process_children(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


class Command(metaclass=CommandType):
    """
    Leaf node: a handler with positional parameters.

    Construction
    - callback: the handler, called as callback(*values, options, path).
    - name: defaults to the callback's __name__ (snake_case is accepted).
    - help/extended: default to the first paragraph / the remaining paragraphs of
      the callback's docstring.

    Properties
    - name, help, extended, options, switches, parameters, callback, colorful
    """

    __introspectable__ = (
        "name",
        "help",
        "extended",
        "options",
        "switches",
        "parameters",
        "callback",
        "colorful",
    )

    __displayable__ = (
        "name",
        "help",
        "options",
        "parameters",
    )

    def __init__(
            self,
            callback,
            /,
            name=Unset,
            help=Unset,
            extended=Unset,
            parameters=(),
            options=(),
            *,
            colorful=False
    ):
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} callback must be callable")

        paragraphs = re.split(r"\n\s*\n", inspect.getdoc(callback) or "", maxsplit=1)
        metadata = {
            "callback": callback,
            "name": coalesce(name, getattr(callback, "__name__", "").replace("_", "-").strip("-")),
            "help": coalesce(help, paragraphs[0] or Unset),
            "extended": coalesce(extended, paragraphs[1] if len(paragraphs) > 1 else Unset),
            "options": options,
            "parameters": parameters,
            "colorful": bool(colorful),
        }
        _process_strings(type(self), metadata)
        _process_options(type(self), metadata)
        _process_parameters(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


def command(source=Unset, /, *args, **kwargs):
    """
    Create a Command or return a decorator to build it later.

    Invocation modes
    - Direct callback:
        move = command(handler, "move", parameters=[...])
    - Decorator:
        @command(parameters=[Parameter("object")])
        def move(object, options, path): ...

    Parameters
    - source: Unset | Callable
      When Unset, a decorator is returned. Otherwise a Command is created.
    - *args, **kwargs: forwarded to Command (name, help, extended, parameters,
      options, colorful).
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(source, *args, **kwargs)

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "Group",
    "Command",
    "command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
