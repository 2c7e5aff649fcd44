r"""
Climan argument specifications and decorators.

Overview
- Specs
  • Flag: named, presence-only (boolean) option, e.g. -v/--verbose. With a handler it
    becomes a short-circuit option (e.g. --help): resolution stops and the handler
    receives the path.
  • Option: named, value-bearing option, e.g. -s/--sector-id 4. Exactly one shape:
      – handler-valued: 'handler' receives (value, path) and resolution stops;
      – default-valued: 'default' string used when the option is not given;
      – plain-valued: optionally 'repeatable' (values collected in a list) and/or
        'required' (resolution fails when it is never given).
  • Parameter: positional slot of a command. Exactly one shape:
      – defaulted: 'default' string (implicitly optional);
      – other: 'optional' and/or 'repeatable' flags.

- Decorators
  • @flag(...): build a Flag whose handler is the decorated function.
  • @option(...): build a handler-valued Option from the decorated function.

Metadata (sanitized on construction)
- name: external ("sector-id") or internal ("sectorId") form, stored internal.
  Must start with a lower-case letter; every hyphen must be followed by one.
- symbol: one character (not '-' nor whitespace), used as -<symbol>.
- help: Unset | str (short help), non-empty when provided.
- parser: callable converting the raw token (see climan.parsers).
- metavar: label used in help for the value (defaults to "value").
- default: a string; run through the parser when first used.

Validation highlights
- Shapes are mutually exclusive; mixing them raises TypeError at construction.
- Specs are immutable: every field is exposed through a read-only property, so a
  tree can be shared by any number of parses.

Quick example:
    >>> from climan import Flag, Option, Parameter, parsers
    >>> verbose = Flag("verbose", "v", "enable verbose output")
    >>> count = Option("count", "c", metavar="N", default="1", parser=parsers.range(1, 10, integer=True))
    >>> target = Parameter("object", "name of object to be moved")
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into immutable, introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            - flag(name='verbose', symbol='v', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every argument.

    - name: required string, stored in its internal (camel) form.
    - help: Unset | str; trimmed, non-empty when provided, None when Unset.
    - parser: Unset | callable (Flag has none).

    Raises
    - TypeError: wrong types.
    - ValueError: empty strings or names that are not valid identifiers.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\dA-Z_][^\W_]*(-[^\W\dA-Z_][^\W_]*)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be letters and digits starting with a lower-case letter")
    metadata["name"] = internalize(name)

    if not isinstance(help := metadata["help"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)

    if "parser" in metadata and not (metadata["parser"] is Unset or callable(metadata["parser"])):
        raise TypeError(f"{cls.__typename__} 'parser' must be callable")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate metadata for named specs (Flag, Option).

    - symbol: Unset | single character other than '-' and whitespace.
    - handler: Unset | callable.
    """
    if not isinstance(symbol := metadata["symbol"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'symbol' must be a string")
    elif isinstance(symbol, str) and (len(symbol) != 1 or symbol == "-" or symbol.isspace()):
        raise ValueError(f"{cls.__typename__} 'symbol' must be a single character other than '-'")

    if not (metadata["handler"] is Unset or callable(metadata["handler"])):
        raise TypeError(f"{cls.__typename__} 'handler' must be callable")


def _sanitize_valued_metadata(cls, metadata, /):
    """
    Internal: validate metadata for value-bearing specs (Option, Parameter).

    - default: Unset | str (the raw form, parsed when first used).
    - metavar: Unset | non-empty str (Option only).
    """
    if not isinstance(metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")

    if "metavar" not in metadata:
        return
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = metavar


class Flag(metaclass=ArgumentType):
    """
    Named, presence-only option specification.

    A Flag takes no value: when it appears, its value becomes True (it is
    primed to False). When a handler is given, the flag short-circuits the
    whole resolution instead, and the handler is called with the path.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "symbol",
        "help",
        "handler",
    )

    def __init__(self, name, /, symbol=Unset, help=Unset, *, handler=Unset):
        metadata = {
            "name": name,
            "symbol": symbol,
            "help": help,
            "handler": handler,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


class Option[_T](metaclass=ArgumentType):
    """
    Named, value-bearing option specification.

    The token following the option is its raw value; it goes through 'parser'
    when one is given. Exactly one shape is allowed (see module docstring):
    handler-valued, default-valued, or plain-valued (repeatable/required).

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "symbol",
        "help",
        "metavar",
        "parser",
        "default",
        "handler",
        "repeatable",
        "required",
    )

    def __init__(
            self,
            name,
            /,
            symbol=Unset,
            help=Unset,
            *,
            metavar=Unset,
            parser=Unset,
            default=Unset,
            handler=Unset,
            repeatable=False,
            required=False
    ):
        metadata = {
            "name": name,
            "symbol": symbol,
            "help": help,
            "metavar": metavar,
            "parser": parser,
            "default": default,
            "handler": handler,
            "repeatable": bool(repeatable),
            "required": bool(required),
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        _sanitize_valued_metadata(type(self), metadata)

        # Shapes are mutually exclusive: handler / default / repeatable+required.
        if handler is not Unset and (default is not Unset or repeatable or required):
            raise TypeError(f"{type(self).__typename__} with a 'handler' cannot have a 'default', "
                            f"be 'repeatable' or be 'required'")
        if default is not Unset and (repeatable or required):
            raise TypeError(f"{type(self).__typename__} with a 'default' cannot be 'repeatable' or 'required'")

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))


class Parameter[_T](metaclass=ArgumentType):
    """
    Positional parameter specification of a command.

    Parameters fill in declaration order. A repeatable parameter absorbs every
    remaining positional token; an optional one is None when not given; a
    defaulted one receives its (parsed) default.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "help",
        "parser",
        "default",
        "optional",
        "repeatable",
    )

    def __init__(self, name, /, help=Unset, *, parser=Unset, default=Unset, optional=False, repeatable=False):
        metadata = {
            "name": name,
            "help": help,
            "parser": parser,
            "default": default,
            "optional": bool(optional),
            "repeatable": bool(repeatable),
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_valued_metadata(type(self), metadata)

        if default is not Unset and (optional or repeatable):
            raise TypeError(f"{type(self).__typename__} with a 'default' cannot be 'optional' or 'repeatable'")

        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))

    @property
    def mandatory(self):
        """
        whether resolution fails when no value is given for this parameter.
        """
        return self.default is None and not self.optional


def flag(*args, **kwargs):
    """
    Decorator/factory for defining a short-circuit flag.

    Usage
        @flag("version", help="display application version and exit")
        def version(path): ...

    Behavior
    - Validates the metadata eagerly, then builds the Flag with the decorated
      function as its handler. The decorator can be applied only once.
    """
    if "handler" in kwargs:
        raise TypeError("@flag() handler is the decorated callable")
    Flag(*args, **kwargs)
    bound = False

    @rename("flag")
    def wrapper(callback, /):
        nonlocal bound
        if not callable(callback):
            raise TypeError("@flag() must be applied to a callable")
        if bound:
            raise TypeError("@flag() must be applied only once")
        bound = True
        return Flag(*args, handler=callback, **kwargs)

    return wrapper


def option(*args, **kwargs):
    """
    Decorator/factory for defining a handler-valued option.

    Usage
        @option("config", "C", metavar="FILE", parser=parsers.structured)
        def config(value, path): ...

    Behavior
    - Validates the metadata eagerly, then builds the Option with the decorated
      function as its handler. The decorator can be applied only once.
    """
    if "handler" in kwargs:
        raise TypeError("@option() handler is the decorated callable")
    Option(*args, **kwargs)
    bound = False

    @rename("option")
    def wrapper(callback, /):
        nonlocal bound
        if not callable(callback):
            raise TypeError("@option() must be applied to a callable")
        if bound:
            raise TypeError("@option() must be applied only once")
        bound = True
        return Option(*args, handler=callback, **kwargs)

    return wrapper


__all__ = (
    # Classes (specifications)
    "Flag",
    "Option",
    "Parameter",

    # Decorators
    "flag",
    "option",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
