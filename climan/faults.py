"""
Climan faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every way a parse can fail.
- ParseError: base type carrying the command path at the point of failure, an
  optional message and read-only options (hint, index, input, suggestions, colorful), and
  knowing how to render itself through rich.
- One subclass per fault so callers can catch precisely.

The empty message
- IncompleteCommandError is raised when the input ends on a group (a command that
  only dispatches to sub-commands). It deliberately carries no message: the facade
  shows the help for its path and no error line.

Integration
- The resolver raises faults immediately; nothing is retried or aggregated.
- runners.run() catches ParseError (raised while resolving or by a handler),
  prints it and the help of its path; runners.invoke() lets it propagate.
- Handlers may raise ParseError(path, "message") themselves to report their own
  validation failures the same way.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import *


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - tokens (1110x)
      • INVALID_ARGUMENT
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE, INVALID_OPTION_VALUE, MISSING_OPTION
    - routing (1112x)
      • UNKNOWN_COMMAND, INCOMPLETE_COMMAND
    - parameters (1113x)
      • UNEXPECTED_PARAMETER, INVALID_PARAMETER_VALUE, MISSING_PARAMETER
    - delegated (1114x)
      • DELEGATED_ERROR (raised by handlers or host code)
    """
    # --- token errors (11xxx) ---
    INVALID_ARGUMENT            = 11101

    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11111
    MISSING_OPTION_VALUE        = 11112
    INVALID_OPTION_VALUE        = 11113
    MISSING_OPTION              = 11114

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11121
    INCOMPLETE_COMMAND          = 11122

    # --- parameter errors (11xxx) ---
    UNEXPECTED_PARAMETER        = 11131
    INVALID_PARAMETER_VALUE     = 11132
    MISSING_PARAMETER           = 11133

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11141


class ParseError(Exception):
    """
    failure to resolve an argument sequence against a command tree.

    attributes
    - path: tuple of nodes from the root to the node being resolved.
    - message: str, or Unset for an incomplete command (help only, no error line).
    - code: FaultCode of the concrete fault class.
    - options: read-only mapping of extra context (hint, index, input, suggestions, colorful).
    """
    code = FaultCode.DELEGATED_ERROR

    def __init__(self, path, message=Unset, /, **options):
        if not isinstance(message, str | UnsetType):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(*([message] if message is not Unset else []))
        self.path = tuple(path)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        renders = [Text.assemble(
            ("error", styler("error-label")), ": ", (coalesce(self.message, ""), styler("error-message"))
        )]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble((" → ", styler("hint-arrow")), (hint, styler("hint"))))
        return Group(*renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.path, self.message, **{**self.options, **overrides})

    def replace(self, **overrides):
        """
        return a copy of this fault with some options overridden (e.g. colorful=True).
        """
        return copy.replace(self, **overrides)


class InvalidArgumentError(ParseError):
    code = FaultCode.INVALID_ARGUMENT


class UnknownOptionError(ParseError):
    code = FaultCode.UNKNOWN_OPTION


class MissingOptionValueError(ParseError):
    code = FaultCode.MISSING_OPTION_VALUE


class InvalidOptionValueError(ParseError):
    code = FaultCode.INVALID_OPTION_VALUE


class MissingOptionError(ParseError):
    code = FaultCode.MISSING_OPTION


class UnknownCommandError(ParseError):
    code = FaultCode.UNKNOWN_COMMAND


class IncompleteCommandError(ParseError):
    code = FaultCode.INCOMPLETE_COMMAND

    def __init__(self, path, /, **options):
        super().__init__(path, **options)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.path, **{**self.options, **overrides})


class UnexpectedParameterError(ParseError):
    code = FaultCode.UNEXPECTED_PARAMETER


class InvalidParameterValueError(ParseError):
    code = FaultCode.INVALID_PARAMETER_VALUE


class MissingParameterError(ParseError):
    code = FaultCode.MISSING_PARAMETER


__all__ = (
    "FaultCode",
    "ParseError",
    "InvalidArgumentError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "MissingOptionError",
    "UnknownCommandError",
    "IncompleteCommandError",
    "UnexpectedParameterError",
    "InvalidParameterValueError",
    "MissingParameterError",
)
