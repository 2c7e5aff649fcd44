"""
Climan entry points.

- run(root, prompt): wrapped mode. Resolves the prompt, runs the handler and
  returns its result. A ParseError raised while resolving or by the handler is
  displayed instead: "error: <message>" and the help of its path on standard
  error, or, for an incomplete command (no message), only the help on standard
  output. run() then returns None.
- invoke(root, prompt): raw mode. Same, but ParseError propagates.
- tokenize(prompt): normalize the prompt to a list of tokens.

Prompts
- Unset: the process arguments (sys.argv[1:]).
- str: split with shell rules (shlex.split).
- iterable of str: used as is.
"""
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .faults import ParseError
from .helps import help
from .resolver import resolve
from .utils import *


def tokenize(prompt=Unset, /):
    """
    Normalize a prompt (Unset, shell string or iterable of strings) to a token list.
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


def invoke(root, prompt=Unset, /):
    """
    Resolve prompt against root and run the resulting invocation.

    ParseError (from resolution or from the handler) is not caught.
    """
    return resolve(root, tokenize(prompt))()


def run(root, prompt=Unset, /, *, colorful=Unset, stdout=Unset, stderr=Unset):
    """
    Resolve prompt against root, run the handler and display parse errors.

    Parameters
    - root: Group | Command.
    - prompt: see tokenize().
    - colorful: colour policy for errors and help; defaults to root.colorful.
    - stdout/stderr: rich Console sinks; default to the process streams.

    Returns
    - The handler result, or None when a ParseError was displayed.
    """
    colorful = coalesce(colorful, root.colorful)
    try:
        return invoke(root, prompt)
    except ParseError as fault:
        if fault.message is Unset:
            console = stdout if stdout is not Unset else Console(soft_wrap=True, highlight=False)
        else:
            console = stderr if stderr is not Unset else Console(stderr=True, soft_wrap=True, highlight=False)
            console.print(fault.replace(colorful=colorful))
            if fault.path:
                console.print()
        if fault.path:
            help(fault.path, colorful=colorful, console=console)
    return None


__all__ = (
    "run",
    "invoke",
    "tokenize",
)
