"""
Climan help renderer.

render(path) formats the usage text for any point of a command tree. It follows
the same scoping rules as the resolver: every option visible at the last node of
the path is listed, grouped by where it was declared.

Layout
    usage: forest add tree [options...]

    <help>

    <extended help>

    Parameters:            (commands)
      name : help

    Commands:              (groups)
      signature : help

    Required options:      (any node on the path)
    Options:               (the last node)
    Inherited options (x): (every ancestor between the root and the last node)
    Global options:        (the root)

Signatures
- parameters: <name> when required, [name] when optional, [name=default] when
  defaulted; repeatable parameters get a trailing '+'.
- options: -s, --name for flags; valued options add <metavar> or
  <metavar=default>, and repeatable options a trailing ', +'.
- groups: name (...).

Rendering is a pure function of the path; colours are spans on a rich Text and
never change its plain form.
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .arguments import Flag, Option
from .commands import Group, Command
from .utils import *

_WIDTH = 80


def _styles():
    return defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "command-name": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray
        "epilog-section": "#737373",  # Dim footer gray

        # === Groups / arguments ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray

        # === Names / metavars ===
        "option-name": "bold #00E6FF",  # CYAN for options
        "flag-name": "bold #22C55E",  # GREEN for flags
        "metavar": "bold #FFD600",  # AMBER for parameters
        "greedy-metavar": "bold italic #FFD600",
        "children": "bold #36C5F0",  # Sky-blue subcommands
    } | getattr(__import__('__main__'), "__styles__", {}))


def _parameter(parameter, styler):
    label = externalize(parameter.name)
    if parameter.default is not None:
        label += "=" + parameter.default
    style = styler("greedy-metavar" if parameter.repeatable else "metavar")
    if parameter.mandatory:
        signature = Text.assemble("<", (label, style), ">")
    else:
        signature = Text.assemble("[", (label, style), "]")
    if parameter.repeatable:
        signature.append("+")
    return signature


def _option(option, styler):
    style = styler("flag-name" if isinstance(option, Flag) else "option-name")
    signature = Text()
    if option.symbol:
        signature.append("-" + option.symbol, style).append(", ")
    signature.append("--" + externalize(option.name), style)
    if isinstance(option, Flag):
        return signature

    label = option.metavar or "value"
    if option.default is not None:
        label += "=" + option.default
    signature.append(" <").append(label, styler("metavar")).append(">")
    if option.repeatable:
        signature.append(", +")
    return signature


def _command(node, styler, style="children"):
    signature = Text(externalize(node.name), styler(style))
    if isinstance(node, Group):
        return signature.append(" (...)")
    for parameter in node.parameters:
        signature.append(" ").append_text(_parameter(parameter, styler))
    return signature


def _table(rows, padding, styler):
    """
    Lay rows of (signature, help) out as '  signature : help' lines.
    """
    lines = []
    for signature, info in rows:
        line = Text("  ")
        line.append_text(signature).append(" " * (padding - len(signature))).append(" : ")
        line.append_text(info)
        lines.append(line)
    return Text("\n").join(lines)


def render(path, /, *, colorful=Unset):
    """
    Render the help of the last node of a path as a rich Text.

    Parameters
    - path: sequence of nodes from the root, as carried by ParseError.path or
      passed to handlers.
    - colorful: apply the style palette; defaults to the root's colorful policy.
      Palette entries can be overridden through a __styles__ mapping in __main__.
    """
    path = tuple(path)
    if not path:
        raise ValueError("render() path cannot be empty")
    if not all(isinstance(node, Group | Command) for node in path):
        raise TypeError("render() path must contain groups or commands")

    node = path[-1]
    colorful = coalesce(colorful, path[0].colorful)
    styles = _styles()

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        # Keep user-provided Text spans only in colorful mode
        if isinstance(fragment, Text) and colorful:
            return fragment
        return Text(str(fragment or ""), styler(style))

    output = Text()
    output.append("usage", styler("usage-label")).append(": ")
    for index, ancestor in enumerate(path[:-1]):
        output.append(externalize(ancestor.name), styler("command-name" if index else "program-name")).append(" ")
    output.append_text(_command(node, styler, "command-name" if len(path) > 1 else "program-name"))

    if node.help:
        output.append("\n\n").append_text(text(node.help, "description-section"))
    if node.extended:
        output.append("\n\n").append_text(text(node.extended, "epilog-section"))

    if isinstance(node, Command) and node.parameters:
        rows = [
            (Text(externalize(parameter.name), styler("metavar")), text(parameter.help, "argument-description"))
            for parameter in node.parameters
        ]
        output.append("\n\n").append("Parameters", styler("group-label")).append(":\n")
        output.append_text(_table(rows, max(len(signature) for signature, _ in rows), styler))

    if isinstance(node, Group) and node.commands:
        rows = [
            (_command(child, styler), text(child.help, "argument-description"))
            for child in node.commands
        ]
        output.append("\n\n").append("Commands", styler("group-label")).append(":\n")
        output.append_text(_table(rows, max(len(signature) for signature, _ in rows), styler))

    required = []
    groups = []
    for depth in reversed(range(len(path))):
        owner = path[depth]
        rows = []
        for option in owner.options:
            row = (_option(option, styler), text(option.help, "argument-description"))
            if not (isinstance(option, Option) and option.required):
                rows.append(row)
            elif all(option is not other for other, _ in required):
                required.append((option, row))
        if not rows:
            continue
        if depth == len(path) - 1:
            label = "Options"
        elif depth == 0:
            label = "Global options"
        else:
            label = f"Inherited options ({externalize(owner.name)})"
        groups.append((label, rows))
    if required:
        groups.insert(0, ("Required options", [row for _, row in required]))

    padding = min(max((len(signature) for _, rows in groups for signature, _ in rows), default=0), _WIDTH)
    for label, rows in groups:
        output.append("\n\n").append(label, styler("group-label")).append(":\n")
        output.append_text(_table(rows, padding, styler))

    return output


def help(path, string=False, /, *, colorful=Unset, console=Unset):
    """
    Print the help of the last node of a path, or return it as a plain string.

    Shaped as a flag handler: Flag("help", "h", handler=help) prints the help of
    the command where --help was given.

    Parameters
    - path: sequence of nodes from the root.
    - string: return the plain text instead of printing it.
    - colorful: see render().
    - console: rich Console to print to; defaults to a standard output console.
    """
    if string:
        return render(path, colorful=False).plain
    console = coalesce(console, Console(soft_wrap=True, highlight=False))
    console.print(render(path, colorful=colorful))
    return None


__all__ = (
    "render",
    "help",
)
