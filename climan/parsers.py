"""
Climan value parsers.

A parser is a plain callable taking the raw token (a string) and returning the
typed value, or the Reject sentinel when the token is not acceptable. Parsers
are attached to options and parameters through their 'parser' metadata and are
also applied to declared defaults.

Overview
- integer: optional sign followed by decimal digits → int
- number: optional sign, then ".5" or "12" or "12.5" → float
- range(minimum, maximum=Unset, integer=False): integer/number bounded to
  minimum <= value < maximum (the upper bound is exclusive and optional)
- regex(pattern, group=Unset): token must match pattern (re.search); returns the
  whole match or the requested group
- enum(*values): token must be one of values; returned unchanged
- structured: strict JSON document → decoded Python value

Plain callables
- convert(parser, raw) treats a raised ValueError/TypeError as a rejection too,
  so builtins such as int or float can be used as parsers directly.

Example
    >>> integer("-42")
    -42
    >>> integer("4.2") is Reject
    True
    >>> range(1, 10, integer=True)("10") is Reject
    True
"""
import functools
import json
import re
from typing import final

from .utils import *


@final
class RejectType:
    """
    sentinel returned by a parser that does not accept its raw token.

    behavior
    - truthiness: bool(Reject) is False.
    - identity: Reject is a process-wide singleton.
    - display: repr(Reject) -> "Reject".
    - distinct from None, so a parser may legitimately produce None (e.g. JSON null).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Reject"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'RejectType' is not an acceptable base type")


Reject = RejectType()


def convert(parser, raw, /):
    """
    apply a parser to a raw token.

    returns
    - raw unchanged when parser is Unset or None.
    - the parsed value, or Reject when the parser returned Reject or raised
      ValueError/TypeError.
    """
    if parser is Unset or parser is None:
        return raw
    try:
        return parser(raw)
    except (ValueError, TypeError):
        return Reject


def integer(value, /):
    """
    parse an optionally signed decimal integer ("12", "-3", "+7").
    """
    if not re.fullmatch(r"[+-]?[0-9]+", value):
        return Reject
    return int(value, 10)


_integer = integer  # shadowed by range() keyword


def number(value, /):
    """
    parse an optionally signed decimal number (".5", "-12", "3.25").
    """
    if not re.fullmatch(r"[+-]?(\.[0-9]+|[0-9]+(\.[0-9]+)?)", value):
        return Reject
    return float(value)


def range(minimum, maximum=Unset, /, integer=False):
    """
    build a parser accepting numbers within [minimum, maximum).

    parameters
    - minimum: lower bound (inclusive).
    - maximum: upper bound (exclusive); Unset means unbounded.
    - integer: delegate to integer() instead of number().
    """
    if maximum is not Unset and maximum < minimum:
        raise ValueError("range() maximum must not be lower than minimum")
    delegate = _integer if integer else number

    @rename("range")
    def parser(value, /):
        if (result := delegate(value)) is Reject:
            return Reject
        if result < minimum or (maximum is not Unset and result >= maximum):
            return Reject
        return result

    return parser


def regex(pattern, group=Unset, /):
    """
    build a parser accepting tokens that match a regular expression.

    the pattern is searched anywhere in the token (anchor it to constrain the
    whole token). the parser returns the whole match, or the given group
    (index or name) when one is requested.
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    elif not isinstance(pattern, re.Pattern):
        raise TypeError("regex() argument must be a string or a compiled pattern")

    @rename("regex")
    def parser(value, /):
        if not (match := pattern.search(value)):
            return Reject
        return match[0] if group is Unset else match[group]

    return parser


def enum(*values):
    """
    build a parser accepting exactly one of the given strings.
    """
    if not values:
        raise TypeError("enum() must specify at least one value")
    if not all(isinstance(value, str) for value in values):
        raise TypeError("enum() values must be strings")
    values = tuple(dict.fromkeys(values))

    @rename("enum")
    def parser(value, /):
        return value if value in values else Reject

    parser.values = values
    return parser


def _constant(name, /):
    raise ValueError(f"non-standard JSON constant {name!r}")


def structured(value, /):
    """
    decode a JSON document; malformed input is rejected.

    NaN, Infinity and -Infinity are not JSON and are rejected too, as are
    documents nested too deeply to decode.
    """
    try:
        return json.loads(value, parse_constant=_constant)
    except (ValueError, RecursionError):
        return Reject


__all__ = (
    "RejectType",
    "Reject",
    "convert",
    "integer",
    "number",
    "range",
    "regex",
    "enum",
    "structured",
)
