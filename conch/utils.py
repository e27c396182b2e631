"""
Small helpers shared by every conch layer.

Contents
- Unset / UnsetType: the "argument not given" marker. It is falsy, prints as
  "Unset", cannot be subclassed and is distinct from None, which stays a
  legitimate value (App(output=None) is not the same as App()).
- coalesce(value, default): swap Unset for a default, keep everything else.
- rename(...): give generated callables a readable __name__ for tracebacks.
- mirror("field"): read-only property over self._field; lists, dicts and sets
  come back as copies, so registered state is not edited through a getter.
- pluralize / quantify: wording for fault messages ("2 whitespace characters").
- make_console(file): the rich Console every stream is written through.

    >>> coalesce(Unset, 3), coalesce(0, 3)
    (3, 0)
    >>> quantify(2, "space")
    '2 spaces'
"""
import builtins
import functools
import re
from collections.abc import Mapping, Sequence, Set
from typing import final

from rich.console import Console


@final
class UnsetType:
    """
    Type of the Unset marker; every call returns the one shared instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    # allows `str | Unset` in isinstance checks
    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """Return default when object is Unset, otherwise object (even if falsy)."""
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    match parameters:
        case (str() as name,):
            return rename(lambda callable: rename(callable, name), "rename")
        case (target, str() as name):
            if not builtins.callable(target):
                raise TypeError("rename() first argument must be callable")
            try:
                target.__name__ = target.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() cannot rename %r" % (target,)) from None
            return target
        case (_,) | (_, _):
            raise TypeError("rename() name must be a string")
        case _:
            raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))


def _detach(value):
    # strings are sequences too, but immutable ones
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return {key: _detach(item) for key, item in value.items()}
    if isinstance(value, Sequence):
        return [_detach(item) for item in value]
    if isinstance(value, Set):
        return {_detach(item) for item in value}
    return value


def mirror(name, /):
    """Read-only property returning a detached copy of self._<name>."""
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    field = "_" + name

    @rename(name)
    def getter(self):
        return _detach(getattr(self, field))

    return property(getter, doc="Read-only view of %s." % field)


_IRREGULAR = {"child": "children", "person": "people", "index": "indices"}


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of text, keeping its casing.

    pluralize("whitespace character") -> "whitespace characters"
    pluralize("entry")                -> "entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")
    head, word, tail = re.fullmatch(r"(.*?)(\S*)(\s*)", text, re.DOTALL).groups()
    if not word:
        return text

    lower = word.lower()
    if lower in _IRREGULAR:
        plural = _IRREGULAR[lower]
    elif lower.endswith(("s", "x", "z", "ch", "sh")):
        plural = lower + "es"
    elif lower.endswith("y") and lower[-2:-1] not in ("", "a", "e", "i", "o", "u"):
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if word.isupper():
        plural = plural.upper()
    elif word[0].isupper():
        plural = plural.capitalize()
    return head + plural + tail


def quantify(count, text, /):
    """"<count> <text>", pluralized unless count is exactly one."""
    return "%d %s" % (count, text if count == 1 else pluralize(text))


def make_console(file=None, /, *, stderr=False):
    """
    Console that writes text exactly as given: no markup, emoji or
    highlighting, and no wrapping. file=None means stdout (or stderr).
    """
    return Console(
        file=file,
        stderr=stderr,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "quantify",
    "make_console",
    "UnsetType",
    "Unset",
)
