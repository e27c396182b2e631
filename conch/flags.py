r"""
Conch flag sets: register typed flags, parse tokens, render help.

Overview
- Flag: one registered, typed, named switch with a default and a description.
  Its `value` starts as the default and is overwritten by FlagSet.parse().
- FlagSet: the per-context flag registry and parser handed to Command.set_flags
  through Context.flags.

Syntax accepted by FlagSet.parse()
- -name / --name              boolean flags only (sets True)
- -name=value / --name=value  any flag
- -name value / --name value  non-boolean flags only
- parsing stops at the first non-flag token ("-" alone counts as non-flag),
  or right after a "--" terminator; what is left is available as .args.

Help rendering
- defaults() mirrors the classic multi-line layout:
      -name type
        	description (default value)
  A word in `backquotes` inside the description replaces the type label.
- short_defaults() renders "[-a] [-b] ..." on one line.

Quick example:
    >>> flags = FlagSet("test")
    >>> top = flags.integer("top", 12, "example top-level flag")
    >>> flags.parse(["-top", "19", "rest"])
    >>> top.value, flags.args
    (19, ['rest'])
"""
import builtins
import re

from .faults import *
from .utils import *

console = make_console(stderr=True)

_TRUE = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE = frozenset(("0", "f", "F", "FALSE", "false", "False"))

@rename("bool")
def _boolean(text, /):
    """Convert a command-line spelling of a boolean."""
    if isinstance(text, bool):
        return text
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError("parse error")

_OCTAL = re.compile(r"[+-]?0[0-7_]+")

@rename("int")
def _integer(text, /):
    """Convert an integer in base 10, or prefixed 0x / 0o / 0b / 0 (octal)."""
    if isinstance(text, int):
        return text
    if _OCTAL.fullmatch(text):
        return int(text, 8)
    return int(text, 0)

_CONVERTERS = {
    bool: _boolean,
    int: _integer,
}

_LABELS = {
    _boolean: "",
    _integer: "int",
    float: "float",
    str: "string",
}

def _shown(value):
    """Spell a default value for help output."""
    match value:
        case bool():
            return "true" if value else "false"
        case float():
            text = repr(value)
            return text[:-2] if text.endswith(".0") else text
        case str():
            return '"%s"' % value
        case _:
            return str(value)

class Flag:
    """
    A registered flag.

    Read-only metadata: name, descr, default, type (the converter).
    Mutable state: value (default until parsed).
    """
    name = mirror("name")
    descr = mirror("descr")
    default = mirror("default")
    type = mirror("type")

    def __init__(self, name, default, descr, type, /):
        self._name = name
        self._default = default
        self._descr = descr
        self._type = type
        self.value = default

    @property
    def boolean(self):
        return self._type is _boolean

    def convert(self, text, /):
        """Convert a raw token with the flag's type; errors propagate."""
        return self._type(text)

    def unquote(self):
        """
        Return (label, description) for help output.

        A backquoted word in the description becomes the label and loses its
        quotes; otherwise the label derives from the flag type.
        """
        if match := re.search(r"`([^`]*)`", self._descr):
            return match.group(1), self._descr[:match.start()] + match.group(1) + self._descr[match.end():]
        return _LABELS.get(self._type, getattr(self._type, "__name__", "value")), self._descr

    def __repr__(self):
        return "flag(name=%r, default=%r, value=%r)" % (self._name, self._default, self.value)

    def __rich_repr__(self):
        yield "name", self._name
        yield "default", self._default
        yield "value", self.value

class FlagSet:
    """
    Registry and parser of flags for one command invocation.

    Parameters
    - name: label used in "Usage of <name>:" lines.
    - output: rich Console receiving parse failures and usage text
      (defaults to the module stderr console).
    """

    def __init__(self, name="", /, *, output=Unset):
        if not isinstance(name, str):
            raise TypeError("FlagSet 'name' must be a string")
        self._name = name
        self._output = coalesce(output, console)
        self._flags = {}
        self._actual = {}
        self._args = []
        self._parsed = False

    name = mirror("name")
    args = mirror("args")
    parsed = mirror("parsed")

    @property
    def output(self):
        return self._output

    @property
    def nargs(self):
        return len(self._args)

    def arg(self, index, /):
        """Return the index-th positional argument, or "" when out of range."""
        if 0 <= index < len(self._args):
            return self._args[index]
        return ""

    # ---------------- Registration ----------------

    def define(self, name, default, descr="", /, *, type=Unset):
        """
        Register a flag and return its Flag record.

        The converter defaults to the type of `default` (str when default is None).
        Booleans get the lenient command-line spelling (1/0, t/f, true/false);
        integers also accept 0x, 0o, 0b and leading-zero octal spellings.
        """
        if not isinstance(name, str):
            raise TypeError("FlagSet.define() 'name' must be a string")
        if not name or name.startswith("-") or "=" in name or any(map(str.isspace, name)):
            raise ValueError("FlagSet.define() invalid flag name %r" % name)
        if name in self._flags:
            raise FlagRedefinedError(
                "%s flag redefined: %s" % (self._name, name) if self._name else "flag redefined: %s" % name,
                title="flag redefined",
                code=FaultCode.FLAG_REDEFINED,
                hint="register each flag only once per command",
                name=name,
            )

        converter = coalesce(type, builtins.type(default) if default is not None else str)
        if not callable(converter):
            raise TypeError("FlagSet.define() 'type' must be callable")
        converter = _CONVERTERS.get(converter, converter)

        flag = self._flags[name] = Flag(name, default, descr, converter)
        return flag

    def boolean(self, name, default=False, descr="", /):
        return self.define(name, bool(default), descr, type=bool)

    def integer(self, name, default=0, descr="", /):
        return self.define(name, default, descr, type=int)

    def number(self, name, default=0.0, descr="", /):
        return self.define(name, default, descr, type=float)

    def string(self, name, default="", descr="", /):
        return self.define(name, default, descr, type=str)

    # ---------------- Lookup ----------------

    def lookup(self, name, /):
        """Return the Flag registered under name, or None."""
        return self._flags.get(name)

    def set(self, name, text, /):
        """Assign a flag from its textual form, as if given on the command line."""
        try:
            flag = self._flags[name]
        except KeyError:
            raise UnknownFlagError(
                "no such flag -%s" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint="register the flag before setting it",
                name=name,
            ) from None
        self._convert(flag, name, text)
        self._actual[name] = flag

    def visit(self):
        """Flags that were actually set by parse() or set(), in name order."""
        return iter(sorted(self._actual.values(), key=lambda flag: flag.name))

    def __iter__(self):
        """Registered flags in lexicographic name order."""
        return iter(sorted(self._flags.values(), key=lambda flag: flag.name))

    def __len__(self):
        return len(self._flags)

    def __contains__(self, name):
        return name in self._flags

    # ---------------- Parsing ----------------

    def parse(self, arguments, /):
        """
        Parse flag tokens from arguments (which must not include the command name).

        Failures are reported to the output console together with the usage
        text, then raised as FlagError subclasses.
        """
        self._parsed = True
        self._args = list(arguments)
        while self._args:
            try:
                if not self._parse_one():
                    break
            except HelpRequested:
                self.usage()
                raise
            except FlagError as error:
                self._output.print(str(error))
                self.usage()
                raise

    def _parse_one(self):
        token = self._args[0]
        if len(token) < 2 or token[0] != "-":
            return False

        minuses = 1
        if token[1] == "-":
            minuses += 1
            if len(token) == 2:  # "--" terminates the flags
                del self._args[0]
                return False

        name = token[minuses:]
        if not name or name[0] in "-=":
            raise BadFlagSyntaxError(
                "bad flag syntax: %s" % token,
                title="bad flag syntax",
                code=FaultCode.BAD_FLAG_SYNTAX,
                hint="write flags as -name, -name=value or -name value",
                token=token,
            )

        del self._args[0]
        name, separator, value = name.partition("=")

        try:
            flag = self._flags[name]
        except KeyError:
            if name in ("help", "h"):
                raise HelpRequested(
                    "flag: help requested",
                    title="help requested",
                    code=FaultCode.HELP_REQUESTED,
                    hint="the usage text above lists every accepted flag",
                ) from None
            raise UnknownFlagError(
                "flag provided but not defined: -%s" % name,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint="check the spelling; the usage text lists every accepted flag",
                name=name,
            ) from None

        if flag.boolean:
            if separator:
                self._convert(flag, name, value)
            else:
                flag.value = True
        else:
            if not separator:
                if not self._args:
                    raise MissingFlagValueError(
                        "flag needs an argument: -%s" % name,
                        title="missing flag value",
                        code=FaultCode.MISSING_FLAG_VALUE,
                        hint="provide a value (e.g., -%s=value)" % name,
                        name=name,
                    )
                value = self._args.pop(0)
            self._convert(flag, name, value)

        self._actual[name] = flag
        return True

    def _convert(self, flag, name, text):
        try:
            flag.value = flag.convert(text)
        except (TypeError, ValueError) as exception:
            raise InvalidFlagValueError(
                'invalid value "%s" for flag -%s: %s' % (text, name, exception),
                title="invalid flag value",
                code=FaultCode.INVALID_FLAG_VALUE,
                hint="use a valid %s for -%s" % (flag.unquote()[0] or "boolean", name),
                name=name,
                value=text,
            ) from exception

    # ---------------- Help ----------------

    def defaults(self):
        """Render the multi-line default-help text for every registered flag."""
        lines = []
        for flag in self:
            label, descr = flag.unquote()
            line = "  -" + flag.name
            if label:
                line += " " + label
            # a one-letter boolean fits on the same line as its description
            line += "\t" if len(line) <= 4 else "\n    \t"
            line += descr.replace("\n", "\n    \t")
            if flag.default:
                line += " (default %s)" % _shown(flag.default)
            lines.append(line + "\n")
        return "".join(lines)

    def short_defaults(self):
        """Render "[-a] [-b] ..." for every registered flag."""
        return " ".join("[-%s]" % flag.name for flag in self)

    def print_defaults(self):
        self._output.print(self.defaults(), end="")

    def usage(self):
        self._output.print("Usage of %s:" % self._name if self._name else "Usage:")
        self.print_defaults()

    def __repr__(self):
        return "flag-set(name=%r, flags=%r)" % (self._name, [flag.name for flag in self])

__all__ = (
    "Flag",
    "FlagSet",
)
