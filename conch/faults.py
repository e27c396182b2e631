"""
Conch faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the shell can
  surface. Codes are grouped by domain so logs and searches stay predictable.
- ShellException: base type that carries message + options and knows how to
  render itself with rich (header, message, hint; optionally inside a panel).
- Domain families:
  • RegistrationError: raised by App.add_command; fatal to that call.
  • DispatchError: raised while resolving/executing an input line; the read
    loop recovers from these by printing a message.
  • FlagError: raised by FlagSet.parse; wrapped into FlagParseError by commands.
  • MissingValueError / ContextAbort: missing context values (checked vs fail-fast).

Integration
- Faults are plain exceptions: raise them, catch them, and hand them to
  App.report() (or any rich Console) to get the friendly rendering.
- Host programs may customise rendering through names in __main__:
  __prog__ (program label), __codes__ (code relabeling), __styles__ (colors).
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the shell (stable identifiers).

    grouping (by high-level domain)
    - registration (1210x)
      • DUPLICATE_COMMAND, BLANK_NAME, WHITESPACE_IN_NAME, INVALID_NAME,
        TOO_DEEP, MISSING_HANDLER
    - dispatch (1220x)
      • NO_SUCH_COMMAND, EMPTY_INPUT, FLAG_PARSE, INVALID_STATUS
    - flags (1230x)
      • BAD_FLAG_SYNTAX, UNKNOWN_FLAG, HELP_REQUESTED, MISSING_FLAG_VALUE,
        INVALID_FLAG_VALUE, FLAG_REDEFINED
    - context (1240x)
      • MISSING_VALUE
    """
    # --- registration errors (1210x) ---
    DUPLICATE_COMMAND   = 12101
    BLANK_NAME          = 12102
    WHITESPACE_IN_NAME  = 12103
    INVALID_NAME        = 12104
    TOO_DEEP            = 12105
    MISSING_HANDLER     = 12106

    # --- dispatch errors (1220x) ---
    NO_SUCH_COMMAND     = 12201
    EMPTY_INPUT         = 12202
    FLAG_PARSE          = 12203
    INVALID_STATUS      = 12204

    # --- flag errors (1230x) ---
    BAD_FLAG_SYNTAX     = 12301
    UNKNOWN_FLAG        = 12302
    HELP_REQUESTED      = 12303
    MISSING_FLAG_VALUE  = 12304
    INVALID_FLAG_VALUE  = 12305
    FLAG_REDEFINED      = 12306

    # --- context errors (1240x) ---
    MISSING_VALUE       = 12401

    def normalize(self):
        """
        label for this code: __main__.__codes__[self] when the host defines
        one, else the number itself.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ShellException(Exception):
    """
    base of every fault raised by the shell.

    options
    - title: short lowercase label shown in the rendered header.
    - code: FaultCode of the fault.
    - hint: one actionable sentence.
    - app / fancy / colorful: rendering context, usually merged in by App.report().
    - anything else is fault-specific data, readable as an attribute
      (e.g. NoSuchCommandError(...).name).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        if name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        app = self.options.get("app")
        prog = text(getattr(main, "__prog__", getattr(app, "name", None) or "conch"), "prog-name")

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if code is not None else "?", "code"),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), "error-title"),
            " ]"
        )
        message = text(str(self), "error-message")
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def replace(self, **overrides):
        """
        return a copy of this fault with options merged with overrides.
        """
        return type(self)(self.message, **{**self.options, **overrides})

    __replace__ = replace


# --- registration ---
class RegistrationError(ShellException): ...
class DuplicateCommandError(RegistrationError): ...
class BlankNameError(RegistrationError): ...
class WhitespaceInNameError(RegistrationError): ...
class InvalidNameError(RegistrationError): ...
class TooDeepError(RegistrationError): ...
class MissingHandlerError(RegistrationError): ...

# --- dispatch ---
class DispatchError(ShellException): ...
class NoSuchCommandError(DispatchError): ...
class EmptyInputError(DispatchError): ...
class FlagParseError(DispatchError): ...
class InvalidStatusError(DispatchError): ...

# --- flags ---
class FlagError(ShellException): ...
class BadFlagSyntaxError(FlagError): ...
class UnknownFlagError(FlagError): ...
class HelpRequested(FlagError): ...
class MissingFlagValueError(FlagError): ...
class InvalidFlagValueError(FlagError): ...
class FlagRedefinedError(ShellException): ...


# --- context ---
class MissingValueError(ShellException, KeyError):
    """
    checked lookup of a context value that was never set.
    """


class ContextAbort(RuntimeError):
    """
    fail-fast lookup of a context value that was never set.

    deliberately not a ShellException: the read loop never swallows it, so a
    handler that treats a missing value as a bug stops the program loudly.
    """


__all__ = (
    "FaultCode",
    "ShellException",
    "RegistrationError",
    "DuplicateCommandError",
    "BlankNameError",
    "WhitespaceInNameError",
    "InvalidNameError",
    "TooDeepError",
    "MissingHandlerError",
    "DispatchError",
    "NoSuchCommandError",
    "EmptyInputError",
    "FlagParseError",
    "InvalidStatusError",
    "FlagError",
    "BadFlagSyntaxError",
    "UnknownFlagError",
    "HelpRequested",
    "MissingFlagValueError",
    "InvalidFlagValueError",
    "FlagRedefinedError",
    "MissingValueError",
    "ContextAbort",
)
