"""
Conch command layer: named handlers, their flags and their sub-commands.

What this module provides
- ExitStatus: what a handler asks the shell to do once it returns.
- Command: a named unit of work with
  • main(context): the handler, returning an ExitStatus (None means CMD).
  • set_flags(context): optional flag registration run before every parse.
  • synopsis / usage: one-line and long help. Usage may hold the templates
    ${name}, ${fullName}, ${flags} and ${shortFlags}, expanded once when the
    command is registered with an App.
  • sub_commands: one level of nested commands (no deeper).
- command(...): build a Command from a function, or return a decorator.

Quick start
    from conch import App, command

    @command(synopsis="greet someone")
    def greet(context):
        context.app.println("Hello %s!" % context.must_get("who").value)

    @greet.flags
    def _(context):
        context.set("who", context.flags.string("who", "world", "who to greet"))

    App().add_command(greet)

Registration model
- App.add_command() works on a copy.copy() of the command (sub-commands are
  copied as well), so the object you built stays a reusable template and a
  failed registration leaves nothing behind.
- parent and app are weak back-references set during registration; they read
  as None on templates.
"""
import copy
import enum
import logging
import weakref

from .context import Context
from .faults import *
from .flags import FlagSet
from .utils import *

logger = logging.getLogger(__name__)


class ExitStatus(enum.IntEnum):
    """
    outcome of a command.

    - CMD: only the command finished; the shell keeps reading.
    - SHELL: leave the read loop.
    - ALL: leave the read loop and ask the embedding program to exit too;
      respecting that is up to the program.
    """
    CMD = 0
    SHELL = 1
    ALL = 2


def _dead():
    return None


class Command:
    name = mirror("name")
    synopsis = mirror("synopsis")
    usage = mirror("usage")
    main = mirror("main")
    set_flags = mirror("set_flags")
    sub_commands = mirror("sub_commands")
    prevent_default_sub_commands = mirror("prevent_default_sub_commands")

    def __init__(
            self,
            name,
            main=None,
            /,
            *,
            synopsis="",
            usage="",
            set_flags=None,
            sub_commands=(),
            prevent_default_sub_commands=False,
    ):
        if not isinstance(name, str):
            raise TypeError("Command 'name' must be a string")
        if main is not None and not callable(main):
            raise TypeError("Command 'main' must be callable or None")
        if set_flags is not None and not callable(set_flags):
            raise TypeError("Command 'set_flags' must be callable or None")
        if not isinstance(synopsis, str):
            raise TypeError("Command 'synopsis' must be a string")
        if not isinstance(usage, str):
            raise TypeError("Command 'usage' must be a string")

        sub_commands = list(sub_commands)
        if not all(isinstance(sub_command, Command) for sub_command in sub_commands):
            raise TypeError("Command 'sub_commands' must contain only commands")

        self._name = name
        self._main = main
        self._synopsis = synopsis
        self._usage = usage
        self._set_flags = set_flags
        self._sub_commands = sub_commands
        self._prevent_default_sub_commands = bool(prevent_default_sub_commands)
        self._parent = _dead
        self._app = _dead

    @property
    def parent(self):
        """The command this sub-command is registered under, or None."""
        return self._parent()

    @property
    def app(self):
        """
        The App this command is registered with, or None.

        Held weakly: once the App is garbage collected, commands it registered
        read None here and their contexts carry no app.
        """
        return self._app()

    @property
    def full_name(self):
        """"<parent> <name>" for a registered sub-command, else the name."""
        if (parent := self.parent) is not None:
            return "%s %s" % (parent.name, self._name)
        return self._name

    def new_context(self):
        """
        Return a fresh Context whose FlagSet is named after this command and
        reports to the app's error console.
        """
        app = self.app
        flags = FlagSet(self._name, output=app.error_console if app is not None else Unset)
        return Context(app, self, flags, self.parent)

    def get_sub_command(self, name, /):
        """Return the sub-command called name; raise NoSuchCommandError otherwise."""
        for sub_command in self._sub_commands:
            if sub_command.name == name:
                return sub_command
        raise NoSuchCommandError(
            "sub-command %r does not exist" % name,
            title="no such command",
            code=FaultCode.NO_SUCH_COMMAND,
            hint="run '%s help' to list the sub-commands" % self._name,
            name=name,
        )

    def match(self, tokens, /):
        """
        Resolve tokens against this command.

        The first token must equal this command's name. When a second token
        exists, does not start with "-", and names a sub-command exactly, that
        sub-command is returned; otherwise this command is.
        """
        if not tokens or tokens[0] != self._name:
            raise NoSuchCommandError(
                "input does not call command %r" % self._name,
                title="no such command",
                code=FaultCode.NO_SUCH_COMMAND,
                hint="run 'help' to list the commands",
                name=tokens[0] if tokens else "",
            )
        if self._sub_commands and len(tokens) > 1 and not tokens[1].startswith("-"):
            for sub_command in self._sub_commands:
                if sub_command.name == tokens[1]:
                    return sub_command
        return self

    def execute(self, tokens, /):
        """
        Run this command with tokens, whose first item is the command name.

        Flags are parsed from the remaining tokens; if that fails the handler
        never runs and FlagParseError is raised. A handler result other than
        None or an ExitStatus value raises InvalidStatusError.
        """
        logger.debug("executing %r with %r", self.full_name, tokens[1:])
        context = self.new_context()
        if self._set_flags is not None:
            self._set_flags(context)
        try:
            context.flags.parse(tokens[1:])
        except FlagError as error:
            raise FlagParseError(
                "failed to parse flags: %s" % error,
                title="flag parse error",
                code=FaultCode.FLAG_PARSE,
                hint="run 'help %s' to see the accepted flags" % self.full_name,
                name=self._name,
                error=error,
            ) from error

        status = self._main(context)
        if status is None:
            return ExitStatus.CMD
        try:
            return ExitStatus(status)
        except (TypeError, ValueError):
            raise InvalidStatusError(
                "command %r returned %r, which is not an exit status" % (self.full_name, status),
                title="invalid exit status",
                code=FaultCode.INVALID_STATUS,
                hint="return ExitStatus.CMD, ExitStatus.SHELL, ExitStatus.ALL or None",
                name=self._name,
                status=status,
            ) from None

    # ---------------- Declaration helpers ----------------

    def flags(self, set_flags, /):
        """
        Bind set_flags; usable as a decorator (@cmd.flags).
        """
        if not callable(set_flags):
            raise TypeError("Command.flags() argument must be callable")
        self._set_flags = set_flags
        return set_flags

    def command(self, source=Unset, /, **options):
        """
        Declare a sub-command of this command, from a function or a Command.

        Mirrors the module-level command(): without a source it returns a
        decorator. The new sub-command is appended and returned.
        """
        def attach(sub_command):
            self._sub_commands.append(sub_command)
            return sub_command

        if source is Unset:
            decorator = command(**options)
            return rename(lambda main: attach(decorator(main)), "command")
        if isinstance(source, Command):
            if options:
                raise TypeError("Command.command() options are not accepted with a command")
            return attach(source)
        return attach(command(source, **options))

    # ---------------- Registration ----------------

    def _attach(self, parent, /):
        self._parent = weakref.ref(parent)

    def _bind(self, app, /):
        """
        Tie this command to app and expand its usage templates.

        set_flags runs once against a scratch context to render ${flags} and
        ${shortFlags}. When no flag ends up registered both expand to nothing
        and the usage is stripped.
        """
        self._app = weakref.ref(app)

        context = self.new_context()
        if self._set_flags is not None:
            self._set_flags(context)
        usage = (self._usage
                 .replace("${name}", self._name)
                 .replace("${fullName}", self.full_name)
                 .replace("${flags}", context.flags.defaults())
                 .replace("${shortFlags}", context.flags.short_defaults()))
        self._usage = usage if len(context.flags) else usage.strip()

    def __copy__(self):
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone._sub_commands = [copy.copy(sub_command) for sub_command in self._sub_commands]
        return clone

    def __repr__(self):
        return "command(name=%r, synopsis=%r, sub_commands=%r)" % (
            self._name, self._synopsis, [sub_command.name for sub_command in self._sub_commands]
        )

    def __rich_repr__(self):
        yield "name", self._name
        yield "synopsis", self._synopsis
        yield "sub_commands", [sub_command.name for sub_command in self._sub_commands]


def command(source=Unset, /, *, name=Unset, synopsis=Unset, usage="", **options):
    """
    Create a Command from a function, or return a decorator that does.

    Forms
    - command(main)                       -> Command
    - @command                            -> Command
    - @command(name=..., synopsis=...)    -> decorator

    Defaults
    - name: the function name with underscores turned into hyphens.
    - synopsis: the first line of the function's docstring.

    Remaining options (set_flags, sub_commands, prevent_default_sub_commands)
    are forwarded to Command.
    """
    @rename("command")
    def wrapper(main, /):
        if not callable(main):
            raise TypeError("@command() must be applied to a callable")
        doc = (main.__doc__ or "").strip()
        return Command(
            coalesce(name, getattr(main, "__name__", "").replace("_", "-")),
            main,
            synopsis=coalesce(synopsis, doc.splitlines()[0].strip() if doc else ""),
            usage=usage,
            **options,
        )

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "ExitStatus",
    "Command",
    "command",
)
