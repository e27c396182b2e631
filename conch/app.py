"""
Conch application: the command registry and the interactive read loop.

Lifecycle
1. App(...) builds the two output consoles and, unless defaults=False,
   registers the default top-level commands (exit, help).
2. add_command() validates a command tree and registers a copy of it.
3. run() (alias main) prints the banner and reads lines until a command
   returns something other than ExitStatus.CMD, or input ends.

Dispatch
- resolve(tokens) picks the command for a token list (see Command.match);
  execute(tokens) / execute_string(line) run it. These raise DispatchError
  subclasses; the read loop turns them into one-line messages and keeps going.

Output
- print / println / printf write to the output console; flag usage and fault
  reports go to the error console. Both are rich Consoles that print text as
  given (no markup, emoji or highlighting).
"""
import copy
import logging
import os.path
import sys

from .commands import Command, ExitStatus
from .defaults import DEFAULT_COMMANDS, DEFAULT_SUB_COMMANDS
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)

BANNER = 'Welcome to the shell. Type "help" for available commands.'


class EndOfInput(EOFError):
    """
    raised by LineReader when input is exhausted or interrupted.
    """


class LineReader:
    """
    Read one line at a time through a rich Console.

    With stream=None the console falls back to the builtin input(), which
    gives line editing on an interactive terminal. An empty read, EOFError and
    KeyboardInterrupt all end the input.
    """

    def __init__(self, console, stream=None, prompt="", /):
        self._console = console
        self._stream = stream
        self._prompt = prompt

    def read(self):
        try:
            line = self._console.input(self._prompt, markup=False, emoji=False, stream=self._stream)
        except (EOFError, KeyboardInterrupt):
            raise EndOfInput from None
        if self._stream is not None and not line:
            raise EndOfInput
        return line.rstrip("\r\n")


class App:
    name = mirror("name")
    commands = mirror("commands")
    prompt = mirror("prompt")
    banner = mirror("banner")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(
            self,
            name=Unset,
            /,
            *,
            defaults=True,
            output=Unset,
            error_output=Unset,
            input=Unset,
            commands=DEFAULT_COMMANDS,
            sub_commands=DEFAULT_SUB_COMMANDS,
            prompt="> ",
            banner=BANNER,
            fancy=False,
            colorful=False,
    ):
        name = coalesce(name, "") or os.path.basename(sys.argv[0])
        if not isinstance(name, str):
            raise TypeError("App 'name' must be a string")

        self._name = name
        self._console = make_console(coalesce(output, sys.stdout))
        self._error_console = make_console(coalesce(error_output, sys.stderr))
        self._input = coalesce(input, sys.stdin)
        self._default_sub_commands = tuple(sub_commands)
        self._prompt = prompt
        self._banner = banner
        self._fancy = fancy
        self._colorful = colorful
        self._commands = []

        if defaults:
            for command in commands:
                self.add_command(command)

    @property
    def console(self):
        return self._console

    @property
    def error_console(self):
        return self._error_console

    # ---------------- Output ----------------

    def print(self, *objects):
        """Write objects to the output console, unseparated and without a newline."""
        self._console.print(*objects, sep="", end="")

    def println(self, *objects):
        """Write objects to the output console, space-separated, then a newline."""
        self._console.print(*objects)

    def printf(self, format, /, *args):
        """Write format % args to the output console; format is written as is without args."""
        self._console.print(format % args if args else format, end="")

    def report(self, fault, /):
        """Render a fault on the error console."""
        self._error_console.print(fault.replace(app=self, fancy=self._fancy, colorful=self._colorful))

    # ---------------- Registry ----------------

    def get_by_name(self, name, /):
        """Return the top-level command called name; raise NoSuchCommandError otherwise."""
        for command in self._commands:
            if command.name == name:
                return command
        raise NoSuchCommandError(
            "command %r does not exist" % name,
            title="no such command",
            code=FaultCode.NO_SUCH_COMMAND,
            hint="run 'help' to list the commands",
            name=name,
        )

    def add_command(self, command, /):
        """
        Validate command and register a copy of it; return the registered copy.

        Default sub-commands are appended when the command declares any
        sub-commands and does not opt out. On failure a RegistrationError is
        raised and nothing is registered.

        The registered copy refers back to this App weakly; keep the App alive
        for as long as its commands are executed.
        """
        if not isinstance(command, Command):
            raise TypeError("App.add_command() argument must be a command")

        if any(registered.name == command.name for registered in self._commands):
            raise DuplicateCommandError(
                "command %r already exists" % command.name,
                title="duplicate command",
                code=FaultCode.DUPLICATE_COMMAND,
                hint="pick another name, or build the App with defaults=False",
                name=command.name,
            )

        working = copy.copy(command)
        sub_commands = working._sub_commands
        if sub_commands and not working.prevent_default_sub_commands:
            flagged = working.set_flags is not None or any(sub.set_flags is not None for sub in sub_commands)
            for default in self._default_sub_commands:
                if default.name != "flags" or flagged:
                    sub_commands.append(copy.copy(default))

        seen = set()
        for sub_command in sub_commands:
            if sub_command.name.startswith("-"):
                raise InvalidNameError(
                    "sub-command %r must not begin with '-'" % sub_command.name,
                    title="invalid name",
                    code=FaultCode.INVALID_NAME,
                    hint="names starting with '-' are read as flags",
                    name=sub_command.name,
                )
            if sub_command.sub_commands:
                raise TooDeepError(
                    "%r contains more than one level of sub-commands" % working.name,
                    title="too deep",
                    code=FaultCode.TOO_DEEP,
                    hint="sub-commands cannot have sub-commands of their own",
                    name=working.name,
                )
            if sub_command.name in seen:
                raise DuplicateCommandError(
                    "sub-command %r of %r already exists" % (sub_command.name, working.name),
                    title="duplicate command",
                    code=FaultCode.DUPLICATE_COMMAND,
                    hint="rename it, or set prevent_default_sub_commands",
                    name=sub_command.name,
                )
            seen.add(sub_command.name)
            sub_command._attach(working)

        items = [working, *sub_commands]
        for item in items:
            if not item.name:
                raise BlankNameError(
                    "(sub-)command name cannot be blank",
                    title="blank name",
                    code=FaultCode.BLANK_NAME,
                    hint="give every command a name",
                    name=item.name,
                )
            if count := sum(map(str.isspace, item.name)):
                raise WhitespaceInNameError(
                    "(sub-)command name %r contains %s" % (item.name, quantify(count, "disallowed whitespace character")),
                    title="whitespace in name",
                    code=FaultCode.WHITESPACE_IN_NAME,
                    hint="input is split on whitespace, so names must be single words",
                    name=item.name,
                    count=count,
                )
            if item.main is None:
                raise MissingHandlerError(
                    "handler for (sub-)command %r is missing" % item.name,
                    title="missing handler",
                    code=FaultCode.MISSING_HANDLER,
                    hint="pass a main function when building the command",
                    name=item.name,
                )

        for item in items:
            item._bind(self)

        self._commands.append(working)
        logger.debug("registered %r with sub-commands %r", working.name, [sub.name for sub in sub_commands])
        return working

    # ---------------- Dispatch ----------------

    def resolve(self, tokens, /):
        """
        Return (command, arguments) for a token list.

        A sub-command receives the tokens minus the leading command name, so
        its own name sits at position 0; a top-level command receives them all.
        """
        tokens = list(tokens)
        if not tokens:
            raise EmptyInputError(
                "failed to parse empty input",
                title="empty input",
                code=FaultCode.EMPTY_INPUT,
                hint="type a command name",
                input="",
            )
        for command in self._commands:
            if command.name == tokens[0]:
                matched = command.match(tokens)
                return (matched, tokens[1:]) if matched is not command else (command, tokens)
        raise NoSuchCommandError(
            "command %r not found" % tokens[0],
            title="no such command",
            code=FaultCode.NO_SUCH_COMMAND,
            hint="run 'help' to list the commands",
            name=tokens[0],
        )

    def execute(self, tokens, /):
        """Resolve tokens and run the matched command; return its ExitStatus."""
        command, arguments = self.resolve(tokens)
        return command.execute(arguments)

    def execute_string(self, line, /):
        """Split line on whitespace and execute it."""
        tokens = line.split()
        if not tokens:
            raise EmptyInputError(
                "failed to parse input %r" % line,
                title="empty input",
                code=FaultCode.EMPTY_INPUT,
                hint="type a command name",
                input=line,
            )
        return self.execute(tokens)

    def run(self):
        """
        Read and execute lines until a command stops the shell.

        Returns ExitStatus.SHELL or ExitStatus.ALL, never CMD. Faults raised
        while dispatching are printed and the loop keeps reading.
        """
        logger.debug("starting read loop of %r", self._name)
        if self._banner:
            self.println(self._banner)

        stream = None if self._input is sys.stdin and self._input.isatty() else self._input
        reader = LineReader(self._console, stream, self._prompt)

        while True:
            try:
                line = reader.read()
            except EndOfInput:
                logger.debug("input ended, leaving read loop")
                return ExitStatus.SHELL

            if not line.strip():
                continue

            try:
                status = self.execute_string(line)
            except FlagParseError as error:
                self.printf("%s: failed to parse flags:\n%s\n", error.name, error.error)
            except NoSuchCommandError as error:
                self.printf("%s: command not found\n", error.name)
            except ShellException as error:
                if self._fancy:
                    self.report(error)
                else:
                    self.println(str(error))
            else:
                if status is not ExitStatus.CMD:
                    logger.debug("leaving read loop with %s", status.name)
                    return status

    main = run

    def __repr__(self):
        return "app(name=%r, commands=%r)" % (self._name, [command.name for command in self._commands])


__all__ = (
    "App",
    "LineReader",
    "EndOfInput",
)
