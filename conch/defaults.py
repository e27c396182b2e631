"""
Built-in commands every App starts with.

- DEFAULT_COMMANDS: top-level "exit" and "help".
- DEFAULT_SUB_COMMANDS: "commands", "flags" and "help", added to every command
  that declares sub-commands (unless it opts out). "flags" is only added when
  the command or one of its sub-commands registers flags.

Both tables are tuples of templates; App registers copies.
"""
from .commands import Command, ExitStatus
from .faults import NoSuchCommandError


def _exit_flags(context):
    context.set("shell-only", context.flags.boolean(
        "shell-only", False, "exit only the shell, returning to the main program"
    ))


def _exit(context):
    flags = context.flags
    if flags.nargs > 0:
        context.app.println("Usage: exit [OPTIONS]")
        flags.print_defaults()
        return ExitStatus.CMD

    if context.should_get("shell-only").value:
        return ExitStatus.SHELL
    return ExitStatus.ALL


def _help(context):
    app, flags = context.app, context.flags
    match flags.nargs:
        case 0:
            lines = sorted(
                "\t%s\t\t%s\n" % (command.name, command.synopsis)
                for command in app.commands if command.name != "help"
            )
            app.printf("Available commands:\n%s", "".join(lines))
        case 1:
            try:
                requested = app.get_by_name(flags.arg(0))
            except NoSuchCommandError:
                app.printf("%s: command not found\n", flags.arg(0))
                return ExitStatus.CMD
            app.printf("%s\t%s\n", requested.name, requested.synopsis)
            if requested.usage:
                app.printf("\n%s", requested.usage)
        case _:
            app.println("Usage: help [OPTIONS]")
            flags.print_defaults()
    return ExitStatus.CMD


def _sibling(context, name):
    for sub_command in context.parent.sub_commands:
        if sub_command.name == name:
            return sub_command
    return None


def _commands(context):
    app = context.app
    if context.flags.nargs > 0:
        app.println(context.command.usage)
        return ExitStatus.CMD

    for sub_command in context.parent.sub_commands:
        app.println(sub_command.name)
    return ExitStatus.CMD


def _flags(context):
    app, flags, parent = context.app, context.flags, context.parent
    match flags.nargs:
        case 0:
            requested = parent
        case 1:
            if (requested := _sibling(context, flags.arg(0))) is None:
                app.printf("%s %s: sub-command not found", parent.name, flags.arg(0))
                return ExitStatus.CMD
        case _:
            app.println(context.command.usage)
            return ExitStatus.CMD

    scratch = requested.new_context()
    if requested.set_flags is not None:
        requested.set_flags(scratch)
    scratch.flags.print_defaults()
    return ExitStatus.CMD


def _sub_help(context):
    app, flags, parent = context.app, context.flags, context.parent
    match flags.nargs:
        case 0:
            app.printf("Usage: %s <sub-command> <sub-command args>\n\nSub-commands:\n", parent.name)
            lines = sorted(
                "\t%s\t\t%s\n" % (sub_command.name, sub_command.synopsis)
                for sub_command in parent.sub_commands if sub_command.name != "help"
            )
            app.println("".join(lines))
        case 1:
            if (requested := _sibling(context, flags.arg(0))) is None:
                app.printf("%s %s: sub-command not found", parent.name, flags.arg(0))
                return ExitStatus.CMD
            app.println(requested.usage)
        case _:
            app.println(context.command.usage)
    return ExitStatus.CMD


DEFAULT_COMMANDS = (
    Command(
        "exit",
        _exit,
        synopsis="exit shell",
        set_flags=_exit_flags,
    ),
    Command(
        "help",
        _help,
        synopsis="list existing commands and their synopsis",
    ),
)

DEFAULT_SUB_COMMANDS = (
    Command(
        "commands",
        _commands,
        synopsis="list all sub-command names",
        usage="${name}:\nPrint a list of all sub-commands.",
    ),
    Command(
        "flags",
        _flags,
        synopsis="describe all known top-level flags",
        usage=(
            "${name} [<sub-command>]:\n"
            "With an argument, print all flags of <sub-command>. Else, print a\n"
            "description of all known top-level flags. (The basic help information only\n"
            "discusses the most generally important top-level flags.)"
        ),
    ),
    Command(
        "help",
        _sub_help,
        synopsis="describe sub-commands and their syntax",
        usage=(
            "${name} [<sub-command>]:\n"
            "With an argument, prints detailed information on the use of the specified\n"
            "sub-command. With no argument, prints a list of all commands and a brief\n"
            "description of each."
        ),
    ),
)


__all__ = (
    "DEFAULT_COMMANDS",
    "DEFAULT_SUB_COMMANDS",
)
