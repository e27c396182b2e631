import sys

from rich.pretty import pprint

from conch import *

app = App("demo", fancy=True, colorful=True)


@command(usage="${name} ${shortFlags}\n${flags}")
def greet(context):
    """Print a greeting."""
    flags = context.flags
    for _ in range(context.must_get("times").value):
        context.app.println("Hello %s!" % (flags.arg(0) or context.must_get("who").value))


@greet.flags
def _(context):
    context.set("who", context.flags.string("who", "world", "`name` to greet"))
    context.set("times", context.flags.integer("times", 1, "how many greetings"))


@command
def notes(context):
    """Keep a few notes for this session."""
    context.app.println("Usage: notes <sub-command>")


@notes.command(usage="${fullName} <text>")
def add(context):
    """Remember a line of text."""
    if not context.flags.args:
        context.app.println(context.command.usage)
        return
    _notes.append(" ".join(context.flags.args))


@notes.command(name="list")
def list_notes(context):
    """Show remembered notes."""
    for number, note in enumerate(_notes, 1):
        context.app.printf("%d. %s\n", number, note)


_notes = []

app.add_command(greet)
app.add_command(notes)


if __name__ == '__main__':
    pprint(app.commands)
    if app.run() is ExitStatus.ALL:
        sys.exit(0)
