"""
Default command tests: top-level exit/help and the injected sub-commands.

Help listings are checked by their words rather than by exact spacing, since
the console expands tab stops.
"""
import io
import unittest
from unittest import TestCase

from conch import App, Command, ExitStatus, DEFAULT_COMMANDS, DEFAULT_SUB_COMMANDS


def noop(context):
    pass


def force_flags(context):
    context.set("force", context.flags.boolean("force", False, "overwrite existing remotes"))


def first_words(text):
    return [line.split()[0] for line in text.splitlines() if line.strip()]


class DefaultsTestCase(TestCase):
    def setUp(self):
        self.output, self.errors = io.StringIO(), io.StringIO()
        self.app = App("test", output=self.output, error_output=self.errors, input=io.StringIO())

    def execute(self, line):
        self.output.seek(0)
        self.output.truncate()
        self.errors.seek(0)
        self.errors.truncate()
        status = self.app.execute_string(line)
        self.assertIs(status, ExitStatus.CMD)
        return self.output.getvalue()


class TestTables(TestCase):
    def testTablesAreTuples(self):
        self.assertIsInstance(DEFAULT_COMMANDS, tuple)
        self.assertIsInstance(DEFAULT_SUB_COMMANDS, tuple)
        self.assertEqual([command.name for command in DEFAULT_COMMANDS], ["exit", "help"])
        self.assertEqual([command.name for command in DEFAULT_SUB_COMMANDS], ["commands", "flags", "help"])


class TestExit(DefaultsTestCase):
    def testStatuses(self):
        self.assertIs(self.app.execute_string("exit"), ExitStatus.ALL)
        self.assertIs(self.app.execute_string("exit -shell-only"), ExitStatus.SHELL)
        self.assertIs(self.app.execute_string("exit -shell-only=false"), ExitStatus.ALL)

    def testStrayArgumentPrintsUsage(self):
        self.assertEqual(self.execute("exit now"), "Usage: exit [OPTIONS]\n")
        self.assertIn("-shell-only", self.errors.getvalue())
        self.assertIn("exit only the shell", self.errors.getvalue())


class TestHelp(DefaultsTestCase):
    def setUp(self):
        super().setUp()
        self.app.add_command(Command("zebra", noop, synopsis="last one"))
        self.app.add_command(Command("alpha", noop, synopsis="first one", usage="alpha [-x]"))

    def testListsCommandsSortedWithoutHelp(self):
        output = self.execute("help")
        self.assertTrue(output.startswith("Available commands:\n"))
        self.assertEqual(first_words(output)[1:], ["alpha", "exit", "zebra"])
        self.assertIn("first one", output)
        self.assertIn("exit shell", output)

    def testNamedCommand(self):
        self.assertEqual(first_words(self.execute("help zebra")), ["zebra"])
        output = self.execute("help alpha")
        self.assertIn("first one", output)
        self.assertTrue(output.endswith("\nalpha [-x]"))

    def testUnknownCommand(self):
        self.assertEqual(self.execute("help nope"), "nope: command not found\n")

    def testTooManyArguments(self):
        self.assertEqual(self.execute("help a b"), "Usage: help [OPTIONS]\n")


class TestSubCommands(DefaultsTestCase):
    def setUp(self):
        super().setUp()
        self.app.add_command(Command(
            "remote",
            noop,
            sub_commands=[
                Command("add", noop, synopsis="add a remote", usage="${fullName} ${shortFlags}", set_flags=force_flags),
                Command("list", noop, synopsis="list remotes"),
            ],
        ))

    def testCommands(self):
        self.assertEqual(self.execute("remote commands"), "add\nlist\ncommands\nflags\nhelp\n")

    def testCommandsWithArgumentPrintsUsage(self):
        self.assertEqual(self.execute("remote commands x"), "commands:\nPrint a list of all sub-commands.\n")

    def testHelpListing(self):
        output = self.execute("remote help")
        self.assertTrue(output.startswith("Usage: remote <sub-command> <sub-command args>\n\nSub-commands:\n"))
        self.assertEqual(first_words(output)[2:], ["add", "commands", "flags", "list"])
        self.assertIn("add a remote", output)

    def testHelpForSibling(self):
        self.assertEqual(self.execute("remote help add"), "remote add [-force]\n")

    def testHelpForUnknownSibling(self):
        self.assertEqual(self.execute("remote help nope"), "remote nope: sub-command not found")

    def testHelpWithTooManyArguments(self):
        self.assertTrue(self.execute("remote help a b").startswith("help [<sub-command>]:\n"))

    def testFlagsOfSibling(self):
        self.assertEqual(self.execute("remote flags add"), "")
        self.assertIn("-force", self.errors.getvalue())
        self.assertIn("overwrite existing remotes", self.errors.getvalue())

    def testFlagsOfParentWithoutFlags(self):
        self.execute("remote flags")
        self.assertEqual(self.errors.getvalue(), "")

    def testFlagsOfUnknownSibling(self):
        self.assertEqual(self.execute("remote flags nope"), "remote nope: sub-command not found")

    def testFlagsWithTooManyArguments(self):
        self.assertTrue(self.execute("remote flags a b").startswith("flags [<sub-command>]:\n"))

    def testSubCommandFlagsParsed(self):
        seen = []

        def main(context):
            seen.append(context.get("force").value)

        self.app.add_command(Command("repo", noop, sub_commands=[Command("init", main, set_flags=force_flags)]))
        self.execute("repo init -force")
        self.assertEqual(seen, [True])


if __name__ == "__main__":
    unittest.main()
