"""
Command tests (construction, decorators, matching, execution, copying).

Scope
- Build commands directly and through the command() decorator.
- Match token lists against a command and its sub-commands.
- Execute with flag parsing; parse failures never reach the handler.

Conventions
- Test method names follow CamelCase per project convention.
- Commands that must print are registered with an App writing to StringIO.
"""
import copy
import io
import unittest
from unittest import TestCase

from conch import App, Command, ExitStatus, command
from conch.faults import FaultCode, FlagParseError, InvalidStatusError, NoSuchCommandError, BadFlagSyntaxError


def noop(context):
    pass


class TestConstruction(TestCase):
    def testFields(self):
        sub = Command("bar", noop)
        cmd = Command("foo", noop, synopsis="does foo", usage="foo [bar]", sub_commands=[sub])
        self.assertEqual(cmd.name, "foo")
        self.assertEqual(cmd.synopsis, "does foo")
        self.assertEqual(cmd.usage, "foo [bar]")
        self.assertIs(cmd.main, noop)
        self.assertIsNone(cmd.set_flags)
        self.assertEqual(cmd.sub_commands, [sub])
        self.assertFalse(cmd.prevent_default_sub_commands)

    def testTemplatesHaveNoBackReferences(self):
        cmd = Command("foo", noop)
        self.assertIsNone(cmd.parent)
        self.assertIsNone(cmd.app)
        self.assertEqual(cmd.full_name, "foo")

    def testSubCommandsAreHandedOutAsCopies(self):
        cmd = Command("foo", noop)
        cmd.sub_commands.append(Command("bar", noop))
        self.assertEqual(cmd.sub_commands, [])

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            Command(1, noop)
        with self.assertRaises(TypeError):
            Command("foo", "not callable")
        with self.assertRaises(TypeError):
            Command("foo", noop, sub_commands=["bar"])

    def testGetSubCommand(self):
        sub = Command("bar", noop)
        cmd = Command("foo", noop, sub_commands=[sub])
        self.assertIs(cmd.get_sub_command("bar"), sub)
        with self.assertRaises(NoSuchCommandError) as context:
            cmd.get_sub_command("baz")
        self.assertEqual(context.exception.name, "baz")

    def testCopyIsIndependent(self):
        cmd = Command("foo", noop, sub_commands=[Command("bar", noop)])
        clone = copy.copy(cmd)
        clone._sub_commands.append(Command("baz", noop))
        self.assertEqual([sub.name for sub in cmd.sub_commands], ["bar"])
        self.assertIsNot(clone.sub_commands[0], cmd.sub_commands[0])
        self.assertEqual(clone.sub_commands[0].name, "bar")


class TestDecorators(TestCase):
    def testBareDecorator(self):
        @command
        def show_status(context):
            """Show the status.

            Longer text.
            """

        self.assertIsInstance(show_status, Command)
        self.assertEqual(show_status.name, "show-status")
        self.assertEqual(show_status.synopsis, "Show the status.")

    def testDecoratorWithOptions(self):
        @command(name="st", synopsis="status", usage="${name}")
        def status(context):
            pass

        self.assertEqual(status.name, "st")
        self.assertEqual(status.synopsis, "status")
        self.assertEqual(status.usage, "${name}")

    def testUndocumentedFunctionHasEmptySynopsis(self):
        self.assertEqual(command(noop).synopsis, "")

    def testFlagsAndSubCommands(self):
        @command
        def remote(context):
            pass

        @remote.flags
        def remote_flags(context):
            context.flags.boolean("v")

        @remote.command(synopsis="add a remote")
        def add(context):
            pass

        listed = remote.command(Command("list", noop))

        self.assertIs(remote.set_flags, remote_flags)
        self.assertEqual([sub.name for sub in remote.sub_commands], ["add", "list"])
        self.assertIs(listed, remote.sub_commands[1])
        self.assertEqual(add.synopsis, "add a remote")


class TestMatch(TestCase):
    def setUp(self):
        self.bar = Command("bar", noop)
        self.foo = Command("foo", noop, sub_commands=[self.bar])

    def testMatchesSubCommand(self):
        self.assertIs(self.foo.match(["foo", "bar"]), self.bar)

    def testFlagLikeTokenStaysOnCommand(self):
        self.assertIs(self.foo.match(["foo", "-bar"]), self.foo)

    def testUnknownSecondTokenStaysOnCommand(self):
        self.assertIs(self.foo.match(["foo", "baz"]), self.foo)
        self.assertIs(self.foo.match(["foo"]), self.foo)

    def testOnlyExactNamesMatch(self):
        self.assertIs(self.foo.match(["foo", "ba"]), self.foo)
        with self.assertRaises(NoSuchCommandError):
            self.foo.match(["fo", "bar"])

    def testOtherNameRaises(self):
        with self.assertRaises(NoSuchCommandError) as context:
            self.foo.match(["qux"])
        self.assertEqual(context.exception.name, "qux")


class TestExecute(TestCase):
    def setUp(self):
        self.output, self.errors = io.StringIO(), io.StringIO()
        self.app = App("test", defaults=False, output=self.output, error_output=self.errors, input=io.StringIO())
        self.calls = []

    def register(self, status=None, **options):
        def main(context):
            self.calls.append(context)
            return status

        def set_flags(context):
            context.set("top", context.flags.integer("top", 12, "example top-level flag"))

        return self.app.add_command(Command("test", main, set_flags=set_flags, **options))

    def testNoneMeansCmd(self):
        self.assertIs(self.register().execute(["test"]), ExitStatus.CMD)

    def testStatusIsCoerced(self):
        self.assertIs(self.register(status=1).execute(["test"]), ExitStatus.SHELL)

    def testInvalidStatusRaises(self):
        with self.assertRaises(InvalidStatusError) as context:
            self.register(status="ok").execute(["test"])
        self.assertEqual(context.exception.status, "ok")
        self.assertEqual(context.exception.code, FaultCode.INVALID_STATUS)

    def testFlagsReachHandler(self):
        self.register().execute(["test", "-top", "19", "rest"])
        context, = self.calls
        self.assertEqual(context.get("top").value, 19)
        self.assertEqual(context.flags.args, ["rest"])
        self.assertIs(context.app, self.app)
        self.assertIsNone(context.parent)

    def testContextsAreFresh(self):
        test = self.register()
        test.execute(["test", "-top", "1"])
        test.execute(["test"])
        first, second = self.calls
        self.assertIsNot(first, second)
        self.assertEqual(second.get("top").value, 12)

    def testParseFailureSkipsHandler(self):
        test = self.register()
        with self.assertRaises(FlagParseError) as context:
            test.execute(["test", "---bogus"])
        self.assertEqual(self.calls, [])
        self.assertEqual(context.exception.name, "test")
        self.assertIsInstance(context.exception.error, BadFlagSyntaxError)
        self.assertIn("Usage of test:", self.errors.getvalue())

    def testNewContextReportsToErrorConsole(self):
        context = self.register().new_context()
        self.assertIs(context.flags.output, self.app.error_console)
        self.assertEqual(context.flags.name, "test")


if __name__ == "__main__":
    unittest.main()
