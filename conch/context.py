"""
Per-invocation context passed from Command.set_flags to Command.main.

A Context identifies who it serves (app, command, parent command for
sub-commands), exposes the FlagSet the command registers its flags on, and
carries a small string-keyed store so flag results and other run-scoped data
can travel from flag registration to execution.

Access modes for the store
- get(name):        checked; raises MissingValueError (a KeyError) when unset.
- should_get(name): lenient; returns a default (None) when unset.
- must_get(name):   fail-fast; raises ContextAbort, which the read loop never
                    catches, for callers treating a missing value as a bug.

get() and must_get() accept type=... to check the stored value's type.

Contexts are created fresh for every dispatch and every out-of-band flag
inspection; they are never reused.
"""
from .faults import *
from .utils import *


class Context:
    app = mirror("app")
    command = mirror("command")
    flags = mirror("flags")
    parent = mirror("parent")

    def __init__(self, app, command, flags, parent=None, /):
        self._app = app
        self._command = command
        self._flags = flags
        self._parent = parent
        self._values = {}

    def get(self, name, /, *, type=Unset):
        try:
            value = self._values[name]
        except KeyError:
            raise MissingValueError(
                "value %r does not exist" % name,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="set the value in set_flags (context.set) before reading it",
                name=name,
            ) from None
        if type is not Unset and not isinstance(value, type):
            raise TypeError("value %r must be %s, not %s" % (
                name, getattr(type, "__name__", type), value.__class__.__name__
            ))
        return value

    def should_get(self, name, default=None, /):
        return self._values.get(name, default)

    def must_get(self, name, /, *, type=Unset):
        try:
            return self.get(name, type=type)
        except MissingValueError as error:
            raise ContextAbort(str(error)) from error

    def set(self, name, value, /):
        if not isinstance(name, str):
            raise TypeError("Context.set() 'name' must be a string")
        self._values[name] = value

    def delete(self, name, /):
        """Remove a value; missing names are ignored."""
        self._values.pop(name, None)

    def __contains__(self, name):
        return name in self._values

    def __repr__(self):
        return "context(command=%r, parent=%r, values=%r)" % (
            getattr(self._command, "name", None),
            getattr(self._parent, "name", None),
            sorted(self._values),
        )


__all__ = ("Context",)
