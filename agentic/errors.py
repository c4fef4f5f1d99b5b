"""Exception types raised by agentic.

Everything derives from ``AgenticError`` (itself a ``ValueError``) so the CLI
entry point can turn any of them into a one-line message and an exit code.
"""


class AgenticError(ValueError):
    """Base class for all errors surfaced to the user."""


class ParseError(AgenticError):
    """No date/time candidate was found in text expected to contain one."""


class InvalidDateError(AgenticError):
    """A stored date string could not be parsed where a valid one was assumed."""


class InvalidDurationError(AgenticError):
    """A duration string contained no recognizable unit tokens."""


class InvalidPriorityError(AgenticError):
    """A priority token is not part of the recognized set."""


class CommandError(AgenticError):
    """Bad usage or a failed validation in a command handler."""


class UnknownCommandError(CommandError):
    pass


class TaskNotFoundError(CommandError):
    def __init__(self, task_id):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class StorageError(AgenticError):
    """The on-disk state or config document is malformed."""
