"""
Recognize lifecycle commands in comment bodies.

A command is a line of a comment that is exactly ``/close`` or ``/reopen``,
ignoring surrounding whitespace and case.  ``/close please`` is not a
command, and neither is ``/close`` in the middle of a sentence.
"""

from enum import Enum


class Command(Enum):
    CLOSE = "/close"
    REOPEN = "/reopen"


def command_lines(body: str) -> set[Command]:
    """Find all the commands on lines of their own in `body`."""
    tokens = {cmd.value: cmd for cmd in Command}
    found = set()
    # Only "\n" ends a line. strip() takes care of a "\r" before it.
    for line in body.split("\n"):
        cmd = tokens.get(line.strip().lower())
        if cmd is not None:
            found.add(cmd)
    return found


def has_command(body: str, command: Command) -> bool:
    """Does `body` have `command` on a line by itself?"""
    return command in command_lines(body)
