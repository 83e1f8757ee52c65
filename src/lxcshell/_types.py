"""
Core type definitions for lxcshell.

Uses dataclasses and Protocols for lightweight, typed abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from lxcshell.errors import CommandError


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Immutable result from command execution."""

    stdout: str
    stderr: str
    exit_status: int
    timed_out: bool = False

    @property
    def success(self) -> bool:
        """Return True if the command exited with status 0 in time."""
        return self.exit_status == 0 and not self.timed_out

    def raise_for_status(self) -> None:
        """Raise CommandError if exit_status is non-zero."""
        if not self.success:
            raise CommandError(
                f"Command failed with exit status {self.exit_status}: {self.stderr or self.stdout}"
            )


@dataclass(frozen=True, slots=True)
class ShellOutput:
    """Raw output collected from one child process."""

    stdout: str
    stderr: str
    exit_status: int


class ExecutionTarget(Protocol):
    """Container handle commands are attached to. Owned by the caller."""

    @property
    def id(self) -> str: ...

    async def kill(self) -> None: ...


class MetadataSink(Protocol):
    """Receives the command and its output after every classified result."""

    def record(self, command: str, stdout: str, stderr: str) -> None: ...


@dataclass
class ExampleMetadata:
    """
    Dict-backed metadata sink.

    Stores the last command run and its output under the ``command``,
    ``stdout`` and ``stderr`` keys, the way test frameworks attach them to
    the current example for failure reports.
    """

    metadata: dict[str, Any] = field(default_factory=dict)

    def record(self, command: str, stdout: str, stderr: str) -> None:
        self.metadata["command"] = command
        self.metadata["stdout"] = stdout
        self.metadata["stderr"] = stderr
