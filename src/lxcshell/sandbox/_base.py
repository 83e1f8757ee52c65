"""
Abstract base class for all sandbox implementations.

A sandbox runs shell commands somewhere isolated and always hands back a
CommandResult for commands that merely fail.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lxcshell._types import CommandResult
    from lxcshell.privilege import Command


class Sandbox(ABC):
    """
    Abstract base for all sandbox implementations.

    Provides a consistent interface for executing commands in an isolated
    environment.
    """

    @abstractmethod
    async def execute(
        self,
        command: Command,
        *,
        timeout: float | None = None,
        **spawn_options: Any,
    ) -> CommandResult:
        """
        Execute a shell command and return the result.

        Args:
            command: Escaped command string or list of unescaped arguments.
            timeout: Seconds to wait before giving up on the command.
                ``None`` waits forever.
            **spawn_options: Passed through to the process spawn call
                (``cwd``, ``env``, ...).

        Returns:
            CommandResult with stdout, stderr, and exit_status.
        """
        ...

    async def close(self) -> None:
        """
        Release sandbox resources.

        Idempotent - safe to call multiple times.
        """
        return None

    async def __aenter__(self) -> Sandbox:
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context manager, cleaning up resources."""
        await self.close()
