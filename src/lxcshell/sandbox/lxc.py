"""
lxc-attach sandbox backend.

Runs commands inside a running container through ``lxc-attach``, for
containers started with the LXC execution driver.
"""

from __future__ import annotations

import logging
import re
import traceback
from dataclasses import dataclass
from typing import Any

from lxcshell._types import CommandResult, ExecutionTarget, MetadataSink, ShellOutput
from lxcshell.errors import AttachToolError, CommandTimeout
from lxcshell.privilege import Command, Identity, SudoConfig, escape_command
from lxcshell.sandbox._base import Sandbox
from lxcshell.sandbox.shell import ShellRunner

logger = logging.getLogger(__name__)

# Error output of the tools wrapping the user command, not of the command itself.
ATTACH_ERROR_PATTERN = re.compile(r"\A(lxc-attach|lxc_container|sudo): ")


@dataclass(frozen=True)
class Completed:
    """The attach command ran. The user command may still have failed."""

    output: ShellOutput


@dataclass(frozen=True)
class AttachFailed:
    """lxc-attach or sudo reported an error."""

    stderr: str


@dataclass(frozen=True)
class Crashed:
    """Running the attach command raised."""

    error: Exception


Outcome = Completed | AttachFailed | Crashed


class LxcAttachSandbox(Sandbox):
    """
    Executes commands inside a container through ``lxc-attach``.

    Ordinary command failures come back as a CommandResult with a non-zero
    exit status. Failures of lxc-attach itself raise AttachToolError. Any
    other error kills the container and is turned into a failed
    CommandResult.

    Example:
        >>> sandbox = LxcAttachSandbox(DockerContainer("0beaf145b190"))
        >>> result = await sandbox.execute("uname -a")
        >>> print(result.stdout)
    """

    def __init__(
        self,
        container: ExecutionTarget,
        *,
        runner: ShellRunner | None = None,
        config: SudoConfig | None = None,
        identity: Identity | None = None,
        metadata: MetadataSink | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize an lxc-attach sandbox.

        Args:
            container: Running container to attach to. Not owned by the sandbox.
            runner: Runner used to spawn lxc-attach. Built from ``config``
                and ``identity`` if not given.
            config: Sudo settings for the default runner.
            identity: Invoking user for the default runner.
            metadata: Sink receiving every command and its output.
            timeout: Default deadline in seconds for each command.
        """
        self.container = container
        self.runner = runner or ShellRunner(config, identity)
        self.metadata = metadata
        self.timeout = timeout

    def attach_command(self, cmd: str) -> list[str]:
        """
        Build the ``lxc-attach`` command running ``cmd`` in the container.

        Returns:
            The command as a list of unescaped arguments.
        """
        return ["lxc-attach", "-n", self.container.id, "--", "sh", "-c", cmd]

    def assert_attach_result(self, stderr: str, exit_status: int) -> None:
        """
        Raise AttachToolError if the error output comes from lxc-attach.

        Raises:
            AttachToolError: On a non-zero exit with lxc-attach, lxc_container
                or sudo error output.
        """
        if exit_status == 0:
            return
        if ATTACH_ERROR_PATTERN.match(stderr) is None:
            return
        raise AttachToolError(stderr)

    def record_metadata(self, cmd: Command, stdout: str, stderr: str) -> None:
        if self.metadata is None:
            return
        self.metadata.record(escape_command(cmd), stdout, stderr)

    def erroneous_result(
        self,
        cmd: Command,
        exception: Exception,
        stdout: str | None,
        stderr: str | None,
        status: int | None,
    ) -> CommandResult:
        """
        Build the result reported after an unexpected failure.

        Uses the captured stderr if there is one, the exception message and
        traceback otherwise. The exit status falls back to 1 unless a
        non-zero status was reported.
        """
        if stderr is None:
            err = f"{exception}\n" + "".join(traceback.format_tb(exception.__traceback__))
        else:
            err = stderr
        if isinstance(status, int) and not isinstance(status, bool) and status != 0:
            sta = status
        else:
            sta = 1
        stdout = stdout or ""
        self.record_metadata(cmd, stdout, err)
        return CommandResult(
            stdout=stdout,
            stderr=err,
            exit_status=sta,
            timed_out=isinstance(exception, CommandTimeout),
        )

    async def execute(
        self,
        command: Command,
        *,
        timeout: float | None = None,
        **spawn_options: Any,
    ) -> CommandResult:
        """
        Execute a command inside the container.

        Args:
            command: Escaped command string or list of unescaped arguments.
            timeout: Deadline in seconds. Defaults to the sandbox timeout.
            **spawn_options: Passed through to the process spawn call.

        Returns:
            CommandResult with stdout, stderr, and exit_status.

        Raises:
            AttachToolError: If lxc-attach or sudo failed.
        """
        timeout_val = timeout if timeout is not None else self.timeout
        outcome = await self._attempt(command, timeout_val, spawn_options)

        if isinstance(outcome, AttachFailed):
            raise AttachToolError(outcome.stderr)

        if isinstance(outcome, Crashed):
            exc = outcome.error
            logger.warning(
                "Killing container %s after unexpected failure: %s", self.container.id, exc
            )
            await self.container.kill()
            return self.erroneous_result(
                command,
                exc,
                getattr(exc, "stdout", None),
                getattr(exc, "stderr", None),
                getattr(exc, "exit_status", None),
            )

        output = outcome.output
        self.record_metadata(command, output.stdout, output.stderr)
        return CommandResult(
            stdout=output.stdout,
            stderr=output.stderr,
            exit_status=output.exit_status,
        )

    async def _attempt(
        self,
        command: Command,
        timeout: float | None,
        spawn_options: dict[str, Any],
    ) -> Outcome:
        try:
            attach_cmd = self.attach_command(escape_command(command))
            output = await self.runner.run(attach_cmd, timeout=timeout, **spawn_options)
        except Exception as e:
            return Crashed(e)

        try:
            self.assert_attach_result(output.stderr, output.exit_status)
        except AttachToolError as e:
            return AttachFailed(e.stderr)
        return Completed(output)
