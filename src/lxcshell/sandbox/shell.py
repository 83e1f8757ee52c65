"""
Shell command runner with optional sudo escalation.

Spawns one shell per command through asyncio.subprocess, answers the sudo
password prompt when one shows up on stderr, and collects stdout, stderr and
the exit status.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from lxcshell._types import ShellOutput
from lxcshell.errors import CommandTimeout, ExecutionError
from lxcshell.privilege import SUDO_PROMPT, Command, Identity, SudoConfig, escape_command

logger = logging.getLogger(__name__)


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


async def _reap(proc: asyncio.subprocess.Process) -> None:
    """Kill the child if it is still running and wait for it."""
    if proc.returncode is None:
        proc.kill()
    await proc.wait()


class ShellRunner:
    """
    Runs commands on the local host, prefixed with sudo when required.

    The runner is stateless between calls. Sudo settings and the invoking
    identity are fixed at construction.

    Example:
        >>> runner = ShellRunner(SudoConfig(disabled=True))
        >>> output = await runner.run(["echo", "hello world"])
        >>> output.stdout
        'hello world\\n'
    """

    def __init__(
        self,
        config: SudoConfig | None = None,
        identity: Identity | None = None,
    ) -> None:
        """
        Initialize a runner.

        Args:
            config: Sudo settings. Defaults to sudo enabled, no password.
            identity: Invoking user. Looked up once if not given.
        """
        self.config = config or SudoConfig()
        self.identity = identity or Identity.current()

    def needs_sudo(self) -> bool:
        return self.config.required_for(self.identity)

    def generate_escaped_command(self, cmd: Command) -> str:
        """
        Escape a command and add the sudo prefix if required.

        Example:
            >>> ShellRunner(SudoConfig(), Identity("deploy")).generate_escaped_command("uname -a")
            'sudo  -- uname -a'
        """
        cmd_str = escape_command(cmd)
        if self.needs_sudo():
            return self.config.wrap(cmd_str)
        return cmd_str

    async def write_sudo_password(
        self,
        stdin: asyncio.StreamWriter,
        stderr: asyncio.StreamReader,
    ) -> bytes:
        """
        Write the password to stdin when sudo asks for it on stderr.

        Reads exactly ``len(SUDO_PROMPT)`` bytes from stderr. The prompt is
        assumed to be the very first thing written there.

        Returns:
            The bytes read from stderr that were not the prompt. They belong
            to the command's error output.
        """
        if not self.config.has_password:
            return b""

        prompt = SUDO_PROMPT.encode()
        try:
            read = await stderr.readexactly(len(prompt))
        except asyncio.IncompleteReadError as exc:
            return exc.partial
        if read != prompt:
            return read

        stdin.write(f"{self.config.password}\n".encode())
        await stdin.drain()
        return b""

    async def run(
        self,
        cmd: Command,
        *,
        timeout: float | None = None,
        **spawn_options: Any,
    ) -> ShellOutput:
        """
        Run a command, including sudo if required.

        Args:
            cmd: Escaped command string or list of unescaped arguments.
            timeout: Seconds before the child is killed. ``None`` waits forever.
            **spawn_options: Passed to ``asyncio.create_subprocess_shell``.

        Returns:
            ShellOutput with stdout, stderr and the exit status.

        Raises:
            ExecutionError: If the shell cannot be spawned or its pipes fail.
            CommandTimeout: If the command outlived ``timeout``.
        """
        cmd_escaped = self.generate_escaped_command(cmd)
        logger.debug("Running: %s", cmd_escaped)

        try:
            proc = await asyncio.create_subprocess_shell(
                cmd_escaped,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **spawn_options,
            )
        except OSError as e:
            raise ExecutionError(f"Failed to spawn shell: {e}") from e

        try:
            output = await asyncio.wait_for(self._communicate(proc), timeout=timeout)
        except TimeoutError:
            await _reap(proc)
            raise CommandTimeout(
                f"Command timed out after {timeout}s",
                exit_status=proc.returncode,
            ) from None
        except OSError as e:
            await _reap(proc)
            raise ExecutionError(
                f"Lost connection to shell: {e}",
                exit_status=proc.returncode,
            ) from e
        except BaseException:
            # Cancelled by the caller. Do not leave the child running.
            await _reap(proc)
            raise

        logger.debug("Exit status %d: %s", output.exit_status, cmd_escaped)
        return output

    async def _communicate(self, proc: asyncio.subprocess.Process) -> ShellOutput:
        assert proc.stdin is not None
        assert proc.stdout is not None
        assert proc.stderr is not None

        read = b""
        if self.needs_sudo():
            read = await self.write_sudo_password(proc.stdin, proc.stderr)
        proc.stdin.close()

        # Drain both pipes together so neither can fill up and stall the child.
        stderr, stdout = await asyncio.gather(proc.stderr.read(), proc.stdout.read())
        exit_status = await proc.wait()

        return ShellOutput(
            stdout=_decode(stdout),
            stderr=_decode(read + stderr),
            exit_status=exit_status,
        )
