"""
Exception hierarchy for lxcshell.
"""

from __future__ import annotations


class LxcShellError(Exception):
    """Base class for all lxcshell errors."""

    pass


class ConfigurationError(LxcShellError):
    """Raised when privilege options are malformed."""

    pass


class DependencyError(LxcShellError):
    """Raised when a required executable is not available."""

    pass


class ExecutionError(LxcShellError):
    """
    Raised when spawning or talking to the child process fails.

    ShellRunner only sets ``exit_status``: reads still in flight are
    abandoned, so it has no output to report. Other runners may fill in
    ``stdout`` and ``stderr``, and LxcAttachSandbox reports them when set.

    Attributes:
        stdout: Output supplied by the raiser, or None.
        stderr: Error output supplied by the raiser, or None.
        exit_status: Exit status reported by the child, if it was reaped.
    """

    def __init__(
        self,
        message: str,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
        exit_status: int | None = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.exit_status = exit_status
        super().__init__(message)


class CommandTimeout(ExecutionError):
    """Raised when the child outlives its deadline. The child is already killed."""

    pass


class AttachToolError(LxcShellError):
    """
    Raised when lxc-attach (or sudo wrapping it) fails, as opposed to the
    command run inside the container.

    Attributes:
        stderr: The raw error output of the attach tool.
    """

    def __init__(self, stderr: str) -> None:
        self.stderr = stderr
        super().__init__(stderr)


class CommandError(LxcShellError):
    """Raised when a command exits with non-zero status."""

    pass
