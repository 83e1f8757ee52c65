"""
Privilege escalation through sudo.

Builds the ``sudo`` prefix for a command and decides whether it is needed at
all. Configuration is an explicit value passed to the runner; nothing here
reads global state.
"""

from __future__ import annotations

import getpass
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from lxcshell.errors import ConfigurationError

SUDO_PROMPT = "Password: "
"""Prompt passed to ``sudo -p`` and expected back on stderr."""

PRIVILEGED_LOGIN = "root"

Command = str | Sequence[str]
"""A pre-escaped shell string, or a list of unescaped arguments."""


def escape_command(cmd: Command) -> str:
    """
    Escape a shell command.

    Strings are assumed to be escaped already and are returned unchanged.
    Argument lists are quoted one token at a time and joined with spaces.

    Example:
        >>> escape_command(["sudo", "-p", "Password: "])
        "sudo -p 'Password: '"
        >>> escape_command("uname -a")
        'uname -a'
    """
    if isinstance(cmd, str):
        return cmd
    return shlex.join(cmd)


@dataclass(frozen=True)
class Identity:
    """The local user commands are launched as."""

    login: str

    @property
    def is_privileged(self) -> bool:
        return self.login == PRIVILEGED_LOGIN

    @classmethod
    def current(cls) -> Identity:
        """Look up the login name of the invoking user."""
        return cls(getpass.getuser())


@dataclass
class SudoConfig:
    """
    Sudo settings.

    Attributes:
        disabled: Never use sudo, whoever the invoking user is.
        options: Extra sudo arguments, as an escaped string or a token list.
        path: Directory holding the sudo binary. Defaults to a PATH lookup.
        password: Password to answer the sudo prompt with.
    """

    disabled: bool = False
    options: str | Sequence[str] | None = None
    path: str | None = None
    password: str | None = None

    def __post_init__(self) -> None:
        if self.options is not None and not isinstance(self.options, (str, Sequence)):
            raise ConfigurationError(
                f"sudo options must be a string or a list, got {type(self.options).__name__}"
            )
        for name in ("path", "password"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"sudo {name} must be a string")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> SudoConfig:
        """
        Build a config from the flat option names used by server test tools.

        Recognised keys are ``disable_sudo``, ``sudo_options``, ``sudo_path``
        and ``sudo_password``. Unknown keys are ignored.
        """
        return cls(
            disabled=bool(options.get("disable_sudo", False)),
            options=options.get("sudo_options"),
            path=options.get("sudo_path"),
            password=options.get("sudo_password"),
        )

    @property
    def has_password(self) -> bool:
        return self.password is not None

    def required_for(self, identity: Identity) -> bool:
        """Whether commands run by ``identity`` need the sudo prefix."""
        return not self.disabled and not identity.is_privileged

    def default_args(self) -> str:
        """Arguments always passed to sudo, escaped."""
        args: list[str] = []
        if self.has_password:
            args += ["-S", "-p", SUDO_PROMPT]
        return shlex.join(args)

    def args(self) -> str:
        """Default arguments followed by the configured ones, escaped."""
        if self.options is None:
            return self.default_args()
        return f"{self.default_args()} {escape_command(self.options)}"

    def binary(self) -> str:
        """The sudo binary, quoted as a single token."""
        sudo_bin = f"{self.path}/sudo" if self.path else "sudo"
        return shlex.quote(sudo_bin)

    def wrap(self, cmd_str: str) -> str:
        """
        Prefix an escaped command with sudo.

        Example:
            >>> SudoConfig(password="secret").wrap("uname -a")
            "sudo -S -p 'Password: ' -- uname -a"
        """
        return f"{self.binary()} {self.args()} -- {cmd_str}"
