"""
lxcshell - run commands inside containers through lxc-attach, with sudo.
"""

from lxcshell._types import CommandResult, ExampleMetadata, ExecutionTarget, MetadataSink
from lxcshell.api import create_attach_sandbox
from lxcshell.containers import DockerContainer
from lxcshell.errors import (
    AttachToolError,
    CommandError,
    CommandTimeout,
    ConfigurationError,
    DependencyError,
    ExecutionError,
    LxcShellError,
)
from lxcshell.privilege import Identity, SudoConfig, escape_command
from lxcshell.sandbox import LxcAttachSandbox, Sandbox, ShellRunner

__version__ = "0.1.0"

__all__ = [
    "create_attach_sandbox",
    "Sandbox",
    "LxcAttachSandbox",
    "ShellRunner",
    "DockerContainer",
    "CommandResult",
    "ExampleMetadata",
    "ExecutionTarget",
    "MetadataSink",
    "Identity",
    "SudoConfig",
    "escape_command",
    "LxcShellError",
    "AttachToolError",
    "CommandError",
    "CommandTimeout",
    "ConfigurationError",
    "DependencyError",
    "ExecutionError",
]
