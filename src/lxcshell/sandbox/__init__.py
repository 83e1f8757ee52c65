"""
Sandbox backends.
"""

from lxcshell.sandbox._base import Sandbox
from lxcshell.sandbox.lxc import LxcAttachSandbox
from lxcshell.sandbox.shell import ShellRunner

__all__ = [
    "Sandbox",
    "LxcAttachSandbox",
    "ShellRunner",
]
