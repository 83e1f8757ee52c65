"""
Main entry point: create_attach_sandbox factory function.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from lxcshell.containers import DockerContainer
from lxcshell.privilege import Identity, SudoConfig
from lxcshell.sandbox.lxc import LxcAttachSandbox

if TYPE_CHECKING:
    from lxcshell._types import ExecutionTarget, MetadataSink


def create_attach_sandbox(
    container: ExecutionTarget | str,
    *,
    sudo: SudoConfig | Mapping[str, Any] | None = None,
    identity: Identity | str | None = None,
    metadata: MetadataSink | None = None,
    timeout: float | None = None,
) -> LxcAttachSandbox:
    """
    Create a sandbox running commands in a container through lxc-attach.

    Args:
        container: Container handle, or the id of a Docker container.
        sudo: Sudo settings, or a mapping using the ``disable_sudo``,
              ``sudo_options``, ``sudo_path`` and ``sudo_password`` keys.
              Defaults to sudo without a password.
        identity: Invoking user, or their login name. Looked up if omitted.
        metadata: Sink receiving every command and its output.
        timeout: Default per-command deadline in seconds.

    Returns:
        An LxcAttachSandbox bound to the container.

    Example:
        >>> sandbox = create_attach_sandbox(
        ...     "0beaf145b190",
        ...     sudo={"sudo_password": "s3cret"},
        ... )
        >>> result = await sandbox.execute(["ls", "-la", "/root/spa ce"])
    """
    # Resolve sudo settings
    config: SudoConfig
    if sudo is None:
        config = SudoConfig()
    elif isinstance(sudo, SudoConfig):
        config = sudo
    else:
        config = SudoConfig.from_options(sudo)

    if isinstance(identity, str):
        identity = Identity(identity)

    target: ExecutionTarget
    if isinstance(container, str):
        target = DockerContainer(container)
    else:
        target = container

    return LxcAttachSandbox(
        target,
        config=config,
        identity=identity,
        metadata=metadata,
        timeout=timeout,
    )
