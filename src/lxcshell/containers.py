"""
Container handles usable as execution targets.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass

from lxcshell.errors import DependencyError, ExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DockerContainer:
    """
    A running Docker container, referenced by id.

    The container's lifecycle is managed elsewhere. This handle only knows
    how to kill it.
    """

    id: str
    docker: str = "docker"

    async def kill(self) -> None:
        """Kill the container with ``docker kill``."""
        docker_bin = shutil.which(self.docker)
        if docker_bin is None:
            raise DependencyError(f"Docker executable not found: {self.docker}")

        proc = await asyncio.create_subprocess_exec(
            docker_bin,
            "kill",
            self.id,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise ExecutionError(
                f"docker kill {self.id} failed: {stderr.decode(errors='replace').strip()}",
                exit_status=proc.returncode,
            )
        logger.info("Killed container %s", self.id)
