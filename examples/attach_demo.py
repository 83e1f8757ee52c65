"""
Run a few commands inside a running container with lxc-attach.

Usage:
    python examples/attach_demo.py <container-id> [sudo-password]

Shows the three ways a command can end: a result (even when the command
fails), an AttachToolError when lxc-attach itself fails, and a failed result
with the container killed when anything else goes wrong.
"""

import asyncio
import logging
import sys

from lxcshell import AttachToolError, ExampleMetadata, create_attach_sandbox

COMMANDS = [
    "uname -a",
    ["ls", "-la", "/root/spa ce"],
    "cat /etc/os-release | head -2",
    "exit 3",
]


async def main(container_id: str, password: str | None) -> None:
    logging.basicConfig(level=logging.DEBUG)

    metadata = ExampleMetadata()
    sandbox = create_attach_sandbox(
        container_id,
        sudo={"sudo_password": password} if password else None,
        metadata=metadata,
        timeout=30.0,
    )

    async with sandbox:
        for command in COMMANDS:
            try:
                result = await sandbox.execute(command)
            except AttachToolError as e:
                print(f"lxc-attach failed, stopping: {e.stderr.strip()}")
                return

            print(f"$ {metadata.metadata['command']}")
            if result.success:
                print(result.stdout, end="")
            else:
                print(f"Error ({result.exit_status}):\n{result.stderr}")
            print("-" * 50)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))
