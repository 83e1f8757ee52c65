"""Pytest configuration and fixtures for lxcshell tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

from lxcshell import ExampleMetadata, ExecutionError, LxcAttachSandbox
from lxcshell._types import ShellOutput

# Fake sudo: records its arguments, prompts, then runs the command.
PROMPTING_SUDO = """#!/bin/sh
printf '%s\\n' "$@" > "$(dirname "$0")/sudo-args.txt"
while [ "$#" -gt 0 ]; do
    if [ "$1" = "--" ]; then shift; break; fi
    shift
done
printf 'Password: ' >&2
IFS= read -r password
printf 'password=%s\\n' "$password"
exec "$@"
"""

QUIET_SUDO = """#!/bin/sh
while [ "$#" -gt 0 ]; do
    if [ "$1" = "--" ]; then shift; break; fi
    shift
done
printf 'sudo-warning: lecture\\n' >&2
cat > "$(dirname "$0")/sudo-stdin.txt"
exec "$@"
"""

TERSE_SUDO = """#!/bin/sh
printf 'oops' >&2
exit 1
"""

# Fake lxc-attach: lxc-attach -n <id> -- sh -c <cmd>
LXC_ATTACH = """#!/bin/sh
[ "$1" = "-n" ] || exit 64
printf '%s' "$2" > "$(dirname "$0")/lxc-attach-id.txt"
shift 2
[ "$1" = "--" ] && shift
exec "$@"
"""

BROKEN_LXC_ATTACH = """#!/bin/sh
echo 'lxc-attach: failed to get the init pid' >&2
exit 1
"""


class FakeContainer:
    """Execution target that counts kills."""

    def __init__(self, container_id: str = "0beaf145b190") -> None:
        self._id = container_id
        self.kill_count = 0

    @property
    def id(self) -> str:
        return self._id

    async def kill(self) -> None:
        self.kill_count += 1


class UnkillableContainer(FakeContainer):
    """Execution target whose kill fails."""

    async def kill(self) -> None:
        raise ExecutionError("docker kill failed")


class StubRunner:
    """Runner returning a canned output, or raising a canned error."""

    def __init__(
        self,
        output: ShellOutput | None = None,
        error: Exception | None = None,
    ) -> None:
        self.output = output or ShellOutput(stdout="", stderr="", exit_status=0)
        self.error = error
        self.calls: list[tuple[Any, float | None, dict[str, Any]]] = []

    async def run(self, cmd: Any, *, timeout: float | None = None, **spawn_options: Any) -> ShellOutput:
        self.calls.append((cmd, timeout, spawn_options))
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory(prefix="lxcshell_test_") as tmp:
        yield Path(tmp)


@pytest.fixture
def bin_dir(temp_dir: Path) -> Path:
    """Directory for fake binaries. Contains a space to exercise quoting."""
    path = temp_dir / "fake bin"
    path.mkdir()
    return path


@pytest.fixture
def path_env(bin_dir: Path) -> dict[str, str]:
    """Environment with the fake binaries first on PATH."""
    env = dict(os.environ)
    env["PATH"] = f"{bin_dir}{os.pathsep}{env.get('PATH', '')}"
    return env


@pytest.fixture
def write_script(bin_dir: Path) -> Callable[[str, str], Path]:
    """Write an executable shell script into the fake binary directory."""

    def write(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text(body)
        path.chmod(0o755)
        return path

    return write


@pytest.fixture
def prompting_sudo(write_script: Callable[[str, str], Path]) -> Path:
    """Fake sudo that asks for a password and prints what it got."""
    return write_script("sudo", PROMPTING_SUDO)


@pytest.fixture
def quiet_sudo(write_script: Callable[[str, str], Path]) -> Path:
    """Fake sudo that warns on stderr instead of prompting."""
    return write_script("sudo", QUIET_SUDO)


@pytest.fixture
def terse_sudo(write_script: Callable[[str, str], Path]) -> Path:
    """Fake sudo that writes less than a prompt's worth of stderr and fails."""
    return write_script("sudo", TERSE_SUDO)


@pytest.fixture
def lxc_attach(write_script: Callable[[str, str], Path]) -> Path:
    """Fake lxc-attach that runs the command on the host."""
    return write_script("lxc-attach", LXC_ATTACH)


@pytest.fixture
def broken_lxc_attach(write_script: Callable[[str, str], Path]) -> Path:
    """Fake lxc-attach that cannot reach the container."""
    return write_script("lxc-attach", BROKEN_LXC_ATTACH)


@pytest.fixture
def container() -> FakeContainer:
    return FakeContainer()


@pytest.fixture
def unkillable_container() -> FakeContainer:
    return UnkillableContainer()


@pytest.fixture
def metadata() -> ExampleMetadata:
    return ExampleMetadata()


@pytest.fixture
def stub_sandbox(
    container: FakeContainer,
) -> Callable[..., tuple[LxcAttachSandbox, StubRunner]]:
    """
    Build an LxcAttachSandbox over a StubRunner.

    Defaults to the ``container`` fixture; pass ``target`` to use another.
    """

    def build(
        output: ShellOutput | None = None,
        error: Exception | None = None,
        metadata: ExampleMetadata | None = None,
        target: FakeContainer | None = None,
    ) -> tuple[LxcAttachSandbox, StubRunner]:
        runner = StubRunner(output, error)
        sandbox = LxcAttachSandbox(
            target or container,
            runner=runner,  # type: ignore[arg-type]
            metadata=metadata,
        )
        return sandbox, runner

    return build
