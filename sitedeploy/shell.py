"""Subprocess execution for SiteDeploy.

Commands either stream their output straight to the terminal (build, sync)
or have it captured for inspection (version and access probes).
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .tooling import find_executable


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a captured command.

    Attributes:
        returncode: Process exit code.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Stdout and stderr joined, stripped of surrounding whitespace."""
        return "\n".join(
            part.strip() for part in (self.stdout, self.stderr) if part.strip()
        )


class SubprocessRunner:
    """CommandRunner backed by ``subprocess.run``.

    Args:
        project_root: Optional project root, used to find executables
            installed into node_modules/.bin.
    """

    def __init__(self, project_root: Path | None = None):
        self.project_root = project_root

    def stream(self, cmd: Sequence[str], cwd: Path | None = None) -> int:
        # Inherit stdout/stderr so the child writes directly to our terminal.
        result = subprocess.run(list(cmd), cwd=cwd)
        return result.returncode

    def capture(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
        )
        return CommandResult(result.returncode, result.stdout or "", result.stderr or "")

    def which(self, name: str) -> str | None:
        return find_executable(name, self.project_root)
