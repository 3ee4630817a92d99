"""Protocol definitions for SiteDeploy.

The Deployer talks to the outside world only through these interfaces, so
tests can swap in fakes for subprocesses, prompts and the CDN API.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .invalidation import InvalidationRequest
    from .shell import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for running external commands."""

    @abstractmethod
    def stream(self, cmd: Sequence[str], cwd: Path | None = None) -> int:
        """Run a command with its output forwarded live to the terminal.

        Args:
            cmd: Command and arguments.
            cwd: Working directory for the command.

        Returns:
            The process exit code.

        Raises:
            OSError: If the command cannot be launched.
        """
        ...

    @abstractmethod
    def capture(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Run a command and collect its output.

        Args:
            cmd: Command and arguments.
            cwd: Working directory for the command.
            env: Replacement environment; None inherits the parent's.

        Returns:
            CommandResult with exit code, stdout and stderr.

        Raises:
            OSError: If the command cannot be launched.
        """
        ...

    @abstractmethod
    def which(self, name: str) -> str | None:
        """Locate an executable, returning its path or None."""
        ...


@runtime_checkable
class Prompter(Protocol):
    """Protocol for asking the operator a yes/no question."""

    @abstractmethod
    def confirm(self, message: str, default: bool = True) -> bool | None:
        """Ask a confirmation question.

        Returns:
            True or False for an answer, None if the prompt was interrupted.
        """
        ...


@runtime_checkable
class InvalidationClient(Protocol):
    """Protocol for submitting CDN cache invalidations."""

    @abstractmethod
    def submit(self, request: InvalidationRequest) -> str:
        """Submit an invalidation request.

        Returns:
            The invalidation id assigned by the CDN.
        """
        ...
