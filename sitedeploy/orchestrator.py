"""Deploy orchestration for SiteDeploy.

The Deployer runs a fixed, strictly sequential workflow:

1. validate: environment variable, CLI tool and version, bucket access.
2. confirm: ask the operator before anything is changed.
3. build: run the static-site build with live output.
4. sync: upload the build output to the bucket with live output.
5. invalidate: purge every path from the CDN.

The first failure aborts the run. Nothing is retried or rolled back; a failed
invalidation leaves the freshly synced content live behind stale edge caches.

Key classes:
- DeployState: States of the workflow.
- Deployer: Runs the workflow against injected collaborators.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Callable, Mapping
from pathlib import Path

import click

from .config import DeploySettings
from .errors import (
    AccessError,
    BuildError,
    ConfigurationError,
    DeployCancelled,
    InvalidationError,
    SyncError,
    ToolingError,
)
from .invalidation import CloudFrontInvalidator, InvalidationRequest
from .protocols import CommandRunner, InvalidationClient, Prompter
from .shell import SubprocessRunner
from .tooling import version_matches


class DeployState(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    CONFIRMING = "confirming"
    BUILDING = "building"
    SYNCING = "syncing"
    INVALIDATING = "invalidating"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (DeployState.DONE, DeployState.FAILED, DeployState.CANCELLED)


class Deployer:
    """Sequential deploy workflow for one target.

    Args:
        settings: Immutable deploy settings.
        project_root: Directory the build runs in and output_dir is relative to.
        runner: Runs external commands. Defaults to SubprocessRunner.
        prompter: Asks for confirmation. Defaults to a questionary prompt.
        invalidator: Submits CDN invalidations. Defaults to CloudFront via boto3,
            authenticated with the profile named by the environment.
        environ: Environment to read the profile variable from.
        echo: Progress output function.
        on_state: Called with each new DeployState.
    """

    def __init__(
        self,
        settings: DeploySettings,
        project_root: Path,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        invalidator: InvalidationClient | None = None,
        environ: Mapping[str, str] | None = None,
        echo: Callable[[str], None] = click.echo,
        on_state: Callable[[DeployState], None] | None = None,
    ):
        self.settings = settings
        self.project_root = project_root
        self.runner = runner or SubprocessRunner(project_root)
        self.prompter = prompter
        self.invalidator = invalidator
        self.environ = os.environ if environ is None else environ
        self.echo = echo
        self.on_state = on_state
        self.state = DeployState.IDLE
        self.history: list[DeployState] = [DeployState.IDLE]
        self.invalidation_id: str | None = None
        self._tool_path: str | None = None

    def run(self) -> DeployState:
        """Run the whole workflow.

        Returns:
            DeployState.DONE on success.

        Raises:
            DeployError: The first step failure, after moving to FAILED.
            DeployCancelled: If the operator declined, after moving to CANCELLED.
            Exception: Anything else, including KeyboardInterrupt, after moving to FAILED.
        """
        steps = (
            (DeployState.VALIDATING, self.validate),
            (DeployState.CONFIRMING, self.confirm),
            (DeployState.BUILDING, self.build),
            (DeployState.SYNCING, self.sync),
            (DeployState.INVALIDATING, self.invalidate),
        )
        try:
            for state, step in steps:
                self._enter(state)
                step()
        except DeployCancelled:
            self._enter(DeployState.CANCELLED)
            raise
        except BaseException:
            # Step errors and interrupts alike leave the run FAILED.
            self._enter(DeployState.FAILED)
            raise
        self._enter(DeployState.DONE)
        return self.state

    def validate(self) -> None:
        """Check every prerequisite without touching anything."""
        self._require_profile()
        self._require_tool()
        self._ensure_bucket_access()

    def confirm(self) -> None:
        """Ask the operator to confirm the deploy target."""
        bucket = self.settings.target.bucket
        message = (
            f"You are about to deploy to {bucket}.\n"
            "Press [enter] to continue or [ctrl-c] to cancel"
        )
        answer = self._prompter().confirm(message, default=True)
        if not answer:
            raise DeployCancelled(f"Deploy to {bucket} cancelled")

    def build(self) -> None:
        """Run the static-site build, streaming its output."""
        self.echo("Starting build...")
        cmd = list(self.settings.build_command)
        try:
            code = self.runner.stream(cmd, cwd=self.project_root)
        except OSError as exc:
            raise BuildError(f"Could not run build command {cmd[0]!r}: {exc}", exc) from exc
        if code != 0:
            raise BuildError(f"Build command {' '.join(cmd)!r} exited with status {code}")
        self.echo(click.style("Build complete.", fg="green"))

    def sync(self) -> None:
        """Upload the build output to the bucket, streaming the tool's output."""
        self.echo("Starting S3 sync...")
        output_dir = self.project_root / self.settings.output_dir
        if not output_dir.is_dir():
            raise SyncError(f"Build output directory not found: {output_dir}")
        cmd = [
            self._tool(),
            "s3",
            "sync",
            f"{self.settings.output_dir.rstrip('/')}/",
            self.settings.target.bucket_uri,
        ]
        try:
            code = self.runner.stream(cmd, cwd=self.project_root)
        except OSError as exc:
            raise SyncError(f"Could not run {self.settings.tool}: {exc}", exc) from exc
        if code != 0:
            raise SyncError(
                f"Sync to {self.settings.target.bucket_uri} exited with status {code}"
            )
        self.echo(click.style("Sync complete.", fg="green"))

    def invalidate(self) -> None:
        """Purge the configured paths from the CDN."""
        self.echo("Triggering CloudFront cache invalidation.")
        request = InvalidationRequest.create(
            self.settings.target.distribution_id, self.settings.invalidation_paths
        )
        try:
            self.invalidation_id = self._invalidator().submit(request)
        except InvalidationError:
            raise
        except Exception as exc:
            raise InvalidationError(
                f"CloudFront invalidation failed for {request.distribution_id}: {exc}",
                exc,
            ) from exc

    def _enter(self, state: DeployState) -> None:
        self.state = state
        self.history.append(state)
        if self.on_state is not None:
            self.on_state(state)

    def _require_profile(self) -> None:
        name = self.settings.profile_env
        if not self.environ.get(name):
            raise ConfigurationError(f"You must set the {name} environment variable!")

    def _require_tool(self) -> None:
        tool = self.settings.tool
        path = self.runner.which(tool)
        if not path:
            raise ToolingError(f'Command "{tool}" is not available')
        # Probe with a minimal environment so profile variables can't affect it.
        env = {"PATH": self.environ.get("PATH", os.defpath)}
        try:
            result = self.runner.capture([path, "--version"], env=env)
        except OSError as exc:
            raise ToolingError(f'Command "{tool}" could not be run: {exc}', exc) from exc
        if not result.ok:
            raise ToolingError(
                f'"{tool} --version" exited with status {result.returncode}: {result.output}'
            )
        if not version_matches(result.output, self.settings.tool_version_pattern):
            raise ToolingError(
                f"The deploy script requires {tool} matching "
                f"{self.settings.tool_version_pattern!r}. "
                f"You have an incompatible version installed: {result.output}"
            )
        self._tool_path = path

    def _ensure_bucket_access(self) -> None:
        self.echo("Checking for AWS access...")
        if self._can_access_bucket():
            self.echo(click.style("We have AWS access.", fg="green"))
        else:
            self.echo(click.style("No AWS access.", fg="red"))
            raise AccessError(f"No access to {self.settings.target.bucket_uri}")

    def _can_access_bucket(self) -> bool:
        try:
            result = self.runner.capture(
                [self._tool(), "s3", "ls", self.settings.target.bucket_uri]
            )
        except OSError:
            return False
        return result.ok

    def _tool(self) -> str:
        return self._tool_path or self.settings.tool

    def _prompter(self) -> Prompter:
        if self.prompter is None:
            from .prompts import QuestionaryPrompter

            self.prompter = QuestionaryPrompter()
        return self.prompter

    def _invalidator(self) -> InvalidationClient:
        if self.invalidator is None:
            profile = self.environ.get(self.settings.profile_env) or None
            self.invalidator = CloudFrontInvalidator(profile_name=profile)
        return self.invalidator
