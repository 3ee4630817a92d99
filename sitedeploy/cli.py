"""Command-line interface for SiteDeploy.

A single command runs the full deploy from the current directory: validate
prerequisites, confirm, build, sync to S3 and invalidate CloudFront.
"""

from __future__ import annotations

from pathlib import Path

import click

from . import __version__
from .config import load_settings
from .errors import DeployCancelled, DeployError


@click.command()
@click.version_option(version=__version__, prog_name="site-deploy")
def cli():
    """Build the blog and publish it to S3 and CloudFront."""
    project_root = Path.cwd()
    from .orchestrator import Deployer

    try:
        settings = load_settings(project_root)
        Deployer(settings, project_root).run()
    except DeployCancelled:
        raise click.Abort() from None
    except DeployError as exc:
        _report_error(exc)
        raise SystemExit(1) from None
    click.echo(click.style("Successful deploy!", fg="green"))


def _report_error(exc: DeployError) -> None:
    """Print a colored error banner followed by the error detail."""
    click.echo(click.style("Error executing deploy:", fg="red", bold=True), err=True)
    click.echo(click.style(f"  {type(exc).__name__}: {exc.message}", fg="red"), err=True)
    if exc.original_error is not None:
        click.echo(f"  Caused by: {exc.original_error}", err=True)


def main():
    """Entry point for the CLI application."""
    cli()
