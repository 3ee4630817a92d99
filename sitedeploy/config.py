"""Deploy configuration for SiteDeploy.

This module holds the immutable deploy target and the settings the Deployer is
constructed with. Defaults are the blog's production target; an optional
deploy.yaml in the project root can override individual values.

Key functions:
- load_settings: Build DeploySettings from defaults plus deploy.yaml.
- settings_from_mapping: Build DeploySettings from a plain dictionary.
"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

CONFIG_FILENAME = "deploy.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "bucket": "www.ivantanev.com",
    "distribution_id": "E9UOY3VP89NXH",
    "profile_env": "AWS_PROFILE",
    "tool": "aws",
    "tool_version_pattern": r"^aws-cli/1",
    "build_command": ["npm", "run", "build"],
    "output_dir": "public",
    "invalidation_paths": ["/*"],
}


@dataclass(frozen=True)
class DeployTarget:
    """Remote bucket and CDN distribution that receive the site.

    Attributes:
        bucket: S3 bucket name.
        distribution_id: CloudFront distribution identifier.
    """

    bucket: str = DEFAULT_CONFIG["bucket"]
    distribution_id: str = DEFAULT_CONFIG["distribution_id"]

    @property
    def bucket_uri(self) -> str:
        return f"s3://{self.bucket}"


@dataclass(frozen=True)
class DeploySettings:
    """Everything the Deployer needs for one run.

    Attributes:
        target: Bucket and distribution to deploy to.
        profile_env: Environment variable naming the deploying AWS profile.
        tool: Name of the object-storage CLI.
        tool_version_pattern: Regex the tool's ``--version`` output must match.
        build_command: Command that builds the static site.
        output_dir: Build output directory, relative to the project root.
        invalidation_paths: Path patterns to purge from the CDN.
    """

    target: DeployTarget = field(default_factory=DeployTarget)
    profile_env: str = DEFAULT_CONFIG["profile_env"]
    tool: str = DEFAULT_CONFIG["tool"]
    tool_version_pattern: str = DEFAULT_CONFIG["tool_version_pattern"]
    build_command: tuple[str, ...] = tuple(DEFAULT_CONFIG["build_command"])
    output_dir: str = DEFAULT_CONFIG["output_dir"]
    invalidation_paths: tuple[str, ...] = tuple(DEFAULT_CONFIG["invalidation_paths"])


def load_settings(project_root: Path) -> DeploySettings:
    """Load deploy settings from deploy.yaml, falling back to defaults.

    Args:
        project_root: Root directory of the blog project.

    Returns:
        DeploySettings with any overrides from deploy.yaml applied.

    Raises:
        ConfigurationError: If deploy.yaml is not valid YAML or not a mapping.
    """
    config_path = project_root / CONFIG_FILENAME
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Could not parse {CONFIG_FILENAME}: {exc}", exc
            ) from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{CONFIG_FILENAME} must contain a mapping")
        config.update(loaded)
    return settings_from_mapping(config)


def settings_from_mapping(config: dict[str, Any]) -> DeploySettings:
    """Convert a configuration mapping into DeploySettings.

    Unknown keys are rejected so typos don't silently deploy to the default target.

    Raises:
        ConfigurationError: If a key is unknown or a value has the wrong type.
    """
    unknown = sorted(set(config) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigurationError(
            f"Unknown {CONFIG_FILENAME} keys: {', '.join(unknown)}"
        )
    merged = {**DEFAULT_CONFIG, **config}

    pattern = _as_text(merged, "tool_version_pattern")
    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(
            f"tool_version_pattern is not a valid regular expression: {exc}", exc
        ) from exc

    return DeploySettings(
        target=DeployTarget(
            bucket=_as_text(merged, "bucket"),
            distribution_id=_as_text(merged, "distribution_id"),
        ),
        profile_env=_as_text(merged, "profile_env"),
        tool=_as_text(merged, "tool"),
        tool_version_pattern=pattern,
        build_command=_as_command(merged["build_command"]),
        output_dir=_as_text(merged, "output_dir"),
        invalidation_paths=_as_paths(merged["invalidation_paths"]),
    )


def _as_text(config: dict[str, Any], key: str) -> str:
    """Return a required string value, rejecting other types and blanks."""
    value = config[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{key} must be a non-empty string, got {value!r}")
    return value


def _as_command(value: Any) -> tuple[str, ...]:
    """Normalize a command given as a string or a list into argv form."""
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, (list, tuple)) and all(
        isinstance(part, (str, int, float)) for part in value
    ):
        parts = [str(part) for part in value]
    else:
        raise ConfigurationError(
            f"build_command must be a string or a list of arguments, got {value!r}"
        )
    if not parts:
        raise ConfigurationError("build_command must not be empty")
    return tuple(parts)


def _as_paths(value: Any) -> tuple[str, ...]:
    """Normalize invalidation paths given as a string or a list of strings."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(path, str) and path for path in value
    ):
        raise ConfigurationError(
            f"invalidation_paths must be a string or a list of strings, got {value!r}"
        )
    if not value:
        raise ConfigurationError("invalidation_paths must not be empty")
    return tuple(value)
