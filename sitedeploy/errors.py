"""Error taxonomy for the deploy workflow.

Every workflow step raises its own subclass of DeployError. Errors are
propagated unmodified to the CLI, which prints them and exits non-zero.
"""

from __future__ import annotations


class DeployError(Exception):
    """Base class for deploy failures.

    Attributes:
        message: Human-readable error message.
        original_error: The underlying exception, if any.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class ConfigurationError(DeployError):
    """Required configuration or environment is missing or malformed."""


class ToolingError(DeployError):
    """An external CLI tool is missing or has an unsupported version."""


class AccessError(DeployError):
    """The target bucket cannot be listed with the current credentials."""


class BuildError(DeployError):
    """The static-site build exited non-zero."""


class SyncError(DeployError):
    """Uploading the build output to the bucket failed."""


class InvalidationError(DeployError):
    """The CDN rejected or failed the cache invalidation request."""


class DeployCancelled(Exception):
    """The operator declined the confirmation prompt."""
