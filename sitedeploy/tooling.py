"""Executable discovery and version checks for SiteDeploy.

Functions:
    find_executable: Locate an executable in PATH or node_modules.
    version_matches: Check ``--version`` output against an accepted pattern.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path


def find_executable(name: str, project_root: Path | None = None) -> str | None:
    """Find an executable in PATH or local node_modules.

    The system PATH is searched first, then the project's node_modules/.bin
    directory when a project root is given, since build tools are often
    installed locally.

    Args:
        name: Name of the executable to find (e.g., 'aws', 'npm').
        project_root: Optional project root to search for local installs.

    Returns:
        Full path to the executable if found, None otherwise.

    Examples:
        >>> find_executable('aws')
        '/usr/local/bin/aws'
    """
    found = shutil.which(name)
    if found:
        return found

    if project_root is not None:
        local = project_root / "node_modules" / ".bin" / name
        if local.exists():
            return str(local)

    return None


def version_matches(output: str, pattern: str) -> bool:
    """Check whether any line of version output matches the accepted pattern.

    aws-cli 1.x prints its version on stderr with some Python builds, so callers
    pass stdout and stderr combined and each line is tested on its own.

    Args:
        output: Text printed by ``<tool> --version``.
        pattern: Regular expression anchored the way the caller wants.

    Returns:
        True if some line matches.

    Examples:
        >>> version_matches("aws-cli/1.29.0 Python/3.11.4", r"^aws-cli/1")
        True
        >>> version_matches("aws-cli/2.13.0 Python/3.11.4", r"^aws-cli/1")
        False
    """
    regex = re.compile(pattern)
    return any(regex.search(line.strip()) for line in output.splitlines())
