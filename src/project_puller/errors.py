"""
Exception hierarchy shared by the manifest loader, URL transforms, git
executor and puller service.
"""

from __future__ import annotations

from typing import Optional, Sequence


class ProjectPullerError(Exception):
    """Base class for every failure the tool reports to the user."""


class ManifestError(ProjectPullerError):
    """Raised when a security-insights manifest cannot be read or parsed."""


class RemoteURLError(ProjectPullerError, ValueError):
    """A repository remote URL could not be transformed."""

    def __init__(self, message: str, url: str) -> None:
        self.message = message
        self.url = url
        super().__init__(self.message)


class MalformedURLError(RemoteURLError):
    """The URL has a recognised shape but lacks an owner/repo path."""


class UnsupportedURLFormError(RemoteURLError):
    """The URL matches none of the SSH or HTTPS shapes."""


class EmptyUsernameError(RemoteURLError):
    """Fork derivation was requested with a blank username."""


class GitCommandError(ProjectPullerError):
    """Raised when a git subprocess exits non-zero or cannot be started."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        if message is None:
            message = f"`{' '.join(self.command)}` exited with status {returncode}"
        self.message = message
        super().__init__(self.message)


class RepositoryError(ProjectPullerError):
    """Wraps the first failure hit while processing a manifest entry."""

    def __init__(self, message: str, url: str, directory: Optional[str] = None) -> None:
        self.message = message
        self.url = url
        self.directory = directory
        super().__init__(self.message)
