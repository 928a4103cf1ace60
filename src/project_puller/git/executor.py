"""
Thin wrapper around the ``git`` command line.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..errors import GitCommandError
from ..logger import get_logger
from ..settings import settings

log = get_logger(__name__)


class GitExecutor:
    """Run git subcommands, streaming their output unless ``quiet`` is set."""

    def __init__(self, quiet: bool = False, executable: Optional[str] = None) -> None:
        self.quiet = quiet
        self.executable = executable or settings.git_executable

    def _run(self, args: Sequence[str], cwd: Optional[Path] = None) -> None:
        command = [self.executable, *args]
        output = subprocess.DEVNULL if self.quiet else None
        log.debug("git_command", command=command, cwd=str(cwd) if cwd else None)
        try:
            subprocess.run(command, cwd=cwd, check=True, stdout=output, stderr=output)
        except subprocess.CalledProcessError as exc:
            raise GitCommandError(command, exc.returncode) from exc
        except OSError as exc:
            raise GitCommandError(command, message=f"failed to run {self.executable}: {exc}") from exc

    @staticmethod
    def is_repository(path: Path) -> bool:
        return (path / ".git").is_dir()

    def clone(self, url: str, path: Path, origin: Optional[str] = None) -> None:
        """Clone ``url`` into ``path``, naming the remote ``origin`` unless overridden."""
        args = ["clone"]
        if origin:
            args.extend(["-o", origin])
        args.extend([url, str(path)])
        self._run(args)

    def pull(self, path: Path, remote: Optional[str] = None) -> None:
        args = ["pull"]
        if remote:
            args.append(remote)
        self._run(args, cwd=path)

    def add_remote(self, path: Path, name: str, url: str) -> None:
        self._run(["remote", "add", name, url], cwd=path)

    def rename_remote(self, path: Path, old: str, new: str) -> None:
        self._run(["remote", "rename", old, new], cwd=path)

    def remote_exists(self, path: Path, name: str) -> bool:
        """Return True when ``git remote get-url <name>`` succeeds."""
        try:
            completed = subprocess.run(
                [self.executable, "remote", "get-url", name],
                cwd=path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return False
        return completed.returncode == 0
