from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from project_puller.errors import GitCommandError


class FakeGit:
    """In-memory stand-in for GitExecutor that records every call."""

    def __init__(self, quiet: bool = False, fail_on: Optional[Set[str]] = None) -> None:
        self.quiet = quiet
        self.fail_on = fail_on or set()
        self.calls: List[Tuple] = []
        self.remotes: Dict[Path, Dict[str, str]] = {}

    def is_repository(self, path: Path) -> bool:
        return (path / ".git").is_dir()

    def clone(self, url: str, path: Path, origin: Optional[str] = None) -> None:
        self.calls.append(("clone", url, path, origin))
        if url in self.fail_on:
            raise GitCommandError(["git", "clone", url, str(path)], 128)
        (path / ".git").mkdir(parents=True)
        self.remotes[path] = {origin or "origin": url}

    def pull(self, path: Path, remote: Optional[str] = None) -> None:
        self.calls.append(("pull", path, remote))

    def add_remote(self, path: Path, name: str, url: str) -> None:
        self.calls.append(("add_remote", path, name, url))
        self.remotes.setdefault(path, {})[name] = url

    def rename_remote(self, path: Path, old: str, new: str) -> None:
        self.calls.append(("rename_remote", path, old, new))
        remotes = self.remotes[path]
        remotes[new] = remotes.pop(old)

    def remote_exists(self, path: Path, name: str) -> bool:
        return name in self.remotes.get(path, {})
