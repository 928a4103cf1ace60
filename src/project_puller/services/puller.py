"""
Clone-or-pull workflow for every repository listed in a manifest.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..errors import (
    GitCommandError,
    ManifestError,
    ProjectPullerError,
    RemoteURLError,
    RepositoryError,
)
from ..git import GitExecutor
from ..logger import get_logger
from ..manifest import SecurityInsights
from ..remotes import derive_fork_url, normalize_repo_url, repo_dir_name

log = get_logger(__name__)

UPSTREAM_REMOTE = "upstream"
ORIGIN_REMOTE = "origin"


@dataclass
class PullCallbacks:
    stage: Optional[Callable[[str, Path, str], None]] = None


@dataclass
class PullResult:
    name: str
    path: Path
    url: str
    action: str
    fork_url: Optional[str] = None


class ProjectPuller:
    """Clone or update a project's repositories, optionally wiring fork remotes."""

    def __init__(
        self,
        git: Optional[GitExecutor] = None,
        use_ssh: bool = False,
        username: Optional[str] = None,
    ) -> None:
        self.git = git or GitExecutor()
        self.use_ssh = use_ssh
        self.username = (username or "").strip() or None

    def resolve_output_dir(
        self, insights: SecurityInsights, output_dir: Optional[Path] = None
    ) -> Path:
        if output_dir is not None:
            return output_dir
        if insights.project is not None and insights.project.name:
            return Path(insights.project.name)
        return Path(".")

    def pull_project(
        self,
        insights: SecurityInsights,
        output_dir: Optional[Path] = None,
        callbacks: Optional[PullCallbacks] = None,
    ) -> List[PullResult]:
        """
        Clone or pull every repository of ``insights`` under ``output_dir``.

        Repositories are handled in manifest order and the first failure
        aborts the run with :class:`RepositoryError`.
        """
        if insights.project is None or not insights.repositories:
            raise ManifestError("security insights file has no project or repositories listed")

        target_dir = self.resolve_output_dir(insights, output_dir)
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProjectPullerError(
                f"failed to create target directory {target_dir}: {exc}"
            ) from exc
        log.info(
            "project_pull_started",
            project=insights.project.name,
            target=str(target_dir),
            repositories=len(insights.repositories),
        )

        used_names: set[str] = set()
        results: List[PullResult] = []
        for entry in insights.repositories:
            try:
                effective_url = normalize_repo_url(entry.url, self.use_ssh)
            except RemoteURLError as exc:
                raise RepositoryError(f"repo {entry.url}: {exc}", url=entry.url) from exc

            dir_name = repo_dir_name(entry.name, entry.url, used_names)
            used_names.add(dir_name)
            target_path = target_dir / dir_name

            try:
                result = self.clone_or_pull(target_path, effective_url, callbacks)
            except (GitCommandError, RemoteURLError) as exc:
                raise RepositoryError(
                    f"git failed for {dir_name}: {exc}",
                    url=entry.url,
                    directory=dir_name,
                ) from exc
            results.append(result)

        log.info("project_pull_completed", repositories=len(results))
        return results

    def clone_or_pull(
        self,
        target_path: Path,
        url: str,
        callbacks: Optional[PullCallbacks] = None,
    ) -> PullResult:
        cb = callbacks or PullCallbacks()
        name = target_path.name

        if self.git.is_repository(target_path):
            if cb.stage:
                cb.stage("pulling", target_path, url)
            log.info("repository_pulling", path=str(target_path))
            if self.username:
                fork_url = self.ensure_upstream_origin_remotes(target_path, url)
                self.git.pull(target_path, UPSTREAM_REMOTE)
                return PullResult(name, target_path, url, "pulled", fork_url)
            self.git.pull(target_path)
            return PullResult(name, target_path, url, "pulled")

        if self.username:
            if cb.stage:
                cb.stage("cloning_upstream", target_path, url)
            log.info("repository_cloning", url=url, path=str(target_path), origin=UPSTREAM_REMOTE)
            self.git.clone(url, target_path, origin=UPSTREAM_REMOTE)
            fork_url = derive_fork_url(url, self.username)
            self.git.add_remote(target_path, ORIGIN_REMOTE, fork_url)
            log.info("fork_remote_added", path=str(target_path), fork_url=fork_url)
            return PullResult(name, target_path, url, "cloned", fork_url)

        if cb.stage:
            cb.stage("cloning", target_path, url)
        log.info("repository_cloning", url=url, path=str(target_path))
        self.git.clone(url, target_path)
        return PullResult(name, target_path, url, "cloned")

    def ensure_upstream_origin_remotes(self, target_path: Path, url: str) -> Optional[str]:
        """
        Make ``upstream`` point at the project and ``origin`` at the fork.

        Working copies cloned without a username have the project as
        ``origin``; it is renamed to ``upstream`` before the fork is added.
        Returns the fork URL when a remote was added.
        """
        if self.username is None:
            return None
        has_upstream = self.git.remote_exists(target_path, UPSTREAM_REMOTE)
        has_origin = self.git.remote_exists(target_path, ORIGIN_REMOTE)

        if has_upstream == has_origin:
            # Both present is the steady state; neither means pull will report it.
            return None

        if has_origin:
            self.git.rename_remote(target_path, ORIGIN_REMOTE, UPSTREAM_REMOTE)
            log.info("origin_renamed_to_upstream", path=str(target_path))

        fork_url = derive_fork_url(url, self.username)
        self.git.add_remote(target_path, ORIGIN_REMOTE, fork_url)
        log.info("fork_remote_added", path=str(target_path), fork_url=fork_url)
        return fork_url
