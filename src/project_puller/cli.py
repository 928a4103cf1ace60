"""
Command line interface for project-puller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from .errors import ManifestError, ProjectPullerError
from .git import GitExecutor
from .logger import configure_logging, get_logger
from .manifest import (
    SecurityInsights,
    load_security_insights,
    load_security_insights_from_github,
    parse_github_reference,
)
from .remotes import derive_directory_names, derive_fork_url, normalize_repo_url
from .services import ProjectPuller, PullCallbacks
from .settings import settings
from .version import get_version

app = typer.Typer(
    name="project-puller",
    help="Clone or pull repositories listed in a security-insights file.",
)
configure_logging()
log = get_logger(__name__)
console = Console()

_STAGE_LABELS = {
    "pulling": "Pulling {path}",
    "cloning": "Cloning {url} -> {path}",
    "cloning_upstream": "Cloning {url} -> {path} (upstream)",
}


def _source_argument():
    return typer.Argument(None, help="Path or HTTP(S) URL of a security-insights file.")


def _source_option():
    return typer.Option(
        None, "--source", "-s", help="Path to security-insights file or HTTP(S) URL."
    )


def _github_option():
    return typer.Option(
        None,
        "--github",
        "-g",
        help="Load from GitHub as owner/repo[/path] (e.g. org/repo or org/repo/dir/security-insights.yml).",
    )


def _username_option():
    return typer.Option(
        None,
        "--username",
        "-u",
        help="Fork username; clone with remote upstream and add your fork as origin.",
    )


def _ssh_option():
    return typer.Option(
        None,
        "--ssh/--https",
        help="Use SSH or HTTPS URLs for clone and remotes (default: configured value, else HTTPS).",
        show_default=False,
    )


def _resolve_flag(value: Optional[bool], configured: bool) -> bool:
    return configured if value is None else value


def _load_insights(
    source: Optional[str], source_option: Optional[str], github: Optional[str]
) -> SecurityInsights:
    if github:
        try:
            owner, repo, path = parse_github_reference(github)
        except ManifestError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=2)
        return load_security_insights_from_github(owner, repo, path)

    src = source or source_option
    if not src:
        typer.echo(
            "[ERROR] Provide a file path, URL, or use --github owner/repo.", err=True
        )
        raise typer.Exit(code=2)
    return load_security_insights(src)


def _fail(exc: ProjectPullerError) -> NoReturn:
    log.error("run_failed", error=str(exc))
    typer.echo(f"[ERROR] {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def pull(
    source: Optional[str] = _source_argument(),
    source_option: Optional[str] = _source_option(),
    github: Optional[str] = _github_option(),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Target directory for cloned repositories."
    ),
    username: Optional[str] = _username_option(),
    ssh: Optional[bool] = _ssh_option(),
    quiet: Optional[bool] = typer.Option(
        None, "--quiet/--no-quiet", "-q", help="Suppress git output.", show_default=False
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log", help="Write detailed logs to the given file."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print debug logs to stderr."
    ),
) -> None:
    """Clone or pull every repository listed in a security-insights file."""
    if verbose or log_file:
        configure_logging(
            level=logging.DEBUG if verbose else logging.INFO,
            console=verbose,
            log_file=log_file,
        )

    def on_stage(stage: str, path: Path, url: str) -> None:
        typer.echo(_STAGE_LABELS[stage].format(path=path, url=url), err=True)

    puller = ProjectPuller(
        git=GitExecutor(quiet=_resolve_flag(quiet, settings.quiet)),
        use_ssh=_resolve_flag(ssh, settings.use_ssh),
        username=username or settings.username,
    )
    try:
        insights = _load_insights(source, source_option, github)
        results = puller.pull_project(
            insights,
            output_dir=output or settings.output_dir,
            callbacks=PullCallbacks(stage=on_stage),
        )
    except ProjectPullerError as exc:
        _fail(exc)

    table = Table(title="Repositories")
    table.add_column("Directory")
    table.add_column("Action")
    table.add_column("Remote")
    table.add_column("Fork")
    for result in results:
        table.add_row(str(result.path), result.action, result.url, result.fork_url or "")
    console.print(table)


@app.command("list")
def list_repos(
    source: Optional[str] = _source_argument(),
    source_option: Optional[str] = _source_option(),
    github: Optional[str] = _github_option(),
    username: Optional[str] = _username_option(),
    ssh: Optional[bool] = _ssh_option(),
) -> None:
    """Show the directory and remotes each repository would get, without running git."""
    use_ssh = _resolve_flag(ssh, settings.use_ssh)
    fork_owner = (username or settings.username or "").strip()
    try:
        insights = _load_insights(source, source_option, github)
        entries = insights.repositories
        if not entries:
            raise ManifestError("security insights file has no project or repositories listed")
        names = derive_directory_names((entry.name, entry.url) for entry in entries)
        for entry, dir_name in zip(entries, names):
            url = normalize_repo_url(entry.url, use_ssh)
            line = f"- {dir_name}: {url}"
            if fork_owner:
                line += f" (fork: {derive_fork_url(url, fork_owner)})"
            typer.echo(line)
    except ProjectPullerError as exc:
        _fail(exc)


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(get_version())


if __name__ == "__main__":  # pragma: no cover
    app()
