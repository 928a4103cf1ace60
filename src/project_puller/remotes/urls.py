"""
Conversions between the SSH and HTTPS forms of repository remote URLs.

Three shapes are recognised:

* HTTPS: ``https://<host>/<owner>/<repo>[.git]`` (``http://`` too)
* SSH shorthand: ``git@<host>:<owner>/<repo>[.git]``
* generic SSH: ``<host>:<owner>/<repo>[.git]``

``to_ssh`` and ``to_https`` normalise the ``.git`` suffix for the target
form (SSH always carries it, HTTPS never does). ``derive_fork_url`` keeps
the suffix state of its input on every branch except GitHub SSH, where the
suffix is always present. Downstream remote comparisons rely on both rules.
"""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit, urlunsplit

from ..errors import EmptyUsernameError, MalformedURLError, UnsupportedURLFormError

GITHUB_HOST = "github.com"
GIT_SUFFIX = ".git"

_HTTP_PREFIXES = ("https://", "http://")
_GITHUB_HTTP_PREFIXES = tuple(f"{prefix}{GITHUB_HOST}/" for prefix in _HTTP_PREFIXES)
_SSH_USER_PREFIX = "git@"
_GITHUB_SSH_PREFIX = f"{_SSH_USER_PREFIX}{GITHUB_HOST}:"


def is_http_url(url: str) -> bool:
    return url.startswith(_HTTP_PREFIXES)


def _is_github_http_url(url: str) -> bool:
    return url.startswith(_GITHUB_HTTP_PREFIXES)


def _split_host_path(url: str) -> tuple[str, str] | None:
    """Split ``host:path`` when the first colon comes before any slash."""
    idx = url.find(":")
    if idx > 0 and "/" not in url[:idx]:
        return url[:idx], url[idx + 1 :]
    return None


def _parse_http(url: str) -> SplitResult:
    try:
        return urlsplit(url)
    except ValueError as exc:
        raise MalformedURLError(f"invalid URL: {exc}", url) from exc


def _owner_repo_path(parts: SplitResult, url: str, label: str) -> str:
    path = parts.path.strip("/").removesuffix(GIT_SUFFIX)
    if not path or "/" not in path:
        raise MalformedURLError(f"{label} has no owner/repo path: {url}", url)
    return path


def _host(parts: SplitResult) -> str:
    # Drop any userinfo so only host[:port] ends up after ``git@``.
    return parts.netloc.rpartition("@")[2]


def to_ssh(url: str) -> str:
    """
    Return ``url`` in SSH form.

    SSH URLs are returned unchanged. HTTPS URLs become
    ``git@<host>:<owner>/<repo>.git``; the ``.git`` suffix is always added.
    """
    url = url.strip()
    if url.startswith(_SSH_USER_PREFIX):
        return url
    if _split_host_path(url) is not None and not url.startswith("http"):
        return url

    if _is_github_http_url(url):
        path = _owner_repo_path(_parse_http(url), url, "GitHub URL")
        return f"{_GITHUB_SSH_PREFIX}{path}{GIT_SUFFIX}"

    if is_http_url(url):
        parts = _parse_http(url)
        path = _owner_repo_path(parts, url, "URL")
        return f"{_SSH_USER_PREFIX}{_host(parts)}:{path}{GIT_SUFFIX}"

    raise UnsupportedURLFormError(f"cannot convert to SSH: {url}", url)


def to_https(url: str) -> str:
    """
    Return ``url`` in HTTPS form.

    HTTP(S) URLs are returned unchanged. SSH URLs become
    ``https://<host>/<path>`` with any trailing ``.git`` removed.
    """
    url = url.strip()
    if is_http_url(url):
        return url

    if url.startswith(_GITHUB_SSH_PREFIX):
        path = url.removeprefix(_GITHUB_SSH_PREFIX).removesuffix(GIT_SUFFIX)
        if not path or "/" not in path:
            raise MalformedURLError(f"GitHub SSH URL has no owner/repo path: {url}", url)
        return f"https://{GITHUB_HOST}/{path}"

    if url.startswith(_SSH_USER_PREFIX):
        rest = url[len(_SSH_USER_PREFIX) :]
        idx = rest.find(":")
        if idx <= 0:
            raise MalformedURLError(f"SSH URL has no host:path: {url}", url)
        host, path = rest[:idx], rest[idx + 1 :]
        return f"https://{host}/{path.removesuffix(GIT_SUFFIX)}"

    host_path = _split_host_path(url)
    if host_path is not None:
        host, path = host_path
        return f"https://{host}/{path.removesuffix(GIT_SUFFIX)}"

    raise UnsupportedURLFormError(f"cannot convert to HTTPS: {url}", url)


def normalize_repo_url(url: str, use_ssh: bool) -> str:
    """Return the repository URL in SSH or HTTPS form depending on ``use_ssh``."""
    if use_ssh:
        return to_ssh(url)
    return to_https(url)


def derive_fork_url(upstream_url: str, username: str) -> str:
    """
    Return the URL of ``username``'s fork of ``upstream_url``.

    The owner segment is replaced by ``username``; host, repository name and
    URL form are kept.
    """
    url = upstream_url.strip()
    username = username.strip()
    if not username:
        raise EmptyUsernameError("username is empty", url)

    if _is_github_http_url(url):
        parts = _parse_http(url)
        path = parts.path.removeprefix("/").removesuffix(GIT_SUFFIX)
        segments = path.split("/", 1)
        if len(segments) < 2:
            raise MalformedURLError(f"GitHub URL has no owner/repo path: {url}", url)
        fork_path = f"/{username}/{segments[1]}"
        if url.endswith(GIT_SUFFIX):
            fork_path += GIT_SUFFIX
        return urlunsplit(parts._replace(path=fork_path))

    if url.startswith(_GITHUB_SSH_PREFIX):
        segments = url.removeprefix(_GITHUB_SSH_PREFIX).split("/", 1)
        if len(segments) < 2:
            raise MalformedURLError(f"GitHub SSH URL has no owner/repo path: {url}", url)
        repo = segments[1].removesuffix(GIT_SUFFIX)
        return f"{_GITHUB_SSH_PREFIX}{username}/{repo}{GIT_SUFFIX}"

    if is_http_url(url):
        parts = _parse_http(url)
        segments = parts.path.strip("/").split("/", 1)
        if len(segments) < 2:
            raise MalformedURLError(f"URL has no owner/repo path: {url}", url)
        return urlunsplit(parts._replace(path=f"/{username}/{segments[1]}"))

    host_path = _split_host_path(url)
    if host_path is not None:
        host, rest = host_path
        segments = rest.split("/", 1)
        if len(segments) < 2:
            raise MalformedURLError(f"SSH URL has no owner/repo path: {url}", url)
        return f"{host}:{username}/{segments[1]}"

    raise UnsupportedURLFormError(f"cannot derive fork URL from: {url}", url)
