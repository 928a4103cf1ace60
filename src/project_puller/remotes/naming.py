"""
Directory names for cloned repositories.

Names are derived in manifest order against the set of names already handed
out during the same run, so the first entry wins an unsuffixed name and later
collisions get ``-1``, ``-2`` and so on.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Tuple

from .urls import GIT_SUFFIX

_FORBIDDEN_CHARS = frozenset("/\\\0")
FALLBACK_DIR_NAME = "repository"


def sanitize_dir_name(name: str) -> str:
    """Remove path separators and NUL characters from a display name."""
    return "".join(ch for ch in name if ch not in _FORBIDDEN_CHARS)


def _is_usable(name: str) -> bool:
    # Rejects "", "." and "..".
    return bool(name.strip("."))


def last_path_component(url: str) -> str:
    """Return the final path segment of ``url`` without a ``.git`` suffix."""
    url = url.strip().rstrip("/").removesuffix(GIT_SUFFIX)
    return url.rsplit("/", 1)[-1]


def repo_dir_name(
    display_name: Optional[str],
    url: str,
    used_names: AbstractSet[str],
) -> str:
    """
    Pick a directory name for one manifest entry.

    The sanitized display name is preferred when it is usable (not empty and
    not made only of dots) and unused.
    Otherwise the URL's last path component is used, suffixed with ``-N`` until
    it no longer collides with ``used_names``. ``used_names`` is not modified.
    """
    dir_name = sanitize_dir_name((display_name or "").strip())
    if _is_usable(dir_name) and dir_name not in used_names:
        return dir_name

    base = last_path_component(url)
    if not _is_usable(base):
        base = FALLBACK_DIR_NAME
    candidate = base
    suffix = 0
    while candidate in used_names:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def derive_directory_names(entries: Iterable[Tuple[Optional[str], str]]) -> List[str]:
    """Name every ``(display_name, url)`` entry of one manifest, in order."""
    used: set[str] = set()
    names: List[str] = []
    for display_name, url in entries:
        name = repo_dir_name(display_name, url, used)
        used.add(name)
        names.append(name)
    return names
