"""
Security-insights manifest loading.

Manifests can come from a local file, an HTTP(S) URL, or a public GitHub
repository read through the contents API.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union

import requests
import yaml
from pydantic import ValidationError

from ..errors import ManifestError
from ..logger import get_logger
from ..remotes.urls import is_http_url
from ..settings import settings
from .models import SecurityInsights

log = get_logger(__name__)

GITHUB_RAW_MEDIA_TYPE = "application/vnd.github.raw+json"


def parse_security_insights(contents: Union[str, bytes]) -> SecurityInsights:
    """Parse YAML text into a :class:`SecurityInsights` document."""
    try:
        raw = yaml.safe_load(contents)
    except yaml.YAMLError as exc:
        raise ManifestError(f"failed to load security insights: {exc}") from exc
    if not isinstance(raw, dict):
        raise ManifestError("failed to load security insights: document is not a mapping")
    try:
        return SecurityInsights.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"failed to load security insights: {exc}") from exc


def _fetch_url(
    url: str,
    *,
    headers: Optional[dict] = None,
    timeout: Optional[int] = None,
) -> bytes:
    try:
        response = requests.get(
            url,
            headers=headers or {},
            timeout=timeout or settings.request_timeout,
        )
    except requests.RequestException as exc:
        raise ManifestError(f"failed to fetch URL: {exc}") from exc
    if response.status_code != 200:
        raise ManifestError(
            f"failed to fetch URL: unexpected status {response.status_code} {response.reason}"
        )
    log.info("manifest_fetched", url=url, size=len(response.content))
    return response.content


def load_security_insights(source: str) -> SecurityInsights:
    """Load a manifest from a local file path or an HTTP(S) URL."""
    if is_http_url(source):
        contents = _fetch_url(source)
    else:
        try:
            contents = Path(source).read_bytes()
        except OSError as exc:
            raise ManifestError(f"failed to read file: {exc}") from exc
        log.info("manifest_read", path=source, size=len(contents))
    return parse_security_insights(contents)


def load_security_insights_from_github(
    owner: str,
    repo: str,
    path: Optional[str] = None,
) -> SecurityInsights:
    """Load a manifest stored in a public GitHub repository."""
    path = (path or settings.github_manifest_path).lstrip("/")
    url = f"{settings.github_api_root.rstrip('/')}/repos/{owner}/{repo}/contents/{path}"
    headers = {"Accept": GITHUB_RAW_MEDIA_TYPE}
    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token}"
    try:
        contents = _fetch_url(url, headers=headers)
    except ManifestError as exc:
        raise ManifestError(f"failed to read from GitHub: {exc}") from exc
    return parse_security_insights(contents)


def parse_github_reference(value: str) -> Tuple[str, str, Optional[str]]:
    """
    Split ``owner/repo[/path]`` into its parts.

    Raises :class:`ManifestError` when owner or repo is missing.
    """
    parts = value.strip().split("/", 2)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ManifestError("--github must be owner/repo or owner/repo/path")
    path = parts[2] if len(parts) == 3 and parts[2] else None
    return parts[0], parts[1], path
