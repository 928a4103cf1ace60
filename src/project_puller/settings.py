"""
Centralized application settings.

Values come from ``project_puller.toml`` (or the file named by
``PULLER_CONFIG_PATH``) and ``PULLER_*`` environment variables. CLI flags
override whatever is configured here.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    import tomli as tomllib  # type: ignore[attr-defined]

from pydantic_settings import BaseSettings, SettingsConfigDict


class PullerSettings(BaseSettings):
    """Project-wide settings loaded from env or .env files."""

    model_config = SettingsConfigDict(
        env_prefix="PULLER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    output_dir: Optional[Path] = None
    username: Optional[str] = None
    use_ssh: bool = False
    quiet: bool = False
    github_api_root: str = "https://api.github.com"
    github_token: Optional[str] = None
    github_manifest_path: str = "security-insights.yml"
    request_timeout: int = 30
    git_executable: str = "git"


_CONFIG_ENV_VAR = "PULLER_CONFIG_PATH"
_DEFAULT_CONFIG_FILE = Path("project_puller.toml")


def _load_toml_config() -> Dict[str, Any]:
    """Load configuration from the primary TOML file on disk."""
    candidates: List[Path] = []
    config_override = os.getenv(_CONFIG_ENV_VAR)
    if config_override:
        candidates.append(Path(config_override))
    candidates.append(_DEFAULT_CONFIG_FILE)

    for candidate in candidates:
        if candidate.is_file():
            with candidate.open("rb") as handle:
                return tomllib.load(handle)
    return {}


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _flatten_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Translate grouped TOML sections into PullerSettings keyword arguments."""
    data: Dict[str, Any] = {}

    defaults = raw.get("defaults", {})
    if "output_dir" in defaults:
        data["output_dir"] = _blank_to_none(defaults["output_dir"])
    if "username" in defaults:
        data["username"] = _blank_to_none(defaults["username"])
    if "use_ssh" in defaults:
        data["use_ssh"] = bool(defaults["use_ssh"])
    if "quiet" in defaults:
        data["quiet"] = bool(defaults["quiet"])

    github = raw.get("github", {})
    if github:
        if "api_root" in github:
            data["github_api_root"] = github["api_root"].rstrip("/")
        if "token" in github:
            data["github_token"] = _blank_to_none(github["token"])
        if "manifest_path" in github:
            data["github_manifest_path"] = github["manifest_path"]

    http = raw.get("http", {})
    if "request_timeout" in http:
        data["request_timeout"] = int(http["request_timeout"])

    git = raw.get("git", {})
    if "executable" in git:
        data["git_executable"] = git["executable"]

    return data


def _apply_environment_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop file values for fields that are also set through ``PULLER_*`` variables."""
    prefix = PullerSettings.model_config.get("env_prefix", "")
    environ = {key.upper() for key in os.environ}
    return {
        key: value
        for key, value in data.items()
        if f"{prefix}{key}".upper() not in environ
    }


def load_settings() -> PullerSettings:
    raw = _load_toml_config()
    flattened = _apply_environment_overrides(_flatten_config(raw))
    return PullerSettings(**flattened)


settings = load_settings()
