"""
Remote URL transforms and directory naming for manifest entries.
"""
from .naming import derive_directory_names, last_path_component, repo_dir_name, sanitize_dir_name
from .urls import derive_fork_url, normalize_repo_url, to_https, to_ssh

__all__ = [
    "derive_directory_names",
    "derive_fork_url",
    "last_path_component",
    "normalize_repo_url",
    "repo_dir_name",
    "sanitize_dir_name",
    "to_https",
    "to_ssh",
]
