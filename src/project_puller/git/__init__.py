"""
Version-control collaborators.
"""
from .executor import GitExecutor

__all__ = ["GitExecutor"]
