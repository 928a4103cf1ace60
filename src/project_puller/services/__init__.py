"""
Service layer orchestrators for project-puller.
"""
from .puller import ProjectPuller, PullCallbacks, PullResult

__all__ = ["ProjectPuller", "PullCallbacks", "PullResult"]
