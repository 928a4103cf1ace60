"""
Security-insights manifest models and loaders.
"""
from .loader import (
    load_security_insights,
    load_security_insights_from_github,
    parse_github_reference,
    parse_security_insights,
)
from .models import Project, ProjectRepository, SecurityInsights

__all__ = [
    "Project",
    "ProjectRepository",
    "SecurityInsights",
    "load_security_insights",
    "load_security_insights_from_github",
    "parse_github_reference",
    "parse_security_insights",
]
