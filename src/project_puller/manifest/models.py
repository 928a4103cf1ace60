"""
Subset of the security-insights document that the puller reads.

Unknown keys are ignored; only ``project.name`` and
``project.repositories[*].{name,url,comment}`` are consumed.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectRepository(BaseModel):
    """One repository listed under ``project.repositories``."""

    model_config = ConfigDict(extra="ignore")

    url: str
    name: Optional[str] = None
    comment: Optional[str] = None


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    repositories: List[ProjectRepository] = Field(default_factory=list)


class SecurityInsights(BaseModel):
    """Top-level security-insights document."""

    model_config = ConfigDict(extra="ignore")

    header: Optional[Dict[str, Any]] = None
    project: Optional[Project] = None

    @property
    def repositories(self) -> List[ProjectRepository]:
        if self.project is None:
            return []
        return self.project.repositories
