from typing import Literal, Optional
from pydantic import Field
from shipyard.schemas.base import APIModel, PartialUpdate, UTCDateTime

ProjectStatus = Literal["idle", "building", "live", "error"]


# Shared properties
class ProjectBase(APIModel):
    name: str = Field(min_length=1)
    framework: str = Field(min_length=1)
    repository_url: str = Field(min_length=1)
    branch: str = Field(min_length=1)
    domain: Optional[str] = None


# Properties to receive via API on creation
class ProjectCreate(ProjectBase):
    pass


# Properties to receive via API on update
class ProjectUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name", "framework", "repository_url", "branch", "status"})

    name: Optional[str] = Field(default=None, min_length=1)
    framework: Optional[str] = Field(default=None, min_length=1)
    repository_url: Optional[str] = Field(default=None, min_length=1)
    branch: Optional[str] = Field(default=None, min_length=1)
    domain: Optional[str] = None
    status: Optional[ProjectStatus] = None


class Project(ProjectBase):
    id: int
    status: ProjectStatus = "idle"
    created_at: UTCDateTime
    updated_at: UTCDateTime
