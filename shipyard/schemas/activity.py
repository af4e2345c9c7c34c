from typing import Optional
from pydantic import Field
from shipyard.schemas.base import APIModel, UTCDateTime


class ActivityBase(APIModel):
    type: str = Field(min_length=1)  # deployment, build, database, domain, project, ...
    description: str = Field(min_length=1)
    project_id: Optional[int] = None


class ActivityCreate(ActivityBase):
    pass


class Activity(ActivityBase):
    id: int
    created_at: UTCDateTime
