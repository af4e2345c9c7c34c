from typing import Optional
from pydantic import Field
from shipyard.schemas.base import APIModel, UTCDateTime


class DatabaseBase(APIModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)  # free text: PostgreSQL, MySQL, Redis, ...
    project_id: Optional[int] = None


class DatabaseCreate(DatabaseBase):
    # Fabricated from type and name when omitted
    connection_string: Optional[str] = None


class Database(DatabaseBase):
    id: int
    connection_string: str
    created_at: UTCDateTime
