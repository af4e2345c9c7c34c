from typing import Literal, Optional
from pydantic import Field
from shipyard.schemas.base import APIModel, PartialUpdate, UTCDateTime

DomainStatus = Literal["pending", "active", "error"]


class DomainBase(APIModel):
    name: str = Field(min_length=1, max_length=255)
    project_id: Optional[int] = None


class DomainCreate(DomainBase):
    pass


class DomainUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name", "status"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    project_id: Optional[int] = None
    status: Optional[DomainStatus] = None


class Domain(DomainBase):
    id: int
    status: DomainStatus = "pending"
    created_at: UTCDateTime
