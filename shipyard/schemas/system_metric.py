from pydantic import Field
from shipyard.schemas.base import APIModel, UTCDateTime


class SystemMetricBase(APIModel):
    cpu_usage: int = Field(ge=0, le=100)
    memory_usage: int = Field(ge=0, le=100)
    disk_usage: int = Field(ge=0, le=100)
    network_usage: int = Field(ge=0)  # Mbps


class SystemMetricCreate(SystemMetricBase):
    pass


class SystemMetric(SystemMetricBase):
    id: int
    timestamp: UTCDateTime
