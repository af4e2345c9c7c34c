from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from shipyard.api import deps
from shipyard.schemas.system_metric import SystemMetric, SystemMetricCreate
from shipyard.storage import Storage

router = APIRouter()


@router.get("", response_model=SystemMetric)
def read_latest_system_metrics(
    storage: Storage = Depends(deps.get_storage),
) -> Any:
    metrics = storage.get_latest_system_metrics()
    if not metrics:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No system metrics found"
        )
    return metrics


@router.post("", response_model=SystemMetric, status_code=status.HTTP_201_CREATED)
def create_system_metrics(
    *,
    storage: Storage = Depends(deps.get_storage),
    metrics_in: SystemMetricCreate,
) -> Any:
    return storage.create_system_metrics(metrics_in)
