from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status

from shipyard.api import deps
from shipyard.schemas.activity import Activity, ActivityCreate
from shipyard.storage import Storage

router = APIRouter()


@router.get("", response_model=List[Activity])
def read_activities(
    storage: Storage = Depends(deps.get_storage),
    limit: int = Depends(deps.activity_limit),
) -> Any:
    """
    Activity timeline, newest first.
    """
    return storage.get_activities(limit=limit)


@router.post("", response_model=Activity, status_code=status.HTTP_201_CREATED)
def create_activity(
    *,
    storage: Storage = Depends(deps.get_storage),
    activity_in: ActivityCreate,
) -> Any:
    if activity_in.project_id is not None and not storage.get_project(activity_in.project_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project not found"
        )
    return storage.create_activity(activity_in)
