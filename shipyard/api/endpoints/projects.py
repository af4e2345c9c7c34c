from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from shipyard.api import deps
from shipyard.schemas.activity import Activity
from shipyard.schemas.project import Project, ProjectCreate, ProjectUpdate
from shipyard.storage import Storage

router = APIRouter()


def _get_project_or_404(storage: Storage, project_id: int) -> Project:
    project = storage.get_project(project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


@router.get("", response_model=List[Project])
def read_projects(
    storage: Storage = Depends(deps.get_storage),
) -> Any:
    """
    List projects, most recently updated first.
    """
    return storage.get_projects()


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(
    *,
    storage: Storage = Depends(deps.get_storage),
    project_in: ProjectCreate,
) -> Any:
    return storage.create_project(project_in)


@router.get("/{project_id}", response_model=Project)
def read_project(
    *,
    storage: Storage = Depends(deps.get_storage),
    project_id: int,
) -> Any:
    return _get_project_or_404(storage, project_id)


@router.patch("/{project_id}", response_model=Project)
def update_project(
    *,
    storage: Storage = Depends(deps.get_storage),
    project_id: int,
    project_in: ProjectUpdate,
) -> Any:
    """
    Partially update a project. Only the fields present in the body change.
    """
    _get_project_or_404(storage, project_id)
    project = storage.update_project(project_id, project_in)
    if not project:
        # Deleted between the lookup and the update
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    *,
    storage: Storage = Depends(deps.get_storage),
    project_id: int,
) -> Response:
    """
    Delete a project together with its domains and databases.
    """
    _get_project_or_404(storage, project_id)
    if not storage.delete_project(project_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/activities", response_model=List[Activity])
def read_project_activities(
    *,
    storage: Storage = Depends(deps.get_storage),
    project_id: int,
    limit: int = Depends(deps.activity_limit),
) -> Any:
    _get_project_or_404(storage, project_id)
    return storage.get_project_activities(project_id, limit=limit)
