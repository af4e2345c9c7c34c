import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from shipyard.api import deps
from shipyard.schemas.domain import Domain, DomainCreate, DomainUpdate
from shipyard.storage import Storage

router = APIRouter()
logger = logging.getLogger("shipyard.api.domains")


def _ensure_project_exists(storage: Storage, project_id: Optional[int]) -> None:
    if project_id is not None and not storage.get_project(project_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project not found"
        )


@router.get("", response_model=List[Domain])
def read_domains(
    storage: Storage = Depends(deps.get_storage),
    project_id: Optional[int] = Query(default=None, alias="projectId"),
) -> Any:
    return storage.get_domains(project_id=project_id)


@router.post("", response_model=Domain, status_code=status.HTTP_201_CREATED)
def create_domain(
    *,
    storage: Storage = Depends(deps.get_storage),
    domain_in: DomainCreate,
) -> Any:
    """
    Attach a domain, optionally to a project. Domain names are unique.
    """
    _ensure_project_exists(storage, domain_in.project_id)
    if storage.get_domain_by_name(domain_in.name):
        logger.info("Rejected duplicate domain: %s", domain_in.name)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Domain already exists"
        )
    return storage.create_domain(domain_in)


@router.get("/{domain_id}", response_model=Domain)
def read_domain(
    *,
    storage: Storage = Depends(deps.get_storage),
    domain_id: int,
) -> Any:
    domain = storage.get_domain(domain_id)
    if not domain:
        raise HTTPException(status_code=404, detail="Domain not found")
    return domain


@router.patch("/{domain_id}", response_model=Domain)
def update_domain(
    *,
    storage: Storage = Depends(deps.get_storage),
    domain_id: int,
    domain_in: DomainUpdate,
) -> Any:
    if not storage.get_domain(domain_id):
        raise HTTPException(status_code=404, detail="Domain not found")

    changes = domain_in.changes()
    if "project_id" in changes:
        _ensure_project_exists(storage, changes["project_id"])
    if "name" in changes:
        existing = storage.get_domain_by_name(changes["name"])
        if existing and existing.id != domain_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Domain already exists"
            )

    domain = storage.update_domain(domain_id, domain_in)
    if not domain:
        raise HTTPException(status_code=404, detail="Domain not found")
    return domain


@router.delete("/{domain_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_domain(
    *,
    storage: Storage = Depends(deps.get_storage),
    domain_id: int,
) -> Response:
    if not storage.get_domain(domain_id) or not storage.delete_domain(domain_id):
        raise HTTPException(status_code=404, detail="Domain not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
