import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from shipyard.api import deps
from shipyard.masking import mask_connection_string
from shipyard.schemas.database import Database, DatabaseCreate
from shipyard.services.connection_strings import build_connection_string
from shipyard.storage import Storage

router = APIRouter()
logger = logging.getLogger("shipyard.api.databases")


@router.get("", response_model=List[Database])
def read_databases(
    storage: Storage = Depends(deps.get_storage),
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    type: Optional[str] = None,
) -> Any:
    return storage.get_databases(project_id=project_id, type=type)


@router.post("", response_model=Database, status_code=status.HTTP_201_CREATED)
def create_database(
    *,
    storage: Storage = Depends(deps.get_storage),
    database_in: DatabaseCreate,
) -> Any:
    """
    Register a database. A connection string is generated when none is given.
    """
    if database_in.project_id is not None and not storage.get_project(database_in.project_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project not found"
        )
    if storage.get_database_by_name(database_in.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Database with this name already exists"
        )

    if not database_in.connection_string:
        connection_string = build_connection_string(database_in.type, database_in.name)
        database_in = database_in.model_copy(update={"connection_string": connection_string})
        logger.info(
            "Generated connection string for %s: %s",
            database_in.name, mask_connection_string(connection_string),
        )

    return storage.create_database(database_in)


@router.get("/{database_id}", response_model=Database)
def read_database(
    *,
    storage: Storage = Depends(deps.get_storage),
    database_id: int,
) -> Any:
    database = storage.get_database(database_id)
    if not database:
        raise HTTPException(status_code=404, detail="Database not found")
    return database


@router.delete("/{database_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_database(
    *,
    storage: Storage = Depends(deps.get_storage),
    database_id: int,
) -> Response:
    if not storage.get_database(database_id) or not storage.delete_database(database_id):
        raise HTTPException(status_code=404, detail="Database not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
