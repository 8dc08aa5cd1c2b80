"""Project router - API endpoints for project management."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.project import Project, ProjectCreate, ProjectUpdate
from app.routers.auth import get_current_user_id
from app.services.project_service import ProjectService
from app.utils.errors import ServiceError


router = APIRouter(tags=["projects"])


@router.get("/clients/{client_id}/projects", response_model=list[Project])
async def list_projects(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List projects of a client.

    Raises:
        HTTPException: If client not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.list_projects(user_id=user_id, client_id=client_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post(
    "/clients/{client_id}/projects",
    response_model=Project,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    client_id: str,
    project: ProjectCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new project under a client.

    Raises:
        HTTPException: If client not found (404) or name is blank (400)
    """
    service = ProjectService(db)

    try:
        return await service.create_project(
            user_id=user_id,
            client_id=client_id,
            project_create=project,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/projects/{project_id}", response_model=Project)
async def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a project by ID.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.get_project(user_id=user_id, project_id=project_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/projects/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Rename a project.

    Raises:
        HTTPException: If project not found (404) or name is blank (400)
    """
    service = ProjectService(db)

    try:
        return await service.update_project(
            user_id=user_id,
            project_id=project_id,
            project_update=project_update,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a project with its tasks.

    Raises:
        HTTPException: If project not found (404)
    """
    service = ProjectService(db)

    try:
        return await service.delete_project(user_id=user_id, project_id=project_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
