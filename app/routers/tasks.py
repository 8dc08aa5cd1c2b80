"""Task router - API endpoints for task management."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.task import Task, TaskCreate, TaskUpdate
from app.routers.auth import get_current_user_id
from app.services.task_service import TaskService
from app.utils.errors import ServiceError


router = APIRouter(tags=["tasks"])


@router.get("/projects/{project_id}/tasks", response_model=list[Task])
async def list_tasks(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List tasks of a project.

    Raises:
        HTTPException: If project not found (404)
    """
    service = TaskService(db)

    try:
        return await service.list_tasks(user_id=user_id, project_id=project_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post(
    "/projects/{project_id}/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    project_id: str,
    task: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a task under a project.

    Raises:
        HTTPException: If project not found (404) or name is blank (400)
    """
    service = TaskService(db)

    try:
        return await service.create_task(
            user_id=user_id,
            project_id=project_id,
            task_create=task,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a task by ID.

    Raises:
        HTTPException: If task not found (404)
    """
    service = TaskService(db)

    try:
        return await service.get_task(user_id=user_id, task_id=task_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    task_update: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Rename a task.

    Raises:
        HTTPException: If task not found (404) or name is blank (400)
    """
    service = TaskService(db)

    try:
        return await service.update_task(
            user_id=user_id,
            task_id=task_id,
            task_update=task_update,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a task. Time entries logged against it are detached, not deleted.

    Raises:
        HTTPException: If task not found (404)
    """
    service = TaskService(db)

    try:
        return await service.delete_task(user_id=user_id, task_id=task_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
