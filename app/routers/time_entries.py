"""Time entry endpoints - listing and editing tracked time."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.database import get_database
from app.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from app.routers.auth import get_current_user_id
from app.services.time_entry_service import TimeEntryService
from app.utils.errors import ServiceError


router = APIRouter(prefix="/time-entries", tags=["time entries"])


@router.get("", response_model=list[TimeEntry])
async def list_entries(
    from_: Optional[str] = Query(None, alias="from", description="Earliest start time (inclusive)"),
    to: Optional[str] = Query(None, description="Latest start time (inclusive)"),
    task_id: Optional[str] = Query(None, alias="taskId", description="Filter by task"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List time entries for the authenticated user.

    - Requires authentication
    - Unparseable from/to values are ignored
    - Results sorted by start time descending (most recent first)
    """
    service = TimeEntryService(db)
    return await service.list_entries(
        user_id=user_id,
        from_=from_,
        to=to,
        task_id=task_id,
    )


@router.get("/running", response_model=Optional[TimeEntry])
async def get_running_timer(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get the currently running timer.

    - Requires authentication
    - Returns null when no timer is running
    """
    service = TimeEntryService(db)
    return await service.get_running_timer(user_id=user_id)


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: TimeEntryCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a manual time entry.

    - Requires authentication
    - Start time must be before end time
    - Omitting the end time starts a running entry
    """
    service = TimeEntryService(db)

    try:
        return await service.create_entry(
            user_id=user_id,
            entry_create=entry_create,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a specific time entry by ID.

    - Requires authentication
    - User must own the entry
    """
    service = TimeEntryService(db)

    try:
        return await service.get_entry(user_id=user_id, entry_id=entry_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{entry_id}", response_model=TimeEntry)
async def update_entry(
    entry_id: str,
    entry_update: TimeEntryUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a time entry.

    - Requires authentication
    - User must own the entry
    - Fields left out are unchanged; null clears endTime, taskId or description
    """
    service = TimeEntryService(db)

    try:
        return await service.update_entry(
            user_id=user_id,
            entry_id=entry_id,
            entry_update=entry_update,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a time entry.

    - Requires authentication
    - User must own the entry
    - Hard delete (permanent)
    """
    service = TimeEntryService(db)

    try:
        return await service.delete_entry(user_id=user_id, entry_id=entry_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
