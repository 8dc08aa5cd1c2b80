"""Timer endpoints - start and stop the running timer."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.time_entry import TimeEntry, TimerStart
from app.routers.auth import get_current_user_id
from app.services.timer_service import TimerService
from app.utils.errors import ServiceError


router = APIRouter(prefix="/timer", tags=["timer"])


@router.post("/start", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def start_timer(
    timer_start: Optional[TimerStart] = None,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Start a new timer.

    - Requires authentication
    - Only one timer can run at a time (400 otherwise)
    - Task, if given, must belong to the user (404 otherwise)
    """
    timer_start = timer_start or TimerStart()
    service = TimerService(db)

    try:
        return await service.start_timer(
            user_id=user_id,
            task_id=timer_start.task_id,
            description=timer_start.description,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/stop", response_model=TimeEntry)
async def stop_timer(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Stop the currently running timer.

    - Requires authentication
    - Returns 404 if no timer is running
    """
    service = TimerService(db)

    try:
        return await service.stop_timer(user_id=user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
