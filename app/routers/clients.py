"""Client router - API endpoints for client management."""
from fastapi import APIRouter, Depends, HTTPException, status

from app.database import get_database
from app.models.client import Client, ClientCreate, ClientUpdate
from app.routers.auth import get_current_user_id
from app.services.client_service import ClientService
from app.utils.errors import ServiceError


router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=list[Client])
async def list_clients(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List clients for the current user, ordered by name."""
    service = ClientService(db)
    return await service.list_clients(user_id=user_id)


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    client: ClientCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new client.

    Raises:
        HTTPException: If the name is blank (400)
    """
    service = ClientService(db)

    try:
        return await service.create_client(user_id=user_id, client_create=client)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.get("/{client_id}", response_model=Client)
async def get_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a client by ID.

    Raises:
        HTTPException: If client not found (404)
    """
    service = ClientService(db)

    try:
        return await service.get_client(user_id=user_id, client_id=client_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: str,
    client_update: ClientUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Rename a client.

    Raises:
        HTTPException: If client not found (404) or name is blank (400)
    """
    service = ClientService(db)

    try:
        return await service.update_client(
            user_id=user_id,
            client_id=client_id,
            client_update=client_update,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a client with its projects and tasks.

    Raises:
        HTTPException: If client not found (404)
    """
    service = ClientService(db)

    try:
        return await service.delete_client(user_id=user_id, client_id=client_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
