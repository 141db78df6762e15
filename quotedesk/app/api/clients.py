"""Client endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.crud.crud_client import client_crud
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.client import ClientCreate, ClientRead, ClientUpdate

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_client_or_404(db: Session, client_id: int):
    client = client_crud.get(db, obj_id=client_id)
    if not client:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(client_in: ClientCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_crud.create(db, obj_in=client_in)


@router.get("/", response_model=list[ClientRead])
async def list_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return client_crud.get_multi(db)


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_client_or_404(db, client_id)


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    client_in: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = _get_client_or_404(db, client_id)
    return client_crud.update(db, db_obj=client, obj_in=client_in)


@router.delete("/{client_id}", response_model=ClientRead)
async def delete_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = _get_client_or_404(db, client_id)
    if client.quotations:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Client has quotations and cannot be deleted")
    return client_crud.delete(db, db_obj=client)
