"""Catalog item endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.crud.crud_item import item_crud
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.item import ItemCreate, ItemRead, ItemUpdate

router = APIRouter(prefix="/items", tags=["items"])


def _get_item_or_404(db: Session, item_id: int):
    item = item_crud.get(db, obj_id=item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return item


@router.post("/", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(item_in: ItemCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return item_crud.create(db, obj_in=item_in)


@router.get("/", response_model=list[ItemRead])
async def list_items(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return item_crud.get_multi(db)


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_item_or_404(db, item_id)


@router.put("/{item_id}", response_model=ItemRead)
async def update_item(
    item_id: int,
    item_in: ItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Existing quotation lines keep the price they were quoted at.
    item = _get_item_or_404(db, item_id)
    return item_crud.update(db, db_obj=item, obj_in=item_in)


@router.delete("/{item_id}", response_model=ItemRead)
async def delete_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    item = _get_item_or_404(db, item_id)
    return item_crud.delete(db, db_obj=item)
