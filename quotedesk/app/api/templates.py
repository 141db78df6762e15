"""Quotation template endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.crud.crud_template import template_crud
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate

router = APIRouter(prefix="/templates", tags=["templates"])


def _get_template_or_404(db: Session, template_id: int):
    template = template_crud.get(db, obj_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
    return template


@router.post("/", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_in: TemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return template_crud.create(db, obj_in=template_in)


@router.get("/", response_model=list[TemplateRead])
async def list_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return template_crud.get_multi(db)


@router.get("/{template_id}", response_model=TemplateRead)
async def get_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_template_or_404(db, template_id)


@router.put("/{template_id}", response_model=TemplateRead)
async def update_template(
    template_id: int,
    template_in: TemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_template_or_404(db, template_id)
    return template_crud.update(db, db_obj=template, obj_in=template_in)


@router.delete("/{template_id}", response_model=TemplateRead)
async def delete_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = _get_template_or_404(db, template_id)
    return template_crud.delete(db, db_obj=template)
