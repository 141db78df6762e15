"""Generic CRUD operations shared by the simple catalog collections."""

from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from quotedesk.app.core.errors import InvalidInputError
from quotedesk.app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], order_by: Any = None):
        self.model = model
        self.order_by = order_by if order_by is not None else model.created_at.desc()

    def prepare(self, data: dict) -> dict:
        """Hook for subclasses that derive stored fields from the payload."""
        return data

    def create(self, db: Session, *, obj_in: BaseModel) -> ModelType:
        obj = self.model(**self.prepare(obj_in.model_dump()))
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, obj_id: int) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == obj_id).first()

    def get_multi(self, db: Session) -> List[ModelType]:
        return db.query(self.model).order_by(self.order_by).all()

    def reject_required_nulls(self, data: dict) -> None:
        """An explicit null may not clear a NOT NULL column."""
        columns = self.model.__table__.columns
        for field, value in data.items():
            if value is None and field in columns and not columns[field].nullable:
                raise InvalidInputError(f"{field} cannot be empty")

    def update(self, db: Session, *, db_obj: ModelType, obj_in: BaseModel) -> ModelType:
        update_data = self.prepare(obj_in.model_dump(exclude_unset=True))
        self.reject_required_nulls(update_data)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: ModelType) -> ModelType:
        db.delete(db_obj)
        db.commit()
        return db_obj
