"""CRUD operations for goals."""

from typing import List

from sqlalchemy.orm import Session

from quotedesk.app.crud.base import CRUDBase
from quotedesk.app.models.goal import Goal


class CRUDGoal(CRUDBase[Goal]):
    def get_active(self, db: Session) -> List[Goal]:
        return db.query(Goal).filter(Goal.is_active.is_(True)).order_by(Goal.period_start.desc()).all()


goal_crud = CRUDGoal(Goal)
