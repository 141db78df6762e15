"""Goal endpoints and progress tracking."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.core.time import ensure_utc
from quotedesk.app.crud.crud_goal import goal_crud
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.goal import GoalCreate, GoalProgress, GoalRead, GoalUpdate
from quotedesk.app.services.goal_progress import get_active_goal_progress

router = APIRouter(prefix="/goals", tags=["goals"])


def _get_goal_or_404(db: Session, goal_id: int):
    goal = goal_crud.get(db, obj_id=goal_id)
    if not goal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal


def _check_period(start: datetime | None, end: datetime | None) -> None:
    if start is None or end is None:
        return
    if ensure_utc(end) < ensure_utc(start):
        raise HTTPException(status_code=400, detail="period_end must not be before period_start")


@router.get("/progress", response_model=list[GoalProgress])
async def goal_progress(
    now: datetime | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_active_goal_progress(db, now=now)


@router.post("/", response_model=GoalRead, status_code=status.HTTP_201_CREATED)
async def create_goal(goal_in: GoalCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _check_period(goal_in.period_start, goal_in.period_end)
    return goal_crud.create(db, obj_in=goal_in)


@router.get("/", response_model=list[GoalRead])
async def list_goals(
    active_only: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if active_only:
        return goal_crud.get_active(db)
    return goal_crud.get_multi(db)


@router.get("/{goal_id}", response_model=GoalRead)
async def get_goal(goal_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_goal_or_404(db, goal_id)


@router.put("/{goal_id}", response_model=GoalRead)
async def update_goal(
    goal_id: int,
    goal_in: GoalUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    goal = _get_goal_or_404(db, goal_id)
    _check_period(goal_in.period_start or goal.period_start, goal_in.period_end or goal.period_end)
    return goal_crud.update(db, db_obj=goal, obj_in=goal_in)


@router.delete("/{goal_id}", response_model=GoalRead)
async def delete_goal(goal_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    goal = _get_goal_or_404(db, goal_id)
    return goal_crud.delete(db, db_obj=goal)
