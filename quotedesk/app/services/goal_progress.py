"""Progress of revenue and conversion-rate goals against quotations in their period."""

import math
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List

from sqlalchemy.orm import Session

from quotedesk.app.core.time import ensure_utc, utc_now
from quotedesk.app.crud.crud_goal import goal_crud
from quotedesk.app.models.goal import Goal
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.services.pricing import ZERO, to_decimal

HUNDRED = Decimal("100")
ON_TRACK_TOLERANCE = Decimal("0.8")
ONE_DAY = timedelta(days=1)


def _ceil_days(delta: timedelta) -> int:
    return math.ceil(delta / ONE_DAY)


def _current_value(goal: Goal, quotations: List[Quotation]) -> Decimal:
    accepted = [q for q in quotations if q.status == "accepted"]
    if goal.goal_type == "revenue":
        return sum((to_decimal(q.total) for q in accepted), ZERO)
    if not quotations:
        return ZERO
    return Decimal(len(accepted)) / Decimal(len(quotations)) * HUNDRED


def calculate_goal_progress(goal: Goal, quotations: Iterable[Quotation], now: datetime | None = None) -> dict:
    now = ensure_utc(now or utc_now())
    period_start = ensure_utc(goal.period_start)
    period_end = ensure_utc(goal.period_end)

    in_period = [q for q in quotations if period_start <= ensure_utc(q.created_at) <= period_end]
    current_value = _current_value(goal, in_period)

    target = to_decimal(goal.target_value)
    if target > 0:
        progress = min(current_value / target * HUNDRED, HUNDRED)
    else:
        progress = HUNDRED if current_value > 0 else ZERO

    days_remaining = max(0, _ceil_days(period_end - now))
    total_days = _ceil_days(period_end - period_start)
    days_elapsed = total_days - days_remaining
    expected_progress = (
        Decimal(days_elapsed) / Decimal(total_days) * HUNDRED if total_days > 0 else HUNDRED
    )

    if progress >= HUNDRED:
        status = "achieved"
    elif current_value == 0:
        status = "not-started"
    elif now > period_end:
        status = "behind"
    elif progress >= expected_progress * ON_TRACK_TOLERANCE:
        status = "on-track"
    else:
        status = "behind"

    return {
        "goal": goal,
        "current_value": current_value,
        "progress_percentage": progress,
        "expected_progress": expected_progress,
        "status": status,
        "days_remaining": days_remaining,
    }


def get_active_goal_progress(db: Session, now: datetime | None = None) -> List[dict]:
    quotations = db.query(Quotation).all()
    return [calculate_goal_progress(goal, quotations, now=now) for goal in goal_crud.get_active(db)]
