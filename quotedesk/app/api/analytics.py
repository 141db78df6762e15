"""Profit analytics and dashboard summary endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quotedesk.app.core.security import get_current_user
from quotedesk.app.db.session import get_db
from quotedesk.app.models.user import User
from quotedesk.app.schemas.analytics import DashboardSummary, ProfitReport
from quotedesk.app.services.profit_analytics import get_dashboard_summary, get_profit_report

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/profit", response_model=ProfitReport)
async def profit_report(
    months: int = Query(6, ge=1, le=24),
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_profit_report(db, months=months, today=as_of)


@router.get("/summary", response_model=DashboardSummary)
async def dashboard_summary(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_dashboard_summary(db, today=as_of)
