"""Goal schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

GoalType = Literal["revenue", "conversion_rate"]
PeriodType = Literal["monthly", "quarterly", "yearly"]
GoalStatus = Literal["on-track", "behind", "achieved", "not-started"]


class GoalBase(BaseModel):
    goal_type: GoalType
    target_value: Decimal = Field(ge=0)
    period_type: PeriodType = "monthly"
    period_start: datetime
    period_end: datetime
    description: Optional[str] = None
    is_active: bool = True


class GoalCreate(GoalBase):
    pass


class GoalUpdate(BaseModel):
    goal_type: Optional[GoalType] = None
    target_value: Optional[Decimal] = Field(default=None, ge=0)
    period_type: Optional[PeriodType] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class GoalRead(GoalBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GoalProgress(BaseModel):
    goal: GoalRead
    current_value: Decimal
    progress_percentage: Decimal
    expected_progress: Optional[Decimal] = None
    status: GoalStatus
    days_remaining: int
