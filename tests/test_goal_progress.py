from datetime import datetime, timedelta, timezone
from decimal import Decimal

from quotedesk.app.db import base  # noqa: F401  (registers every mapper)
from quotedesk.app.models.goal import Goal
from quotedesk.app.models.quotation import Quotation
from quotedesk.app.services.goal_progress import calculate_goal_progress

START = datetime(2026, 6, 1, tzinfo=timezone.utc)
END = START + timedelta(days=30)


def make_goal(goal_type="revenue", target="100000"):
    return Goal(id=1, goal_type=goal_type, target_value=Decimal(target), period_type="monthly", period_start=START, period_end=END)


def make_quotation(total, status="accepted", created_at=None):
    return Quotation(total=Decimal(str(total)), status=status, created_at=created_at or START + timedelta(days=2))


def test_revenue_goal_behind():
    progress = calculate_goal_progress(make_goal(), [make_quotation(20000)], now=START + timedelta(days=10))
    assert progress["current_value"] == Decimal("20000")
    assert progress["progress_percentage"] == Decimal("20")
    assert round(progress["expected_progress"], 1) == Decimal("33.3")
    assert progress["days_remaining"] == 20
    assert progress["status"] == "behind"


def test_revenue_goal_on_track():
    progress = calculate_goal_progress(make_goal(), [make_quotation(30000)], now=START + timedelta(days=10))
    assert progress["status"] == "on-track"


def test_progress_capped_and_achieved():
    progress = calculate_goal_progress(make_goal(), [make_quotation(150000)], now=START + timedelta(days=5))
    assert progress["progress_percentage"] == Decimal("100")
    assert progress["status"] == "achieved"


def test_not_started_ignores_other_periods_and_statuses():
    quotations = [
        make_quotation(50000, created_at=START - timedelta(days=1)),
        make_quotation(50000, status="sent"),
    ]
    progress = calculate_goal_progress(make_goal(), quotations, now=START + timedelta(days=3))
    assert progress["current_value"] == 0
    assert progress["status"] == "not-started"


def test_expired_period_is_behind():
    progress = calculate_goal_progress(make_goal(), [make_quotation(90000)], now=END + timedelta(days=3))
    assert progress["days_remaining"] == 0
    assert progress["status"] == "behind"


def test_conversion_rate_goal():
    quotations = [make_quotation(100), make_quotation(100, status="rejected"), make_quotation(100, status="sent"), make_quotation(100)]
    progress = calculate_goal_progress(make_goal("conversion_rate", "50"), quotations, now=START + timedelta(days=15))
    assert progress["current_value"] == Decimal("50")
    assert progress["status"] == "achieved"


def test_naive_datetimes_are_treated_as_utc():
    goal = make_goal()
    goal.period_start = START.replace(tzinfo=None)
    goal.period_end = END.replace(tzinfo=None)
    quotation = make_quotation(20000, created_at=(START + timedelta(days=1)).replace(tzinfo=None))
    progress = calculate_goal_progress(goal, [quotation], now=START + timedelta(days=10))
    assert progress["current_value"] == Decimal("20000")
