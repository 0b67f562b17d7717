# core/inspection_rules.py
"""
Pure rules over inspection checklists and APAR expiry dates.

Nothing here touches the database; the managers and dashboards call these
functions so the same rule is applied on every write and every report.
"""
import math
from collections.abc import Iterable
from datetime import date, timedelta

from db_models.inspection import OverallStatus
from db_models.inspection_item import ItemStatus, ItemType

# Checklist components, in the order the inspection form shows them
ITEM_TYPES: tuple[str, ...] = tuple(t.value for t in ItemType)
ITEM_STATUSES: tuple[str, ...] = tuple(s.value for s in ItemStatus)
OVERALL_STATUSES: tuple[str, ...] = tuple(s.value for s in OverallStatus)

PASS_RATE_GOOD_THRESHOLD = 80
PASS_RATE_WARNING_THRESHOLD = 60

EXPIRING_SOON_DAYS = 30
EXPIRY_WINDOW_DAYS = 90


def derive_overall_status(item_statuses: Iterable[str]) -> str:
    """
    Collapse checklist item statuses into one overall status.

    Any damaged item makes the inspection critical, whatever else was found.
    Otherwise any item needing repair means it needs attention. An empty
    checklist is good.
    """
    statuses = set(item_statuses)
    if ItemStatus.DAMAGED.value in statuses:
        return OverallStatus.CRITICAL.value
    if ItemStatus.NEEDS_REPAIR.value in statuses:
        return OverallStatus.NEEDS_ATTENTION.value
    return OverallStatus.GOOD.value


def pass_rate(passed: int, total: int) -> int:
    """Percentage of passed items, rounded half up. 0 when there are no items."""
    if total <= 0:
        return 0
    return math.floor(passed * 100 / total + 0.5)


def pass_rate_band(rate: int) -> str:
    if rate >= PASS_RATE_GOOD_THRESHOLD:
        return "good"
    if rate >= PASS_RATE_WARNING_THRESHOLD:
        return "warning"
    return "critical"


def count_passed(item_statuses: Iterable[str]) -> int:
    return sum(1 for s in item_statuses if s == ItemStatus.GOOD.value)


def days_until_expiry(expiry_date: date, today: date | None = None) -> int:
    """Negative once the expiry date has passed."""
    today = today or date.today()
    return (expiry_date - today).days


def expiry_flag(expiry_date: date, today: date | None = None) -> str | None:
    """'expired', 'expiring_soon' (within 30 days) or None."""
    days = days_until_expiry(expiry_date, today)
    if days < 0:
        return "expired"
    if days <= EXPIRING_SOON_DAYS:
        return "expiring_soon"
    return None


def expiry_window(today: date | None = None) -> tuple[date, date]:
    """Half-open [today, today + 90 days) range used by the 'expiring soon' count."""
    today = today or date.today()
    return today, today + timedelta(days=EXPIRY_WINDOW_DAYS)


def month_bounds(today: date | None = None) -> tuple[date, date]:
    """Half-open [first day of month, first day of next month)."""
    today = today or date.today()
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def year_bounds(today: date | None = None) -> tuple[date, date]:
    today = today or date.today()
    return date(today.year, 1, 1), date(today.year + 1, 1, 1)
