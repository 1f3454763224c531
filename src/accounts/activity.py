from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from math import ceil
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from db.models import Activity, SessionUser

T = TypeVar("T")

ACTIVITY_TYPES = {
    "all": "All activity",
    "order": "Orders",
    "profile": "Profile",
    "security": "Security",
    "wishlist": "Wishlist",
    "login": "Logins",
    "preferences": "Preferences",
    "review": "Reviews",
}

PAGE_SIZE = 10


def filter_activities(
    activities: Iterable[Activity],
    type: str = "all",
    days: Optional[int] = None,
    search: str = "",
    now: Optional[datetime] = None,
) -> List[Activity]:
    """
    Filter a user's history, newest first.

    Args:
        type: activity type, or "all".
        days: only keep entries from the last `days` days; None keeps all.
        search: case-insensitive substring over action and description.
    """
    result = list(activities)

    if type != "all":
        result = [a for a in result if a.type == type]

    if days is not None:
        cutoff = (now or datetime.now()) - timedelta(days=days)
        result = [a for a in result if a.timestamp >= cutoff]

    term = search.strip().lower()
    if term:
        result = [
            a
            for a in result
            if term in a.action.lower() or term in a.description.lower()
        ]

    result.sort(key=lambda a: a.timestamp, reverse=True)
    return result


def paginate(
    items: Sequence[T], page: int, per_page: int = PAGE_SIZE
) -> Tuple[List[T], int]:
    """Return (items on page, page count). Page is clamped, count is at least 1."""
    page_cnt = max(ceil(len(items) / per_page), 1)
    page = min(max(page, 1), page_cnt)
    start = (page - 1) * per_page
    return list(items[start : start + per_page]), page_cnt


def activity_counts(activities: Iterable[Activity]) -> Dict[str, int]:
    return dict(Counter(a.type for a in activities))


def recent_activity(user: SessionUser, limit: int = 4) -> List[Activity]:
    return list(user.activity[:limit])
