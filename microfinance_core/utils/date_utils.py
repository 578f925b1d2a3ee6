"""Date manipulation utilities"""

from datetime import date
from typing import List

from dateutil.relativedelta import relativedelta


def generate_due_dates(start: date, count: int, days: int = 0, months: int = 0) -> List[date]:
    """
    Due dates for installments 1..count, spaced by a fixed number of days or months.

    The first date falls one interval after start. Month steps are taken from
    start each time so short months clamp without drifting (Jan 31 -> Feb 28 -> Mar 31).
    """
    return [start + relativedelta(days=days * i, months=months * i) for i in range(1, count + 1)]
