import calendar
from datetime import date, timedelta

WINDOWS = ('today', 'week', 'month', 'all')


def month_back(today: date) -> date:
    """Same day-of-month one month earlier.

    When that day does not exist the surplus days spill into the next month
    (March 31 -> "February 31" -> March 3, or March 2 in a leap year).
    """
    year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
    days_in_month = calendar.monthrange(year, month)[1]
    if today.day <= days_in_month:
        return today.replace(year=year, month=month)
    return date(year, month, days_in_month) + timedelta(days=today.day - days_in_month)


def window_start(window, today: date):
    """First date included in *window*, or None when the window is unbounded."""
    if window == 'today':
        return today
    if window == 'week':
        return today - timedelta(days=7)
    if window == 'month':
        return month_back(today)
    return None


def filter_by_window(records, window, today: date):
    """Return the records whose date falls in *window*.

    'today' is an exact day match, 'week' covers today and the 7 days before
    it, 'month' starts at the same day one month back. 'all' and unknown
    windows return every record. The input list is never modified.
    """
    start = window_start(window, today)
    if start is None:
        return list(records)
    if window == 'today':
        return [r for r in records if r.date == today]
    return [r for r in records if start <= r.date <= today]
