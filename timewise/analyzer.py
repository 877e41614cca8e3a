import math
from datetime import timedelta

from .config import Config
from .models import is_productive


def percent(part, total) -> int:
    """part/total as a whole percent, rounded half-up. A zero total gives 0."""
    if not total:
        return 0
    return int(math.floor(part / total * 100 + 0.5))


def sum_minutes(records) -> int:
    return sum(r.duration_minutes for r in records)


class TimeAnalyzer:
    """Aggregations over a list of ActivityRecord.

    Every method is pure and returns zeroed or empty results for an empty
    input instead of failing.
    """

    def __init__(self, summary_limit=None, trend_days=None):
        self.summary_limit = summary_limit or Config.DAILY_SUMMARY_LIMIT
        self.trend_days = trend_days or Config.TREND_DAYS

    def totals(self, subset):
        return {'count': len(subset), 'minutes': sum_minutes(subset)}

    def today_total(self, all_records, today) -> int:
        # Independent of the report window: the dashboard always shows today
        return sum_minutes(r for r in all_records if r.date == today)

    def productivity_split(self, subset):
        productive = sum_minutes(r for r in subset if is_productive(r.category))
        unproductive = sum_minutes(subset) - productive
        total = productive + unproductive

        productive_percent = percent(productive, total)
        # Complement instead of rounding both halves, so a .5/.5 split cannot reach 101
        unproductive_percent = 100 - productive_percent if total else 0

        return {
            'productive_minutes': productive,
            'unproductive_minutes': unproductive,
            'productive_percent': productive_percent,
            'unproductive_percent': unproductive_percent,
        }

    def category_breakdown(self, subset):
        """Per present category, largest first. Ties keep first-seen order."""
        groups = {}
        for record in subset:
            entry = groups.setdefault(record.category, {
                'category': record.category,
                'total_minutes': 0,
                'activity_count': 0,
            })
            entry['total_minutes'] += record.duration_minutes
            entry['activity_count'] += 1

        grand_total = sum_minutes(subset)
        breakdown = sorted(groups.values(), key=lambda e: e['total_minutes'], reverse=True)
        for entry in breakdown:
            entry['percentage'] = percent(entry['total_minutes'], grand_total)
        return breakdown

    def daily_summary(self, subset):
        """Records grouped by date, most recent first, capped to the latest groups."""
        groups = {}
        for record in subset:
            group = groups.setdefault(record.date, {
                'date': record.date,
                'activities': [],
                'total_minutes': 0,
            })
            group['activities'].append(record)
            group['total_minutes'] += record.duration_minutes

        ordered = sorted(groups.values(), key=lambda g: g['date'], reverse=True)
        return ordered[:self.summary_limit]

    def daily_totals(self, subset):
        """Minutes per date present in *subset*, oldest first."""
        totals = {}
        for record in subset:
            totals[record.date] = totals.get(record.date, 0) + record.duration_minutes
        return [{'date': d, 'minutes': totals[d]} for d in sorted(totals)]

    def daily_trend(self, records, today, days=None):
        """Minutes for each of the last *days* calendar days ending today, zero-filled."""
        days = days or self.trend_days
        start = today - timedelta(days=days - 1)
        totals = {start + timedelta(days=i): 0 for i in range(days)}
        for record in records:
            if record.date in totals:
                totals[record.date] += record.duration_minutes
        return [{'date': d, 'minutes': m} for d, m in totals.items()]

    def category_minutes(self, subset, category) -> int:
        return sum_minutes(r for r in subset if r.category == category)

    def distinct_dates(self, subset):
        return {r.date for r in subset}

    def top_category(self, subset):
        breakdown = self.category_breakdown(subset)
        return breakdown[0] if breakdown else None
