from datetime import timedelta

from .analyzer import TimeAnalyzer, sum_minutes
from .formatting import format_duration
from .insights import INFO, SUCCESS, WARNING, Insight, no_data_insight
from .models import is_productive

STREAK_MIN_DAYS = 3
INACTIVE_DAYS = 3
EXERCISE_LOOKBACK_DAYS = 7
WEEKDAY_MIN_DATES = 7
SLEEP_TREND_DAYS = 7
SLEEP_TREND_DELTA = 30  # minutes per day

WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')


class SuggestionEngine:
    """Looks for long-horizon patterns across the whole activity history.

    Unlike InsightGenerator this never sees a windowed subset: it is run
    on demand against every record the store holds.
    """

    def __init__(self, analyzer=None):
        self.analyzer = analyzer or TimeAnalyzer()

    def analyze_history(self, all_records, today):
        if not all_records:
            return [no_data_insight("Log a few days of activities to unlock smart suggestions.")]

        dates = self.analyzer.distinct_dates(all_records)
        suggestions = []

        # 1. Logging streak
        streak = self.logging_streak(dates, today)
        if streak >= STREAK_MIN_DAYS:
            suggestions.append(Insight(SUCCESS, "🔥", f"{streak}-Day Streak",
                                       f"You've logged activities {streak} days in a row. Don't break the chain!"))

        # 2. Recent inactivity
        recent_start = today - timedelta(days=INACTIVE_DAYS - 1)
        if not any(recent_start <= d <= today for d in dates):
            suggestions.append(Insight(WARNING, "⏰", "Time to Log Again",
                                       f"Nothing logged in the last {INACTIVE_DAYS} days. "
                                       "Tracking consistently makes the reports more useful."))

        # 3. Exercise gap
        exercise_start = today - timedelta(days=EXERCISE_LOOKBACK_DAYS - 1)
        if not any(r.category == 'exercise' and exercise_start <= r.date <= today for r in all_records):
            suggestions.append(Insight(WARNING, "🏃", "Exercise Gap",
                                       f"No exercise logged in the last {EXERCISE_LOOKBACK_DAYS} days. "
                                       "Plan a short workout this week."))

        # 4. Best weekday (needs enough history to be meaningful)
        if len(dates) >= WEEKDAY_MIN_DATES:
            best = self.most_productive_weekday(all_records)
            if best:
                weekday, average = best
                suggestions.append(Insight(INFO, "📅", "Most Productive Day",
                                           f"You're most productive on {WEEKDAYS[weekday]}s "
                                           f"(avg {format_duration(round(average))} of productive time). "
                                           "Schedule demanding tasks then."))

        # 5. Sleep trend, last week against the week before
        trend = self.sleep_trend(all_records, today)
        if trend is not None:
            if trend >= SLEEP_TREND_DELTA:
                suggestions.append(Insight(INFO, "📈", "Sleep Improving",
                                           f"You're sleeping {format_duration(round(trend))} more per day than the week before."))
            elif trend <= -SLEEP_TREND_DELTA:
                suggestions.append(Insight(WARNING, "📉", "Sleep Declining",
                                           f"You're sleeping {format_duration(round(-trend))} less per day than the week before."))

        if not suggestions:
            suggestions.append(Insight(INFO, "👍", "Steady Habits",
                                       "No unusual patterns in your history. Keep logging!"))
        return suggestions

    def logging_streak(self, dates, today) -> int:
        """Consecutive logged days ending today (or yesterday, if today is still empty)."""
        if today in dates:
            cursor = today
        elif today - timedelta(days=1) in dates:
            cursor = today - timedelta(days=1)
        else:
            return 0

        streak = 0
        while cursor in dates:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    def most_productive_weekday(self, all_records):
        """(weekday index, average productive minutes per logged day), or None."""
        per_date = {}
        for record in all_records:
            minutes = record.duration_minutes if is_productive(record.category) else 0
            per_date[record.date] = per_date.get(record.date, 0) + minutes

        by_weekday = {}
        for day, minutes in per_date.items():
            by_weekday.setdefault(day.weekday(), []).append(minutes)

        averages = {wd: sum(values) / len(values) for wd, values in by_weekday.items()}
        best = max(sorted(averages), key=lambda wd: averages[wd])
        if averages[best] <= 0:
            return None
        return best, averages[best]

    def sleep_trend(self, all_records, today):
        """Change in average nightly sleep (minutes) versus the previous period.

        Returns None unless both periods contain sleep records.
        """
        def average_sleep(start, end):
            sleep = [r for r in all_records if r.category == 'sleep' and start <= r.date <= end]
            if not sleep:
                return None
            return sum_minutes(sleep) / len({r.date for r in sleep})

        recent_start = today - timedelta(days=SLEEP_TREND_DAYS - 1)
        previous_end = recent_start - timedelta(days=1)
        previous_start = previous_end - timedelta(days=SLEEP_TREND_DAYS - 1)

        recent = average_sleep(recent_start, today)
        previous = average_sleep(previous_start, previous_end)
        if recent is None or previous is None:
            return None
        return recent - previous
