"""Rule-based insights over one report window.

The rules are fixed thresholds, evaluated in order:

    1. productivity level        (always, unless the window has no minutes)
    2. high leisure share        (only when above the threshold)
    3. average daily sleep       (silent between the two sleep bands)
    4. exercise present/absent   (always exactly one entry)
    5. top category              (always)
"""

from .analyzer import TimeAnalyzer, percent, sum_minutes
from .formatting import capitalize_first, format_duration

SUCCESS = "success"
INFO = "info"
WARNING = "warning"

PRODUCTIVE_GOOD = 60
PRODUCTIVE_OK = 40
LEISURE_HIGH = 40

SLEEP_LOW = 6 * 60
SLEEP_HEALTHY_MIN = 7 * 60
SLEEP_HEALTHY_MAX = 9 * 60


class Insight:
    def __init__(self, severity, icon, title, description):
        self.severity = severity
        self.icon = icon
        self.title = title
        self.description = description

    def to_dict(self):
        return {
            "severity": self.severity,
            "icon": self.icon,
            "title": self.title,
            "description": self.description,
        }

    def __repr__(self):
        return f"<Insight {self.severity} {self.title!r}>"


def no_data_insight(description="Start logging activities to see personalized insights."):
    return Insight(INFO, "📭", "No Data Yet", description)


class InsightGenerator:
    def __init__(self, analyzer=None):
        self.analyzer = analyzer or TimeAnalyzer()

    def generate_insights(self, subset):
        if not subset:
            return [no_data_insight()]

        insights = []
        total = sum_minutes(subset)

        if total > 0:
            insights.append(self._productivity_insight(subset))
            leisure = self._leisure_insight(subset, total)
            if leisure:
                insights.append(leisure)

        sleep = self._sleep_insight(subset)
        if sleep:
            insights.append(sleep)

        insights.append(self._exercise_insight(subset))
        insights.append(self._top_category_insight(subset))
        return insights

    def _productivity_insight(self, subset):
        productive_percent = self.analyzer.productivity_split(subset)['productive_percent']

        if productive_percent >= PRODUCTIVE_GOOD:
            return Insight(SUCCESS, "🎯", "Great Productivity!",
                           f"{productive_percent}% of your time went to productive activities. Keep it up!")
        if productive_percent >= PRODUCTIVE_OK:
            return Insight(INFO, "📊", "Balanced Day",
                           f"{productive_percent}% of your time was productive. "
                           "A little more focus time would tip the balance.")
        return Insight(WARNING, "⚠️", "Low Productivity",
                       f"Only {productive_percent}% of your time was productive. "
                       "Try scheduling study or work blocks.")

    def _leisure_insight(self, subset, total):
        leisure = self.analyzer.category_minutes(subset, 'leisure')
        # Threshold is on the exact share; the rounded figure is for display only
        if leisure * 100 > LEISURE_HIGH * total:
            leisure_percent = percent(leisure, total)
            return Insight(WARNING, "🎮", "High Leisure Time",
                           f"Leisure takes up {leisure_percent}% of your time. Consider balancing it with other activities.")
        return None

    def _sleep_insight(self, subset):
        sleep_minutes = self.analyzer.category_minutes(subset, 'sleep')
        days = max(1, len(self.analyzer.distinct_dates(subset)))
        average = sleep_minutes / days

        if average < SLEEP_LOW:
            return Insight(WARNING, "😴", "Insufficient Sleep",
                           f"You're averaging {format_duration(round(average))} of sleep per day. "
                           "Aim for 7-9 hours.")
        if SLEEP_HEALTHY_MIN <= average <= SLEEP_HEALTHY_MAX:
            return Insight(SUCCESS, "✨", "Healthy Sleep",
                           f"You're averaging {format_duration(round(average))} of sleep per day. Great job!")
        # 6-7h and above 9h are left without an entry
        return None

    def _exercise_insight(self, subset):
        exercise_minutes = self.analyzer.category_minutes(subset, 'exercise')
        if exercise_minutes == 0:
            return Insight(WARNING, "🏃", "No Exercise Logged",
                           "You haven't logged any exercise in this period. Even a short walk helps!")
        return Insight(SUCCESS, "💪", "Staying Active",
                       f"You exercised for {format_duration(exercise_minutes)} in this period.")

    def _top_category_insight(self, subset):
        top = self.analyzer.top_category(subset)
        name = capitalize_first(top['category'])
        return Insight(INFO, "⭐", "Top Category",
                       f"Most of your time went to {name} "
                       f"({format_duration(top['total_minutes'])}, {top['percentage']}%).")
