import logging
from abc import ABC, abstractmethod
from datetime import date

from .analyzer import TimeAnalyzer
from .config import Config
from .filters import WINDOWS, filter_by_window
from .formatting import capitalize_first, category_label, format_date, format_duration
from .insights import InsightGenerator
from .suggestions import SuggestionEngine

logger = logging.getLogger(__name__)


class ChartRenderer(ABC):
    """Receives freshly computed chart series on every refresh.

    The renderer owns whatever it drew before; each call replaces it.
    """

    @abstractmethod
    def render(self, series) -> None:
        raise NotImplementedError


class NullRenderer(ChartRenderer):
    def render(self, series) -> None:
        pass


class LatestSeriesRenderer(ChartRenderer):
    """Keeps only the most recent series so the API can hand them to a browser."""

    def __init__(self):
        self.series = None

    def render(self, series) -> None:
        self.series = series


def _hours(minutes):
    return round(minutes / 60, 2)


class ReportCoordinator:
    """Runs filter -> aggregation -> insights -> renderer for one window.

    It subscribes to the store, so every successful mutation is followed by
    a refresh using the last selected window.
    """

    def __init__(self, store, renderer=None, clock=None, analyzer=None):
        self.store = store
        self.renderer = renderer or NullRenderer()
        self.clock = clock or date.today
        self.analyzer = analyzer or TimeAnalyzer()
        self.insight_generator = InsightGenerator(self.analyzer)
        self.suggestion_engine = SuggestionEngine(self.analyzer)
        self.window = Config.DEFAULT_WINDOW
        store.subscribe(self._on_store_change)

    def _on_store_change(self, store):
        self.refresh()

    def refresh(self, window=None):
        if window is not None:
            # Unknown windows behave like 'all'
            self.window = window if window in WINDOWS else 'all'

        today = self.clock()
        records = self.store.get_data()
        subset = filter_by_window(records, self.window, today)

        report = {
            'window': self.window,
            'today': today.isoformat(),
            'stats': self.dashboard_stats(records, subset, today),
            'productivity': self.analyzer.productivity_split(subset),
            'categories': self._categories(subset),
            'daily_summary': self._daily_summary(subset, today),
            'insights': [i.to_dict() for i in self.insight_generator.generate_insights(subset)],
        }
        series = self.build_series(records, subset, today)
        report['series'] = series

        self.renderer.render(series)
        logger.debug(f"Report refreshed: window={self.window} activities={len(subset)}")
        return report

    def dashboard_stats(self, records, subset, today):
        totals = self.analyzer.totals(records)
        window_totals = self.analyzer.totals(subset)
        today_minutes = self.analyzer.today_total(records, today)
        return {
            'total_activities': totals['count'],
            'total_minutes': totals['minutes'],
            'total_time': format_duration(totals['minutes']),
            'today_minutes': today_minutes,
            'today_time': format_duration(today_minutes),
            'window_activities': window_totals['count'],
            'window_minutes': window_totals['minutes'],
            'window_time': format_duration(window_totals['minutes']),
        }

    def _categories(self, subset):
        breakdown = self.analyzer.category_breakdown(subset)
        for entry in breakdown:
            entry['label'] = category_label(entry['category'])
            entry['total_time'] = format_duration(entry['total_minutes'])
        return breakdown

    def _daily_summary(self, subset, today):
        return [
            {
                'date': group['date'].isoformat(),
                'label': format_date(group['date'], today),
                'total_minutes': group['total_minutes'],
                'total_time': format_duration(group['total_minutes']),
                'activities': [r.to_dict() for r in group['activities']],
            }
            for group in self.analyzer.daily_summary(subset)
        ]

    def build_series(self, records, subset, today):
        """The four labeled numeric series handed to the chart renderer."""
        breakdown = self.analyzer.category_breakdown(subset)
        split = self.analyzer.productivity_split(subset)
        daily = self.analyzer.daily_totals(subset)
        # Fixed two-week view over the whole history, regardless of the window
        trend = self.analyzer.daily_trend(records, today)

        return {
            'category': {
                'type': 'pie',
                'labels': [capitalize_first(e['category']) for e in breakdown],
                'data': [e['total_minutes'] for e in breakdown],
            },
            'productivity': {
                'type': 'doughnut',
                'labels': ['Productive', 'Unproductive'],
                'data': [split['productive_minutes'], split['unproductive_minutes']],
            },
            'daily': {
                'type': 'bar',
                'labels': [d['date'].isoformat() for d in daily],
                'data': [_hours(d['minutes']) for d in daily],
            },
            'trend': {
                'type': 'line',
                'labels': [d['date'].isoformat() for d in trend],
                'data': [_hours(d['minutes']) for d in trend],
            },
        }

    def suggestions(self):
        """Smart suggestions over the entire, unfiltered history."""
        return [s.to_dict() for s in self.suggestion_engine.analyze_history(self.store.get_data(), self.clock())]
