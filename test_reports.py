"""
Tests for the report coordinator: window selection, report payload and
renderer notification.
"""
import json
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from timewise.models import ActivityRecord
from timewise.reports import ChartRenderer, LatestSeriesRenderer, ReportCoordinator
from timewise.storage import MemoryStorage
from timewise.store import ActivityStore

TODAY = date(2026, 10, 18)


def rec(activity_id, category, minutes, day=TODAY):
    return ActivityRecord(activity_id, f"Activity {activity_id}", category, minutes, day)


@pytest.fixture
def store():
    s = ActivityStore(MemoryStorage(), clock=lambda: TODAY)
    s.load()
    return s


@pytest.fixture
def renderer():
    return MagicMock(spec=ChartRenderer)


@pytest.fixture
def coordinator(store, renderer):
    return ReportCoordinator(store, renderer, clock=lambda: TODAY)


def test_empty_store_gives_zeroed_report(coordinator):
    report = coordinator.refresh('all')

    assert report['stats']['total_activities'] == 0
    assert report['stats']['total_time'] == "0h 0m"
    assert report['stats']['today_minutes'] == 0
    assert report['productivity']['productive_percent'] == 0
    assert report['categories'] == []
    assert report['daily_summary'] == []
    assert [i['title'] for i in report['insights']] == ["No Data Yet"]
    assert report['series']['category']['data'] == []
    assert len(report['series']['trend']['data']) == 14


def test_successful_mutation_triggers_refresh(store, coordinator, renderer):
    store.add(rec(1, "study", 120))
    renderer.render.assert_called_once()

    store.delete_by_id(999)
    assert renderer.render.call_count == 1

    store.delete_by_id(1)
    assert renderer.render.call_count == 2


def test_selected_window_is_kept_across_refreshes(store, coordinator, renderer):
    store.add(rec(1, "work", 60, TODAY - timedelta(days=20)))
    coordinator.refresh('today')

    store.add(rec(2, "work", 30))
    assert coordinator.window == 'today'
    series = renderer.render.call_args[0][0]
    assert series['category']['data'] == [30]


def test_unknown_window_falls_back_to_all(store, coordinator):
    store.add(rec(1, "work", 60, TODAY - timedelta(days=400)))
    report = coordinator.refresh('decade')
    assert report['window'] == 'all'
    assert report['stats']['window_activities'] == 1


def test_default_window_is_week(store, coordinator):
    store.add(rec(1, "work", 60, TODAY - timedelta(days=10)))
    store.add(rec(2, "work", 45, TODAY - timedelta(days=2)))
    report = coordinator.refresh()

    assert report['window'] == 'week'
    assert report['stats']['total_activities'] == 2
    assert report['stats']['window_minutes'] == 45


def test_today_total_ignores_selected_window(store, coordinator):
    store.add(rec(1, "study", 90))
    store.add(rec(2, "study", 30, TODAY - timedelta(days=1)))
    report = coordinator.refresh('month')
    assert report['stats']['today_minutes'] == 90
    assert report['stats']['today_time'] == "1h 30m"


def test_series_shapes(store, coordinator):
    store.add(rec(1, "study", 90, TODAY - timedelta(days=1)))
    store.add(rec(2, "sleep", 480, TODAY - timedelta(days=1)))
    store.add(rec(3, "work", 30))
    series = coordinator.refresh('week')['series']

    assert series['category'] == {'type': 'pie', 'labels': ['Sleep', 'Study', 'Work'], 'data': [480, 90, 30]}
    assert series['productivity'] == {
        'type': 'doughnut', 'labels': ['Productive', 'Unproductive'], 'data': [120, 480],
    }
    assert series['daily']['type'] == 'bar'
    assert series['daily']['labels'] == ['2026-10-17', '2026-10-18']
    assert series['daily']['data'] == [9.5, 0.5]
    assert series['trend']['type'] == 'line'
    assert series['trend']['labels'][-1] == '2026-10-18'
    assert series['trend']['data'][-2:] == [9.5, 0.5]


def test_report_is_json_serializable(store, coordinator):
    store.add(rec(1, "exercise", 45))
    store.add(rec(2, "social", 120, TODAY - timedelta(days=1)))
    report = coordinator.refresh('all')

    decoded = json.loads(json.dumps(report))
    assert decoded['daily_summary'][0]['label'] == "Today"
    assert decoded['daily_summary'][1]['label'] == "Yesterday"
    assert decoded['categories'][0]['label'] == "👥 Social"
    assert decoded['categories'][0]['total_time'] == "2h 0m"


def test_latest_series_renderer_replaces_previous(store):
    renderer = LatestSeriesRenderer()
    coordinator = ReportCoordinator(store, renderer, clock=lambda: TODAY)
    assert renderer.series is None

    store.add(rec(1, "work", 60))
    first = renderer.series
    coordinator.refresh('today')

    assert renderer.series is not first
    assert renderer.series['category']['data'] == [60]


def test_suggestions_use_whole_history(store, coordinator):
    coordinator.refresh('today')
    store.add(rec(1, "exercise", 30, TODAY - timedelta(days=30)))
    titles = [s['title'] for s in coordinator.suggestions()]
    assert "Time to Log Again" in titles
