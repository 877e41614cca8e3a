"""
Tests for the windowed insight rules and the whole-history suggestion engine.
"""
from datetime import date, timedelta

import pytest

from timewise.insights import InsightGenerator
from timewise.models import ActivityRecord
from timewise.suggestions import SuggestionEngine

TODAY = date(2026, 10, 18)


def rec(activity_id, category, minutes, day=TODAY):
    return ActivityRecord(activity_id, f"Activity {activity_id}", category, minutes, day)


def titles(insights):
    return [i.title for i in insights]


@pytest.fixture
def generator():
    return InsightGenerator()


@pytest.fixture
def engine():
    return SuggestionEngine()


# ----------------------------------------------------------------------
# Windowed insights
# ----------------------------------------------------------------------

def test_single_study_session_is_fully_productive(generator):
    insights = generator.generate_insights([rec(1, "study", 120)])

    assert insights[0].title == "Great Productivity!"
    assert "100%" in insights[0].description
    top = insights[-1]
    assert top.title == "Top Category"
    assert "study" in top.description.lower()


def test_short_sleep_over_two_days_warns(generator):
    subset = [rec(1, "sleep", 300, TODAY - timedelta(days=1)), rec(2, "sleep", 300, TODAY)]
    insights = generator.generate_insights(subset)

    sleep = [i for i in insights if i.title == "Insufficient Sleep"]
    assert len(sleep) == 1
    assert sleep[0].severity == "warning"
    assert "5h 0m" in sleep[0].description


def test_empty_subset_gives_single_placeholder(generator):
    insights = generator.generate_insights([])
    assert len(insights) == 1
    assert insights[0].title == "No Data Yet"
    assert insights[0].severity == "info"


@pytest.mark.parametrize("productive, other, expected", [
    (60, 40, "Great Productivity!"),
    (40, 60, "Balanced Day"),
    (39, 61, "Low Productivity"),
])
def test_productivity_thresholds(generator, productive, other, expected):
    subset = [rec(1, "work", productive), rec(2, "other", other)]
    assert titles(generator.generate_insights(subset))[0] == expected


def test_leisure_warning_only_above_forty_percent(generator):
    at_threshold = generator.generate_insights([rec(1, "work", 60), rec(2, "leisure", 40)])
    above = generator.generate_insights([rec(1, "work", 59), rec(2, "leisure", 41)])

    assert "High Leisure Time" not in titles(at_threshold)
    assert "High Leisure Time" in titles(above)


def test_leisure_share_just_over_forty_percent_warns(generator):
    # 403 of 1000 minutes is 40.3%, which rounds down to 40 for display
    insights = generator.generate_insights([rec(1, "work", 597), rec(2, "leisure", 403)])
    leisure = [i for i in insights if i.title == "High Leisure Time"]
    assert len(leisure) == 1
    assert "40%" in leisure[0].description


@pytest.mark.parametrize("minutes", [360, 390, 419, 541, 600])
def test_sleep_gaps_emit_nothing(generator, minutes):
    found = titles(generator.generate_insights([rec(1, "sleep", minutes)]))
    assert "Insufficient Sleep" not in found
    assert "Healthy Sleep" not in found


@pytest.mark.parametrize("minutes", [420, 480, 540])
def test_healthy_sleep_band(generator, minutes):
    assert "Healthy Sleep" in titles(generator.generate_insights([rec(1, "sleep", minutes)]))


def test_sleep_average_uses_distinct_dates_of_subset(generator):
    # 480 min of sleep over two logged days averages 240 -> warning
    subset = [rec(1, "sleep", 480, TODAY - timedelta(days=1)), rec(2, "work", 60, TODAY)]
    assert "Insufficient Sleep" in titles(generator.generate_insights(subset))


def test_exercise_always_exactly_one_entry(generator):
    without = titles(generator.generate_insights([rec(1, "work", 60)]))
    with_exercise = generator.generate_insights([rec(1, "work", 60), rec(2, "exercise", 45)])

    exercise_titles = {"No Exercise Logged", "Staying Active"}
    assert sum(t in exercise_titles for t in without) == 1
    assert "No Exercise Logged" in without
    assert sum(t in exercise_titles for t in titles(with_exercise)) == 1
    active = [i for i in with_exercise if i.title == "Staying Active"][0]
    assert "0h 45m" in active.description


def test_rules_are_evaluated_in_order(generator):
    subset = [rec(1, "leisure", 300), rec(2, "sleep", 200), rec(3, "exercise", 20)]
    assert titles(generator.generate_insights(subset)) == [
        "Low Productivity",
        "High Leisure Time",
        "Insufficient Sleep",
        "Staying Active",
        "Top Category",
    ]


def test_zero_minute_subset_skips_ratio_rules(generator):
    insights = generator.generate_insights([rec(1, "study", 0)])
    found = titles(insights)
    assert "Great Productivity!" not in found
    assert "Low Productivity" not in found
    assert found[-1] == "Top Category"


def test_insight_to_dict_shape(generator):
    entry = generator.generate_insights([rec(1, "work", 60)])[0].to_dict()
    assert set(entry) == {"severity", "icon", "title", "description"}
    assert entry["severity"] in ("success", "info", "warning")


# ----------------------------------------------------------------------
# Smart suggestions
# ----------------------------------------------------------------------

def test_suggestions_empty_history(engine):
    suggestions = engine.analyze_history([], TODAY)
    assert titles(suggestions) == ["No Data Yet"]


def test_logging_streak_suggestion(engine):
    records = [rec(i, "exercise", 30, TODAY - timedelta(days=i)) for i in range(3)]
    assert titles(engine.analyze_history(records, TODAY)) == ["3-Day Streak"]


def test_streak_can_end_yesterday(engine):
    dates = {TODAY - timedelta(days=i) for i in (1, 2, 3, 4)}
    assert engine.logging_streak(dates, TODAY) == 4
    assert engine.logging_streak({TODAY - timedelta(days=2)}, TODAY) == 0


def test_inactivity_and_exercise_gap(engine):
    records = [rec(1, "exercise", 30, TODAY - timedelta(days=10))]
    found = titles(engine.analyze_history(records, TODAY))
    assert "Time to Log Again" in found
    assert "Exercise Gap" in found


def test_most_productive_weekday(engine):
    records = []
    for i in range(14):
        day = TODAY - timedelta(days=i)
        minutes = 240 if day.weekday() == 2 else 60
        records.append(rec(i + 1, "work", minutes, day))
        records.append(rec(100 + i, "exercise", 20, day))

    suggestions = engine.analyze_history(records, TODAY)
    best = [s for s in suggestions if s.title == "Most Productive Day"]
    assert len(best) == 1
    assert "Wednesdays" in best[0].description
    assert engine.most_productive_weekday(records)[0] == 2


def test_weekday_rule_needs_a_week_of_dates(engine):
    records = [rec(i, "work", 60, TODAY - timedelta(days=i)) for i in range(6)]
    assert "Most Productive Day" not in titles(engine.analyze_history(records, TODAY))


@pytest.mark.parametrize("previous, recent, expected", [
    (420, 480, "Sleep Improving"),
    (480, 420, "Sleep Declining"),
])
def test_sleep_trend(engine, previous, recent, expected):
    records = []
    for i in range(14):
        minutes = recent if i < 7 else previous
        records.append(rec(i + 1, "sleep", minutes, TODAY - timedelta(days=i)))

    assert engine.sleep_trend(records, TODAY) == recent - previous
    assert expected in titles(engine.analyze_history(records, TODAY))


def test_small_sleep_change_is_not_reported(engine):
    records = [rec(i + 1, "sleep", 450 if i < 7 else 440, TODAY - timedelta(days=i)) for i in range(14)]
    found = titles(engine.analyze_history(records, TODAY))
    assert "Sleep Improving" not in found
    assert "Sleep Declining" not in found


def test_steady_habits_fallback(engine):
    suggestions = engine.analyze_history([rec(1, "exercise", 30)], TODAY)
    assert titles(suggestions) == ["Steady Habits"]
