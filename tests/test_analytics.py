from datetime import datetime

import pytest

from core import analytics
from core.analytics import _round_half_up
from core.catalog import Category, RoutineItem
from core.models import CompletionLog

NOW = datetime(2024, 1, 15, 6, 30)  # понедельник


def _log(entries):
    return CompletionLog(entries)


def test_completion_percent_quarter():
    log = _log({"2024-01-15": ["1", "2", "3"]})
    assert analytics.completion_percent(log, "2024-01-15") == 25


def test_completion_percent_ignores_unknown_ids():
    log = _log({"2024-01-15": ["1", "legacy"]})
    assert analytics.done_count(log, "2024-01-15") == 1
    assert analytics.completion_percent(log, "2024-01-15") == 8


def test_completion_percent_full_day():
    log = _log({"2024-01-15": [str(i) for i in range(1, 13)]})
    assert analytics.completion_percent(log, "2024-01-15") == 100


def test_round_half_up():
    assert _round_half_up(12.5) == 13
    assert _round_half_up(2.5) == 3
    assert _round_half_up(37.49) == 37


def test_percent_rounds_half_up_for_small_catalog():
    catalog = [RoutineItem(str(i), "5:00 AM", f"T{i}", "•", Category.MORNING) for i in range(1, 9)]
    log = _log({"2024-01-15": ["1"]})
    assert analytics.completion_percent(log, "2024-01-15", catalog) == 13


def test_streak_counts_back_from_today():
    log = _log({"2024-01-13": ["1"], "2024-01-14": ["5"], "2024-01-15": ["9"]})
    assert analytics.calculate_streak(log, NOW) == 3


def test_streak_is_zero_when_today_is_empty():
    log = _log({"2024-01-10": ["1", "2"]})
    assert analytics.calculate_streak(log, datetime(2024, 1, 11, 9, 0)) == 0


def test_streak_stops_at_gap():
    log = _log({"2024-01-12": ["1"], "2024-01-14": ["1"], "2024-01-15": ["1"]})
    assert analytics.calculate_streak(log, NOW) == 2


def test_streak_counts_days_with_only_unknown_ids():
    log = _log({"2024-01-14": ["legacy"], "2024-01-15": ["1"]})
    assert analytics.calculate_streak(log, NOW) == 2


def test_streak_respects_safety_bound():
    log = _log({"2024-01-13": ["1"], "2024-01-14": ["1"], "2024-01-15": ["1"]})
    assert analytics.calculate_streak(log, NOW, max_days=2) == 2


def test_longest_streak():
    log = _log({
        "2024-01-01": ["1"], "2024-01-02": ["1"], "2024-01-03": ["1"],
        "2024-01-05": ["1"], "2024-01-06": ["1"],
    })
    assert analytics.longest_streak(log) == 3
    assert analytics.longest_streak(CompletionLog()) == 0


def test_average_uses_active_days_only():
    log = _log({
        "2024-01-13": ["1", "2", "3"],
        "2024-01-14": ["1", "2", "3", "4", "5", "6"],
        "2024-01-15": [],
    })
    # (25% + 50%) / 2 = 37.5 -> 38
    assert analytics.average_completion(log) == 38


def test_average_of_empty_log_is_zero():
    assert analytics.average_completion(CompletionLog()) == 0


def test_total_tasks_done_sums_recorded_ids():
    log = _log({"2024-01-14": ["1", "2", "legacy"], "2024-01-15": ["3"]})
    assert analytics.total_tasks_done(log) == 4


def test_best_day_prefers_latest_on_tie():
    log = _log({"2024-01-13": ["1", "2"], "2024-01-14": ["3", "4"], "2024-01-12": ["1"]})
    assert analytics.best_day(log) == "2024-01-14"
    assert analytics.best_day(CompletionLog()) is None


def test_rolling_window_shape():
    log = _log({"2024-01-15": ["1", "2", "3"], "2024-01-09": ["1"]})
    week = analytics.weekly_trend(log, NOW)

    assert len(week) == 7
    assert [p.date for p in week][0] == "2024-01-09"
    assert week[-1].date == "2024-01-15"
    assert week[-1].weekday == "Mon"
    assert week[-1].day == 15
    assert week[-1].percent == 25
    assert week[0].percent == 8
    assert all(p.percent == 0 for p in week[1:-1])


def test_monthly_window_length_and_order():
    month = analytics.monthly_trend(CompletionLog(), NOW)
    assert len(month) == 30
    assert month[0].date == "2023-12-17"
    assert month[-1].date == "2024-01-15"


def test_rolling_window_edge_sizes():
    assert analytics.rolling_window(CompletionLog(), NOW, 0) == []
    with pytest.raises(ValueError):
        analytics.rolling_window(CompletionLog(), NOW, -1)


def test_window_average():
    points = analytics.rolling_window(_log({"2024-01-15": ["1", "2", "3"]}), NOW, 2)
    assert analytics.window_average(points) == 13
    assert analytics.window_average([]) == 0


def test_category_efficiency_in_display_order():
    log = _log({"2024-01-15": ["1", "2", "5", "7"]})
    stats = analytics.category_efficiency(log, "2024-01-15")

    assert [s.category for s in stats] == Category.ordered()
    assert [s.percent for s in stats] == [50.0, 50.0, 50.0, 0.0]
    assert [(s.done, s.total) for s in stats] == [(2, 4), (1, 2), (1, 2), (0, 4)]


def test_category_efficiency_empty_category_is_zero():
    catalog = [
        RoutineItem("m", "6:00 AM", "M", "•", Category.MORNING),
        RoutineItem("e", "6:00 PM", "E", "•", Category.EVENING),
    ]
    log = _log({"2024-01-15": ["m"]})
    stats = {s.category: s for s in analytics.category_efficiency(log, "2024-01-15", catalog)}

    assert stats[Category.AFTERNOON].percent == 0.0
    assert stats[Category.AFTERNOON].total == 0
    assert stats[Category.MORNING].percent == 100.0


def test_next_upcoming_task():
    log = CompletionLog()
    assert analytics.next_upcoming_task(log, "2024-01-15", NOW).id == "3"


def test_next_upcoming_task_skips_completed():
    log = _log({"2024-01-15": ["3"]})
    assert analytics.next_upcoming_task(log, "2024-01-15", NOW).id == "4"


def test_next_upcoming_task_is_strictly_after_now():
    at_seven = datetime(2024, 1, 15, 7, 0)
    assert analytics.next_upcoming_task(CompletionLog(), "2024-01-15", at_seven).id == "4"


def test_next_upcoming_task_none_late_at_night():
    late = datetime(2024, 1, 15, 23, 30)
    assert analytics.next_upcoming_task(CompletionLog(), "2024-01-15", late) is None


def test_next_upcoming_task_tie_goes_to_catalog_order():
    catalog = [
        RoutineItem("b", "8:00 AM", "B", "•", Category.MORNING),
        RoutineItem("a", "8:00 AM", "A", "•", Category.MORNING),
    ]
    assert analytics.next_upcoming_task(CompletionLog(), "2024-01-15", NOW, catalog).id == "b"


def test_analytics_do_not_mutate_log():
    log = _log({"2024-01-15": ["1"]})
    before = log.to_dict()
    analytics.build_snapshot(log, NOW)
    analytics.monthly_trend(log, NOW)
    assert log.to_dict() == before


def test_snapshot_summary():
    log = _log({"2024-01-14": ["1", "2", "3"], "2024-01-15": ["1", "2", "3"]})
    snapshot = analytics.build_snapshot(log, NOW)

    assert snapshot.to_summary() == {"averageCompletion": 25, "streak": 2, "totalTasksDone": 6}
    assert snapshot.longest_streak == 2
    assert snapshot.best_day == "2024-01-15"
    assert snapshot.generated_for == "2024-01-15"
