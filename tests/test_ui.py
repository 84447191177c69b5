from datetime import datetime

from core.ai_service import FallbackResponseProvider
from tests.helpers import make_service
from ui.keyboards import analytics_keyboard, day_keyboard, main_menu_keyboard
from ui.messages import analytics_message, dashboard_message, day_message, heatmap
from ui.progress import efficiency_bar, heat_cell, progress_bar, streak_emoji, trend_column
from utils.text_utils import AI_TEXT_LIMIT, ai_text, escape_html, italic, strike

NOW = datetime(2024, 1, 15, 6, 30)


def _callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_progress_bar():
    assert progress_bar(25, length=4) == "🟩⬜️⬜️⬜️ 25%"
    assert progress_bar(150, length=2) == "🟩🟩 100%"


def test_efficiency_bar_colours():
    assert efficiency_bar(100, length=2) == "🟩🟩"
    assert efficiency_bar(75, length=4) == "🟦🟦🟦⬜️"
    assert efficiency_bar(50, length=2) == "🟧⬜️"


def test_heat_and_trend_cells():
    assert heat_cell(0) == "⬜️"
    assert heat_cell(100) == "🌟"
    assert trend_column(0) == "·"
    assert trend_column(100) == "█"
    assert streak_emoji(7) == "🔥"


def test_escape_html():
    assert escape_html("<b>&") == "&lt;b&gt;&amp;"
    assert escape_html('Say "hi"') == 'Say "hi"'
    assert strike("a<b") == "<s>a&lt;b</s>"


def test_ai_text_is_clipped_and_escaped():
    long_text = "x" * (AI_TEXT_LIMIT + 50)
    assert len(ai_text(long_text)) == AI_TEXT_LIMIT
    assert ai_text("  <done>  ", italic) == "<i>&lt;done&gt;</i>"


def test_day_message_and_keyboard_today():
    service, _ = make_service(NOW)
    service.toggle_task("1")
    view = service.day_view()

    text = day_message(view)
    assert "Today · Jan 15, 2024" in text
    assert "1 Logged · 11 Left" in text
    assert "Morning Schedule" in text

    callbacks = _callbacks(day_keyboard(view))
    assert "toggle:1" in callbacks and "toggle:12" in callbacks
    assert "nav:-1" in callbacks
    assert "nav:1" not in callbacks
    assert "reflect" not in callbacks


def test_day_keyboard_archive_and_full_day():
    service, _ = make_service(NOW)
    service.select_date("2024-01-10")
    for i in range(1, 13):
        service.toggle_task(str(i))
    view = service.day_view()

    assert "Archive · Jan 10, 2024" in day_message(view)
    callbacks = _callbacks(day_keyboard(view))
    assert "nav:1" in callbacks
    assert "reflect" in callbacks


def test_dashboard_message():
    service, _ = make_service(NOW)
    service.toggle_task("1")
    text = dashboard_message(service.dashboard())

    assert "Command Center" in text and "Live Today" in text
    assert "Next Up" in text and "7:00 AM" in text
    assert "Weekly Trend" in text
    assert "Cycle Efficiency" in text


def test_analytics_message_and_heatmap():
    service, _ = make_service(NOW)
    view = service.analytics_view()

    text = analytics_message(view)
    assert "AI Performance Review" in text
    assert FallbackResponseProvider.INSIGHT_PLACEHOLDER in text
    assert len(heatmap(view.monthly).split("\n")) == 5

    view.is_ai_loading = True
    assert "Analyzing..." in analytics_message(view)
    assert "review" in _callbacks(analytics_keyboard())


def test_main_menu_keyboard():
    assert _callbacks(main_menu_keyboard()) == ["view:dashboard", "view:daily", "view:analytics"]
