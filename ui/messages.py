from ui.progress import progress_bar, efficiency_bar, heat_cell, trend_column, streak_emoji
from utils.datetime_utils import format_date
from core.analytics import window_average
from utils.text_utils import ai_text, bold, code, escape_html, italic, strike, truncate

SAVE_WARNING = "⚠️ Could not save to storage. Your progress is kept and will be saved with the next change."

def welcome_message(first_name=None):
    return (
        f"Hi, {escape_html(first_name or 'champion')}! 👋\n"
        "I track your daily routine, streaks and progress.\n"
        "Use /today to check off tasks or /help for all commands."
    )

def help_message():
    return (
        "<b>Commands</b>\n"
        "/dashboard - command center: progress, streak, next task\n"
        "/today - daily checklist for the selected date\n"
        "/stats - analytics, 30-day heatmap and AI insight\n"
        "/review - generate an AI performance review\n"
        "/reflect - save an AI summary of the selected day\n"
        "/export - download a JSON backup\n\n"
        "Send a backup <code>.json</code> file to restore it."
    )

def date_label(date_key, is_today):
    prefix = "Today" if is_today else "Archive"
    return f"{prefix} · {format_date(date_key)}"

def day_message(view):
    """Чек-лист дня по частям суток"""
    lines = [
        f"📅 {bold(date_label(view.date, view.is_today))}",
        "",
        f"🎯 <b>Success Score: {view.percent}%</b>",
        progress_bar(view.percent),
        f"{view.done} Logged · {view.left} Left",
    ]

    for category, items in view.sections:
        if not items:
            continue
        lines.append("")
        lines.append(f"<b>{category.value} Schedule</b>")
        for entry in items:
            mark = "✅" if entry.completed else "⭕"
            activity = strike(entry.item.activity) if entry.completed else escape_html(entry.item.activity)
            lines.append(f"{mark} {code(entry.item.time.rjust(8))} {entry.item.emoji} {activity}")

    if view.reflection:
        lines.append("")
        lines.append(f"📖 {ai_text(view.reflection, italic)}")
    elif view.can_reflect:
        lines.append("")
        lines.append("🎉 <b>Day Fully Completed!</b> Tap below to save your achievement.")

    return "\n".join(lines)

def dashboard_message(view):
    """Командный центр"""
    header = "Live Today" if view.is_today else "Selected Date"
    lines = [
        f"🧭 <b>Command Center</b> · {header}",
        "",
        f"🎯 Progress: <b>{view.percent}%</b>",
        f"{streak_emoji(view.streak)} Day Streak: <b>{view.streak}</b>",
    ]

    if view.next_task:
        task = view.next_task
        lines.append("")
        lines.append(f"⏭ <b>Next Up</b> · 🕒 {task.time}")
        lines.append(f"{task.emoji} {escape_html(task.activity)}")

    lines.append("")
    lines.append(f"📈 <b>Weekly Trend</b> · avg {window_average(view.weekly)}%")
    lines.append("<code>" + " ".join(trend_column(p.percent) * 3 for p in view.weekly) + "</code>")
    lines.append("<code>" + " ".join(p.weekday[:3] for p in view.weekly) + "</code>")

    lines.append("")
    lines.append("🥧 <b>Cycle Efficiency</b>")
    for stat in view.categories:
        lines.append(f"{stat.category.value:<9} {efficiency_bar(stat.percent)} {round(stat.percent)}%")

    return "\n".join(lines)

def heatmap(points, columns=7):
    rows = []
    for start in range(0, len(points), columns):
        rows.append("".join(heat_cell(p.percent) for p in points[start:start + columns]))
    return "\n".join(rows)

def analytics_message(view):
    snapshot = view.snapshot
    best = format_date(snapshot.best_day) if snapshot.best_day else "-"
    insight = "⏳ Analyzing..." if view.is_ai_loading else ai_text(view.insight)
    return (
        "🏆 <b>Analytics</b>\n\n"
        f"📊 Average completion: <b>{snapshot.average_completion}%</b>\n"
        f"{streak_emoji(snapshot.streak)} Current streak: <b>{snapshot.streak}</b> days\n"
        f"🥇 Longest streak: <b>{snapshot.longest_streak}</b> days\n"
        f"✅ Tasks done: <b>{snapshot.total_tasks_done}</b>\n"
        f"🌟 Best day: <b>{best}</b>\n\n"
        "🗓 <b>Last 30 days</b>\n"
        f"{heatmap(view.monthly)}\n\n"
        "🤖 <b>AI Performance Review</b>\n"
        f"<i>{insight}</i>"
    )

def reflection_message(date_key, text):
    return f"📖 <b>Saved to archive</b> · {format_date(date_key)}\n\n{ai_text(text)}"

def insight_message(text):
    return f"🤖 <b>AI Performance Review</b>\n\n{ai_text(text, italic)}"

def toggle_notice(result):
    name = result.item.activity if result.item else result.task_id
    return f"{'✅' if result.completed else '↩️'} {truncate(name)}"

def export_caption(payload, filename):
    summary = payload["summary"]
    return (
        f"📦 <b>{escape_html(filename)}</b>\n"
        f"Days logged: {len(payload['history'])}\n"
        f"Reflections: {len(payload['reflections'])}\n"
        f"Average: {summary['averageCompletion']}% · Streak: {summary['streak']} · "
        f"Tasks done: {summary['totalTasksDone']}"
    )
