from telegram import InlineKeyboardButton, InlineKeyboardMarkup

# Главное меню
def main_menu_keyboard():
    keyboard = [
        [InlineKeyboardButton("🧭 Dashboard", callback_data="view:dashboard"),
         InlineKeyboardButton("✅ Daily", callback_data="view:daily")],
        [InlineKeyboardButton("📊 Analytics", callback_data="view:analytics")]
    ]
    return InlineKeyboardMarkup(keyboard)

# Чек-лист дня
def day_keyboard(view, is_reflecting=False):
    keyboard = []
    for _, items in view.sections:
        for entry in items:
            mark = "✅" if entry.completed else "⭕"
            keyboard.append([InlineKeyboardButton(
                f"{mark} {entry.item.time} {entry.item.emoji}",
                callback_data=f"toggle:{entry.item.id}"
            )])

    if view.can_reflect:
        label = "⏳ Logging..." if is_reflecting else "💾 Save daily achievement"
        keyboard.append([InlineKeyboardButton(label, callback_data="reflect")])

    nav = [InlineKeyboardButton("◀️", callback_data="nav:-1")]
    if not view.is_today:
        nav.append(InlineKeyboardButton("Today", callback_data="nav:today"))
        nav.append(InlineKeyboardButton("▶️", callback_data="nav:1"))
    keyboard.append(nav)
    keyboard.append([InlineKeyboardButton("🧭 Dashboard", callback_data="view:dashboard")])
    return InlineKeyboardMarkup(keyboard)

def dashboard_keyboard(has_next_task=False):
    row = [InlineKeyboardButton("➡️ Open daily", callback_data="view:daily")]
    if has_next_task:
        row = [InlineKeyboardButton("➡️ Next up", callback_data="view:daily")]
    return InlineKeyboardMarkup([
        row,
        [InlineKeyboardButton("📊 Analytics", callback_data="view:analytics")]
    ])

def analytics_keyboard(is_ai_loading=False):
    refresh = "⏳ Analyzing..." if is_ai_loading else "🔄 Refresh AI review"
    return InlineKeyboardMarkup([
        [InlineKeyboardButton(refresh, callback_data="review")],
        [InlineKeyboardButton("⬇️ Export JSON", callback_data="export"),
         InlineKeyboardButton("🧭 Dashboard", callback_data="view:dashboard")]
    ])
