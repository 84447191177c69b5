# ui/progress.py

def progress_bar(percent: int, length: int = 12):
    """Текстовый progress bar из emoji-блоков"""
    percent = max(0, min(100, int(round(percent))))
    done = int(length * percent // 100)
    todo = length - done
    return "🟩" * done + "⬜️" * todo + f" {percent}%"

def efficiency_bar(percent: float, length: int = 10):
    """Полоса эффективности: зелёная выше 80%, синяя выше 50%, иначе оранжевая"""
    if percent > 80:
        block = "🟩"
    elif percent > 50:
        block = "🟦"
    else:
        block = "🟧"
    done = int(length * max(0.0, min(100.0, percent)) // 100)
    return block * done + "⬜️" * (length - done)

def heat_cell(percent: int):
    """Клетка тепловой карты по проценту дня"""
    if percent <= 0:
        return "⬜️"
    if percent < 34:
        return "🟪"
    if percent < 67:
        return "🟦"
    if percent < 100:
        return "🟩"
    return "🌟"

def trend_column(percent: int):
    """Символ столбика для недельного тренда"""
    levels = "▁▂▃▄▅▆▇█"
    if percent <= 0:
        return "·"
    index = min(len(levels) - 1, int(percent * len(levels) / 100))
    return levels[index]

def streak_emoji(streak: int):
    if streak >= 30:
        return "🏆"
    elif streak >= 7:
        return "🔥"
    elif streak >= 3:
        return "✨"
    else:
        return "🔹"
