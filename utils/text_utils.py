import html

# Лимит текста всплывающего ответа на кнопку в Telegram
ALERT_LIMIT = 200

# Запас под разметку экрана вокруг текста от AI
AI_TEXT_LIMIT = 3000

def escape_html(text) -> str:
    """Экранирование для parse_mode=HTML; кавычки Telegram принимает как есть"""
    return html.escape(str(text), quote=False)

def truncate(text: str, max_len: int = 64) -> str:
    return text if len(text) <= max_len else text[:max_len - 1] + "…"

def bold(text) -> str:
    return f"<b>{escape_html(text)}</b>"

def italic(text) -> str:
    return f"<i>{escape_html(text)}</i>"

def strike(text) -> str:
    return f"<s>{escape_html(text)}</s>"

def code(text) -> str:
    return f"<code>{escape_html(text)}</code>"

def ai_text(text: str, wrap=None) -> str:
    """Текст от модели: обрезка до AI_TEXT_LIMIT, экранирование и необязательная обёртка"""
    clipped = truncate(text.strip(), AI_TEXT_LIMIT)
    return wrap(clipped) if wrap else escape_html(clipped)
