from datetime import timedelta

CATEGORY_EMOJIS = {
    'study': '📚',
    'work': '💼',
    'sleep': '😴',
    'leisure': '🎮',
    'exercise': '🏃',
    'social': '👥',
    'other': '📌',
}


def format_duration(total_minutes) -> str:
    """125 -> '2h 5m'."""
    total_minutes = int(total_minutes)
    return f"{total_minutes // 60}h {total_minutes % 60}m"


def format_date(day, today) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day.strftime('%b')} {day.day}, {day.year}"


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def category_label(category: str) -> str:
    """'study' -> '📚 Study'."""
    emoji = CATEGORY_EMOJIS.get(category)
    label = capitalize_first(category)
    return f"{emoji} {label}" if emoji else label
