# a2s_monitor/monitor/uptime.py


def format_uptime(seconds) -> str:
    """Форматирует длительность: '1d 2h 3m'. Дни и часы опускаются, если равны нулю; минуты - всегда."""
    seconds = max(int(seconds), 0)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    parts.append(f"{minutes}m")
    return " ".join(parts)
