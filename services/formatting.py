from datetime import datetime, timezone
from typing import Optional


def format_datetime(value: Optional[datetime]) -> str:
    """Render like "Jan 5, 2024, 10:30:00 AM UTC". Rendered in UTC; naive values are taken as UTC."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.strftime('%b')} {value.day}, {value.year}, "
        f"{hour:02d}:{value.minute:02d}:{value.second:02d} {meridiem} UTC"
    )


def format_duration(duration_ms: float) -> str:
    """850 -> "850ms", 12300 -> "12.3s", 125000 -> "2m 5s"."""
    if duration_ms < 1000:
        return f"{duration_ms:g}ms"
    if duration_ms < 60000:
        return f"{duration_ms / 1000:.1f}s"
    minutes = int(duration_ms // 60000)
    seconds = int((duration_ms % 60000) // 1000)
    return f"{minutes}m {seconds}s"
