"""Text formatting helpers for terminal output."""


def truncate_text(text: str | None, max_length: int = 100) -> str:
    """Truncate text to max_length, appending an ellipsis when cut.

    Args:
        text: Text to truncate (None is treated as empty)
        max_length: Maximum length of the returned string

    Returns:
        Possibly truncated text
    """
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    if max_length <= 3:
        return text[:max_length]
    return text[: max_length - 3] + "..."


def format_duration(duration_ms: int | None) -> str:
    """Format a millisecond duration as H:MM:SS or M:SS.

    Returns "Unknown" when the duration is missing.
    """
    if duration_ms is None:
        return "Unknown"

    total_seconds = duration_ms // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if hours > 0:
        return f"{hours:d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:d}:{seconds:02d}"
