"""
Text formatting utilities.
"""


def format_duration(seconds: float | None) -> str | None:
    """Format seconds as an M:SS duration string.

    Minutes are not rolled over into hours, so 4503 seconds is "75:03".

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted duration string (e.g., "1:30"), or None
    """
    if seconds is None:
        return None

    seconds = int(seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"
