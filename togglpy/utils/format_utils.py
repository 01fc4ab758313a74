"""Formatting utility functions for togglPy."""


def format_duration(seconds: int) -> str:
    """Format a duration for a single entry or summary line.

    Seconds are dropped, minutes never carry into a third unit and are
    not zero padded.

    Args:
        seconds: Number of seconds

    Returns:
        "<N> h <M> min" when there is at least one hour, else "<M> min"
    """
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = (seconds // 60) % 60
    if hours > 0:
        return f"{hours} h {minutes} min"
    return f"{minutes} min"


def format_total(seconds: int) -> str:
    """Format a total for a report header.

    Args:
        seconds: Number of seconds

    Returns:
        "⌛<H> hours <MM> minutes" with minutes zero padded
    """
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    minutes = seconds // 60 - hours * 60
    return f"⌛{hours} hours {minutes:02} minutes"


def mask_token(token: str) -> str:
    """Hide all but the last four characters of a credential.

    Args:
        token: API token

    Returns:
        Masked token
    """
    if not token:
        return ""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]
