"""Printing utilities."""


def limit_string(text: str, length: int) -> str:
    """Cut ``text`` to ``length`` characters, ending with '...' when cut."""
    if len(text) <= length:
        return text
    if length < 3:
        return text[:max(length, 0)]
    return text[:length - 3] + "..."


def format_duration(seconds: float) -> str:
    """Render an elapsed time as '850ms', '12.345s' or '2m 3.456s'."""
    millis = int(round(seconds * 1000))
    if millis < 1000:
        return f"{millis}ms"
    if millis < 60_000:
        return f"{millis / 1000:.3f}s"
    minutes, rest = divmod(millis, 60_000)
    return f"{minutes}m {rest / 1000:.3f}s"
