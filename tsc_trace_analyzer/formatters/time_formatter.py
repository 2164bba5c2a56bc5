"""
Time and size formatting utilities for human-readable output.
"""


def format_duration(ms: float) -> str:
    """
    Format time in milliseconds to a human-readable string.

    Args:
        ms: Time in milliseconds

    Returns:
        Formatted time string (e.g., "<0.001ms", "250.00µs", "123.45ms",
        "2.34s", "1m 30.5s")
    """
    if ms < 0.001:
        return "<0.001ms"
    elif ms < 1:
        return f"{ms * 1000:.2f}µs"
    elif ms < 1000:
        return f"{ms:.2f}ms"
    elif ms < 60000:
        return f"{ms / 1000:.2f}s"
    else:
        minutes = int(ms // 60000)
        seconds = (ms % 60000) / 1000
        return f"{minutes}m {seconds:.1f}s"


def format_bytes(size: int) -> str:
    """
    Format a byte count using binary units.

    Args:
        size: Number of bytes

    Returns:
        Formatted size string (e.g., "0 Bytes", "1.5 KB", "2 MB")
    """
    if size <= 0:
        return "0 Bytes"
    units = ['Bytes', 'KB', 'MB', 'GB']
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    # :g drops trailing zeros ("2 MB", not "2.00 MB")
    return f"{round(value, 2):g} {units[index]}"


def format_percentage(value: float, total: float) -> str:
    if total == 0:
        return "0%"
    return f"{value / total * 100:.1f}%"


def format_event_count(count: int) -> str:
    """Abbreviate large counts (1.2K, 3.4M)."""
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}K"
    return str(count)


def format_kind_name(kind_name: str) -> str:
    """Shorten a SyntaxKind name for narrow columns."""
    return (
        kind_name
        .replace('Expression', 'Expr', 1)
        .replace('Statement', 'Stmt', 1)
        .replace('Declaration', 'Decl', 1)
        .replace('Literal', 'Lit', 1)
        .strip()
    )
