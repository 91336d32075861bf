from __future__ import annotations


def percent_complete(bytes_sent: int, total_bytes: int | None) -> int | None:
    """
    Whole percentage of bytes handed to the transport, rounded half up.
    Returns None when the total is unknown, so callers keep the last value.
    """
    if not total_bytes or total_bytes <= 0:
        return None
    pct = (int(bytes_sent) * 200 + total_bytes) // (2 * total_bytes)
    return max(0, min(100, pct))
