"""Backoff utilities.

`exponential_delay` gives the wait before retry number `retry` (1-based):
`base_delay * 2^(retry-1)`, never more than `max_delay`.
"""


def exponential_delay(retry: int, base_delay: float, max_delay: float, multiplier: float = 2.0) -> float:
    if retry < 1:
        raise ValueError("retry numbering starts at 1")
    return min(base_delay * multiplier ** (retry - 1), max_delay)
