"""Incremental aggregate arithmetic for training scores."""


def running_average(current_average: float, count: int, value: float) -> float:
    """Fold ``value`` into an average of ``count`` previous values.

    Computed exactly as ``(avg * n + v) / (n + 1)``.
    """
    return (current_average * count + value) / (count + 1)


def best_score(current_best: float | None, value: float) -> float:
    """Return the higher of the current best (missing counts as zero) and ``value``."""
    return max(current_best or 0, value)
