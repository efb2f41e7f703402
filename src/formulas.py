"""Pure math formulas - no dependencies, easily testable."""
from math import floor, isfinite, sqrt

BARRIER_RATIO = 0.80
CANDIDATE_MIN_RATIO = 0.20


def electoral_quotient(valid_votes: int, available_seats: int) -> int:
    """Votes required per seat."""
    return valid_votes // available_seats


def barrier_threshold(quotient: int) -> int:
    """Minimum votes to take part in remainder distribution (80% EQ)."""
    return floor(quotient * BARRIER_RATIO)


def candidate_min_votes(quotient: int) -> int:
    """Minimum individual votes for a candidate to be elected (20% EQ)."""
    return floor(quotient * CANDIDATE_MIN_RATIO)


def highest_averages(
    votes: dict[str, int],
    seats: int,
    start: dict[str, int] | None = None,
    caps: dict[str, int] | None = None,
) -> dict[str, int]:
    """D'Hondt: award `seats` one at a time to max votes/(current+1).

    Ties go to higher raw votes, then to the earlier key in `votes`.
    Entities with zero votes never win. Returns seats won here only.
    """
    current = dict(start or {})
    won = {k: 0 for k in votes}

    for _ in range(seats):
        best, best_avg = None, 0.0
        for key, v in votes.items():
            held = current.get(key, 0) + won[key]
            if caps is not None and held >= caps.get(key, 0):
                continue
            avg = v / (held + 1)
            if avg > best_avg or (best is not None and avg == best_avg and v > votes[best]):
                best, best_avg = key, avg
        if best is None:
            break
        won[best] += 1

    return won


def ols_slope(points: list[tuple[float, float]]) -> float:
    """Least-squares slope of y on x."""
    n = len(points)
    if n < 2:
        return 0.0

    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_x2 = sum(x * x for x, _ in points)

    denom = n * sum_x2 - sum_x * sum_x
    if denom == 0:
        return 0.0
    slope = (n * sum_xy - sum_x * sum_y) / denom
    return slope if isfinite(slope) else 0.0


def sample_stdev(values: list[float]) -> float:
    """Standard deviation with n-1 denominator."""
    n = len(values)
    if n < 2:
        return 0.0
    mean = sum(values) / n
    return sqrt(sum((v - mean) ** 2 for v in values) / (n - 1))


def avg_growth_rate(values: list[float]) -> float:
    """Mean period-over-period relative change, skipping zero priors."""
    rates = [(cur - prev) / prev for prev, cur in zip(values, values[1:]) if prev > 0]
    return sum(rates) / len(rates) if rates else 0.0


def interval_indices(n: int, confidence: float) -> tuple[int, int]:
    """Sorted-sample indices bounding a central `confidence` interval."""
    tail = (1 - confidence) / 2
    lower = floor(n * tail)
    upper = floor(n * (1 - tail))
    return min(lower, n - 1), min(upper, n - 1)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))
