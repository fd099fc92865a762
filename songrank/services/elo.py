"""Elo rating math.

Pure functions, no state. Rating deltas are truncated toward zero when cast
back to integers, so a heavy favourite beating a much weaker song can move
neither rating.
"""

K_FACTOR = 32

# Outcomes from song A's point of view
WIN = 1.0
DRAW = 0.5
LOSS = 0.0


def expected_score(rating_a: int, rating_b: int) -> float:
    """Probability that A is judged the better song, in [0, 1].

    Gaps too wide for a float saturate at 0.0 or 1.0.
    """
    diff = rating_b - rating_a
    try:
        return 1 / (1 + 10 ** (diff / 400))
    except OverflowError:
        return 0.0 if diff > 0 else 1.0


def update_ratings(rating_a: int, rating_b: int, outcome: float = WIN) -> tuple[int, int]:
    """Compute new ratings for A and B after one comparison.

    Args:
        rating_a: Current rating of A.
        rating_b: Current rating of B.
        outcome: Actual score for A (1.0 win, 0.5 draw, 0.0 loss).

    Returns:
        (new_rating_a, new_rating_b)
    """
    delta_a = K_FACTOR * (outcome - expected_score(rating_a, rating_b))
    delta_b = K_FACTOR * ((1 - outcome) - expected_score(rating_b, rating_a))
    # int() truncates toward zero
    return rating_a + int(delta_a), rating_b + int(delta_b)
