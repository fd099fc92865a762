"""Pick two distinct songs to compare.

Sampling is over the catalog's fixed id list, without replacement, so every
unordered pair is equally likely and the draw always terminates.
"""

import random

from songrank.schemas import Song
from songrank.services.catalog import MIN_CATALOG_SIZE, SongCatalog

_rng = random.Random()


def select_pair(catalog: SongCatalog, rng: random.Random | None = None) -> tuple[Song, Song]:
    """Return two different songs chosen uniformly at random.

    Args:
        catalog: Loaded catalog (at least two songs).
        rng: Optional random source, for reproducible draws.

    Returns:
        (song1, song2) in random presentation order.
    """
    if len(catalog) < MIN_CATALOG_SIZE:
        raise ValueError(f"Need at least {MIN_CATALOG_SIZE} songs to form a pair")
    first, second = (rng or _rng).sample(range(len(catalog)), 2)
    return catalog.song_at(first), catalog.song_at(second)
