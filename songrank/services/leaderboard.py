"""Leaderboard ranking.

Ranking logic:
1. Sort by rating DESC
2. Then by song id ASC (deterministic tie-break)
3. Rank = position + 1; equal ratings still get distinct ranks (ordinal)

The payload (entries + vote count) may be cached in Redis for a few seconds.
Votes invalidate it, and a cached payload whose vote count no longer matches
the live counter is treated as a miss. Redis being down only skips the cache.
"""

import logging

from pydantic import ValidationError
from redis.exceptions import RedisError

from songrank.schemas import LeaderboardResponse, RankedEntry
from songrank.services.catalog import SongCatalog, VoteCounter
from songrank.stores.redis import (
    get_leaderboard_cache,
    invalidate_leaderboard_cache,
    set_leaderboard_cache,
)

logger = logging.getLogger("uvicorn.error")


def build_leaderboard(catalog: SongCatalog) -> list[RankedEntry]:
    """Rank every song in the catalog by current rating."""
    ordered = sorted(catalog.songs(), key=lambda s: (-s.rating, s.song))
    return [
        RankedEntry(rank=rank, song=song.song, rating=song.rating)
        for rank, song in enumerate(ordered, start=1)
    ]


async def get_leaderboard(
    catalog: SongCatalog,
    counter: VoteCounter,
    *,
    cache_ttl: int = 0,
) -> LeaderboardResponse:
    """Leaderboard plus vote count, read through the Redis cache when enabled.

    Args:
        catalog: Loaded catalog.
        counter: Global vote counter.
        cache_ttl: Seconds to cache the payload; 0 skips the cache.
    """
    if cache_ttl > 0:
        cached = await _try_get_cached_leaderboard()
        # Vote count versions the payload; a mismatch means it predates a vote.
        if cached is not None and cached.vote_count == counter.value:
            return cached

    response = LeaderboardResponse(entries=build_leaderboard(catalog), vote_count=counter.value)

    if cache_ttl > 0:
        await _try_set_cached_leaderboard(response, cache_ttl)
    return response


async def invalidate_leaderboard() -> None:
    """Drop the cached payload after ratings change."""
    try:
        await invalidate_leaderboard_cache()
    except (RuntimeError, RedisError):
        # Redis may be unavailable in tests/local minimal env.
        return


async def _try_get_cached_leaderboard() -> LeaderboardResponse | None:
    try:
        payload = await get_leaderboard_cache()
    except (RuntimeError, RedisError, ValueError):
        return None
    if not payload:
        return None
    try:
        return LeaderboardResponse.model_validate(payload)
    except ValidationError:
        logger.warning("[leaderboard] ignoring malformed cached payload")
        return None


async def _try_set_cached_leaderboard(response: LeaderboardResponse, ttl: int) -> None:
    try:
        await set_leaderboard_cache(response.model_dump(mode="json", by_alias=True), ttl)
    except (RuntimeError, RedisError):
        return
