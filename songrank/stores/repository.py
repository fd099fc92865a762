"""Durable record store for songs and counters.

The in-memory catalog is authoritative while the process runs; this
repository is its write-through mirror and the source it loads from at start.
"""

from typing import Any

from sqlalchemy import select, update

from songrank.models import Counter, Song
from songrank.stores.postgres import get_session


class SongRepository:
    """SQLAlchemy-backed implementation of the catalog's record store."""

    async def fetch_songs(self) -> list[dict[str, Any]]:
        """Read every song row as a plain mapping (decoded by the catalog)."""
        async with get_session() as session:
            result = await session.execute(
                select(Song.song, Song.artist, Song.writer, Song.album, Song.year, Song.rating)
            )
            return [dict(row) for row in result.mappings().all()]

    async def save_rating(self, song_id: str, rating: int) -> None:
        async with get_session() as session:
            await session.execute(
                update(Song).where(Song.song == song_id).values(rating=rating)
            )

    async def fetch_counter(self, key: str) -> int:
        async with get_session() as session:
            result = await session.execute(select(Counter.count).where(Counter.key == key))
            return result.scalar_one_or_none() or 0

    async def increment_counter(self, key: str) -> int:
        """Increment a counter in place and return its new value.

        Creates the row on first use.
        """
        async with get_session() as session:
            result = await session.execute(
                update(Counter)
                .where(Counter.key == key)
                .values(count=Counter.count + 1)
                .returning(Counter.count)
            )
            count = result.scalar_one_or_none()
            if count is None:
                session.add(Counter(key=key, count=1))
                count = 1
            return count
