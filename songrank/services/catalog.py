"""In-memory song catalog and vote counter.

The catalog is loaded once at startup and is the authoritative copy of every
rating for the lifetime of the process. Each change is written through to the
durable record store; a failed write is logged and never rolled back, so the
database may lag behind memory until the next successful write of that row.

Concurrency:
- One asyncio.Lock per song. Voting holds both songs' locks across the
  read-modify-write and the write-through.
- The vote counter increment has no await between read and write, so it is
  atomic on the event loop; its write-through is an in-place SQL increment.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
import logging
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from songrank.schemas import Song

logger = logging.getLogger("uvicorn.error")

MIN_CATALOG_SIZE = 2


class ConfigurationError(RuntimeError):
    """The service cannot start (store unreachable or catalog too small)."""


class UnknownSongError(LookupError):
    """A request referenced a song id that is not in the catalog."""

    def __init__(self, song_id: str) -> None:
        super().__init__(f"Unknown song: {song_id!r}")
        self.song_id = song_id


class RecordStore(Protocol):
    """Durable mirror of the catalog and counters."""

    async def fetch_songs(self) -> list[dict[str, Any]]: ...

    async def save_rating(self, song_id: str, rating: int) -> None: ...

    async def fetch_counter(self, key: str) -> int: ...

    async def increment_counter(self, key: str) -> int: ...


async def _write_through(
    what: str,
    write: Callable[[], Awaitable[object]],
    waits: Sequence[float],
) -> bool:
    """Run a durable write, retrying on the given backoff schedule.

    Returns False (after logging) when every attempt failed.
    """
    for attempt, wait_s in enumerate(waits, 1):
        if wait_s > 0:
            await asyncio.sleep(wait_s)
        try:
            await write()
            return True
        except Exception:
            logger.warning(
                "[catalog] write-through failed what=%s attempt=%s/%s",
                what,
                attempt,
                len(waits),
                exc_info=True,
            )
    logger.error("[catalog] giving up on write-through what=%s; durable copy is stale", what)
    return False


def _decode_song(row: Mapping[str, Any]) -> Song:
    return Song.model_validate(dict(row))


class SongCatalog:
    """Mapping of song id -> Song plus a fixed, ordered list of ids."""

    def __init__(
        self,
        songs: Iterable[Song],
        repository: RecordStore,
        *,
        retry_waits: Sequence[float] = (0.0,),
    ) -> None:
        self._songs: dict[str, Song] = {}
        for song in songs:
            if song.song in self._songs:
                raise ValueError(f"Duplicate song id: {song.song!r}")
            self._songs[song.song] = song
        # Sampling runs over this list; it never changes after construction.
        self._ids: list[str] = list(self._songs)
        self._locks: dict[str, asyncio.Lock] = {song_id: asyncio.Lock() for song_id in self._ids}
        self._repository = repository
        self._retry_waits = tuple(retry_waits) or (0.0,)

    @classmethod
    async def load(
        cls,
        repository: RecordStore,
        *,
        retry_waits: Sequence[float] = (0.0,),
    ) -> "SongCatalog":
        """Load every song from the record store.

        Raises:
            ConfigurationError: The store is unreachable, or fewer than two
                songs could be decoded.
        """
        logger.info("Loading songs...")
        try:
            rows = await repository.fetch_songs()
        except (SQLAlchemyError, OSError, RuntimeError, asyncio.TimeoutError) as e:
            raise ConfigurationError(f"Record store unreachable: {e}") from e

        songs: dict[str, Song] = {}
        skipped = 0
        for row in rows:
            try:
                song = _decode_song(row)
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    "[catalog] skipping undecodable row song=%r errors=%s",
                    row.get("song"),
                    e.errors(include_url=False),
                )
                continue
            if song.song in songs:
                skipped += 1
                logger.warning("[catalog] skipping duplicate song id=%r", song.song)
                continue
            songs[song.song] = song

        if len(songs) < MIN_CATALOG_SIZE:
            raise ConfigurationError(
                f"Catalog needs at least {MIN_CATALOG_SIZE} songs, loaded {len(songs)}"
            )

        logger.info(f"Loaded {len(songs)} songs (skipped {skipped} rows)")
        return cls(songs.values(), repository, retry_waits=retry_waits)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, song_id: object) -> bool:
        return song_id in self._songs

    @property
    def ids(self) -> Sequence[str]:
        """Song ids in load order."""
        return tuple(self._ids)

    def songs(self) -> list[Song]:
        return [self._songs[song_id] for song_id in self._ids]

    def song_at(self, index: int) -> Song:
        return self._songs[self._ids[index]]

    def get(self, song_id: str) -> Song | None:
        """Look up a song; None for unknown ids."""
        return self._songs.get(song_id)

    def require(self, song_id: str) -> Song:
        song = self._songs.get(song_id)
        if song is None:
            raise UnknownSongError(song_id)
        return song

    def lock_for(self, song_id: str) -> asyncio.Lock:
        return self._locks[song_id]

    async def update(self, song_id: str, new_rating: int) -> None:
        """Set a song's rating in memory, then write it through.

        A failed write is logged; the in-memory rating stays as set.
        """
        song = self.require(song_id)
        song.rating = new_rating
        await _write_through(
            f"rating song={song_id!r} rating={new_rating}",
            lambda: self._repository.save_rating(song_id, new_rating),
            self._retry_waits,
        )


class VoteCounter:
    """Process-wide count of processed votes, mirrored to the record store."""

    def __init__(
        self,
        value: int,
        repository: RecordStore,
        *,
        key: str = "votes",
        retry_waits: Sequence[float] = (0.0,),
    ) -> None:
        self._value = value
        self._repository = repository
        self._key = key
        self._retry_waits = tuple(retry_waits) or (0.0,)

    @classmethod
    async def load(
        cls,
        repository: RecordStore,
        *,
        key: str = "votes",
        retry_waits: Sequence[float] = (0.0,),
    ) -> "VoteCounter":
        logger.info("Loading vote counter...")
        try:
            value = await repository.fetch_counter(key)
        except (SQLAlchemyError, OSError, RuntimeError, asyncio.TimeoutError) as e:
            raise ConfigurationError(f"Record store unreachable: {e}") from e
        return cls(value, repository, key=key, retry_waits=retry_waits)

    @property
    def value(self) -> int:
        return self._value

    @property
    def key(self) -> str:
        return self._key

    async def increment(self) -> int:
        """Add exactly one vote and persist it. Returns the new count."""
        self._value += 1
        value = self._value
        await _write_through(
            f"counter key={self._key!r}",
            lambda: self._repository.increment_counter(self._key),
            self._retry_waits,
        )
        return value
