"""In-memory record store standing in for Postgres."""

import asyncio
from typing import Any


def make_rows(count: int, rating: int = 1000) -> list[dict[str, Any]]:
    return [
        {
            "song": f"Song {i:02d}",
            "artist": "Taylor Swift",
            "writer": "Taylor Swift",
            "album": f"Album {i % 3}",
            "year": str(2006 + i),
            "rating": rating,
        }
        for i in range(count)
    ]


class FakeRecordStore:
    """Records every durable write; can be told to fail."""

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        *,
        votes: int = 0,
        unreachable: bool = False,
        connect_error: Exception | None = None,
        fail_writes: bool = False,
    ) -> None:
        self.rows = rows if rows is not None else make_rows(4)
        self.counters: dict[str, int] = {"votes": votes}
        self.unreachable = unreachable
        self.connect_error = connect_error if connect_error is not None else OSError("connection refused")
        self.fail_writes = fail_writes
        self.saved: list[tuple[str, int]] = []
        self.write_attempts = 0

    async def fetch_songs(self) -> list[dict[str, Any]]:
        if self.unreachable:
            raise self.connect_error
        return [dict(row) for row in self.rows]

    async def save_rating(self, song_id: str, rating: int) -> None:
        self.write_attempts += 1
        # Yield so concurrent votes actually interleave.
        await asyncio.sleep(0)
        if self.fail_writes:
            raise OSError("connection reset")
        self.saved.append((song_id, rating))

    async def fetch_counter(self, key: str) -> int:
        if self.unreachable:
            raise self.connect_error
        return self.counters.get(key, 0)

    async def increment_counter(self, key: str) -> int:
        self.write_attempts += 1
        await asyncio.sleep(0)
        if self.fail_writes:
            raise OSError("connection reset")
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]
