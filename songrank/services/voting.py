"""Vote processing.

Flow for one vote:
1. Resolve winner and loser (unknown id -> UnknownSongError, nothing changes)
2. Compute new ratings with the Elo update (winner scores 1.0)
3. Write both ratings through the catalog
4. Increment the global vote counter (and drop the cached leaderboard)
5. Hand back a fresh pair to show next

Partial persistence failures are logged by the catalog and never undone.
"""

from contextlib import AsyncExitStack
import logging
import random

from songrank.schemas import Song
from songrank.services.catalog import SongCatalog, VoteCounter
from songrank.services.elo import WIN, update_ratings
from songrank.services.leaderboard import invalidate_leaderboard
from songrank.services.pairing import select_pair

logger = logging.getLogger("uvicorn.error")


class InvalidVoteError(ValueError):
    """A vote that names the same song as winner and loser."""


class VoteProcessor:
    """Applies votes to a catalog and counter it does not own."""

    def __init__(
        self,
        catalog: SongCatalog,
        counter: VoteCounter,
        rng: random.Random | None = None,
    ) -> None:
        self.catalog = catalog
        self.counter = counter
        self._rng = rng

    async def process_vote(self, winner_id: str, loser_id: str) -> tuple[Song, Song]:
        """Record that ``winner_id`` beat ``loser_id`` and return the next pair.

        Raises:
            UnknownSongError: Either id is not in the catalog.
            InvalidVoteError: Both ids name the same song.
        """
        # Resolve both before touching anything.
        self.catalog.require(winner_id)
        self.catalog.require(loser_id)
        if winner_id == loser_id:
            raise InvalidVoteError("A song cannot be voted against itself")

        async with AsyncExitStack() as stack:
            # Fixed lock order keeps overlapping votes from deadlocking.
            for song_id in sorted((winner_id, loser_id)):
                await stack.enter_async_context(self.catalog.lock_for(song_id))

            winner = self.catalog.require(winner_id)
            loser = self.catalog.require(loser_id)
            old_winner, old_loser = winner.rating, loser.rating
            new_winner, new_loser = update_ratings(old_winner, old_loser, WIN)

            await self.catalog.update(winner_id, new_winner)
            await self.catalog.update(loser_id, new_loser)

        votes = await self.counter.increment()
        await invalidate_leaderboard()
        logger.info(
            "[vote] winner=%r %s->%s loser=%r %s->%s votes=%s",
            winner_id,
            old_winner,
            new_winner,
            loser_id,
            old_loser,
            new_loser,
            votes,
        )
        return select_pair(self.catalog, self._rng)
