"""Voting endpoints.

GET  /v1/pair        - Two random songs to compare
POST /v1/vote        - Record a vote, returns the next pair
GET  /v1/leaderboard - All songs ranked by rating, plus total votes

Routers are thin: call services for business logic.
"""

from fastapi import APIRouter, Depends

from songrank.dependencies import get_catalog, get_vote_counter, get_vote_processor
from songrank.schemas import ErrorResponse, LeaderboardResponse, PairResponse, VoteRequest
from songrank.services.catalog import SongCatalog, VoteCounter
from songrank.services.leaderboard import get_leaderboard
from songrank.services.pairing import select_pair
from songrank.services.voting import VoteProcessor
from songrank.settings import get_settings

router = APIRouter()


@router.get("/pair", response_model=PairResponse)
async def get_pair(catalog: SongCatalog = Depends(get_catalog)) -> PairResponse:
    """Get two distinct random songs."""
    song1, song2 = select_pair(catalog)
    return PairResponse(song1=song1, song2=song2)


@router.post(
    "/vote",
    response_model=PairResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def post_vote(
    vote: VoteRequest,
    processor: VoteProcessor = Depends(get_vote_processor),
) -> PairResponse:
    """Record that ``winner`` beat ``loser``.

    Returns:
        The next pair to show.
    """
    song1, song2 = await processor.process_vote(vote.winner, vote.loser)
    return PairResponse(song1=song1, song2=song2)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard_view(
    catalog: SongCatalog = Depends(get_catalog),
    counter: VoteCounter = Depends(get_vote_counter),
) -> LeaderboardResponse:
    """Get every song ranked by rating (ties broken by title)."""
    settings = get_settings()
    return await get_leaderboard(catalog, counter, cache_ttl=settings.leaderboard_cache_ttl)
