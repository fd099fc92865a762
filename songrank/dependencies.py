"""FastAPI dependencies exposing the process-wide voting state.

State is built once in the app lifespan and kept on ``app.state``; tests
swap it out with ``app.dependency_overrides``.
"""

from fastapi import Request

from songrank.services.catalog import SongCatalog, VoteCounter
from songrank.services.voting import VoteProcessor


def get_catalog(request: Request) -> SongCatalog:
    return request.app.state.catalog


def get_vote_counter(request: Request) -> VoteCounter:
    return request.app.state.vote_counter


def get_vote_processor(request: Request) -> VoteProcessor:
    return request.app.state.vote_processor
