"""Pydantic schemas for API request/response validation."""

from songrank.schemas.common import ErrorDetail, ErrorResponse
from songrank.schemas.song import (
    LeaderboardResponse,
    PairResponse,
    RankedEntry,
    Song,
    VoteRequest,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "LeaderboardResponse",
    "PairResponse",
    "RankedEntry",
    "Song",
    "VoteRequest",
]
