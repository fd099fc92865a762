"""Schemas for songs, voting and the leaderboard."""

from typing import Any

from pydantic import BaseModel, Field, StrictStr, field_validator, model_validator


class Song(BaseModel):
    """A catalog song.

    Descriptive fields are opaque display strings. ``rating`` is the only
    value the service ever changes.
    """

    song: str = Field(min_length=1)
    artist: str = ""
    writer: str = ""
    album: str = ""
    year: str = ""
    rating: int

    @field_validator("artist", "writer", "album", "year", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class PairResponse(BaseModel):
    """Two distinct songs to compare."""

    song1: Song
    song2: Song


class VoteRequest(BaseModel):
    """Request body for POST /v1/vote."""

    winner: StrictStr = Field(min_length=1)
    loser: StrictStr = Field(min_length=1)

    @model_validator(mode="after")
    def _distinct(self) -> "VoteRequest":
        if self.winner == self.loser:
            raise ValueError("winner and loser must be different songs")
        return self


class RankedEntry(BaseModel):
    """A single row of the leaderboard."""

    rank: int = Field(ge=1)
    song: str
    rating: int


class LeaderboardResponse(BaseModel):
    """Response payload for GET /v1/leaderboard."""

    entries: list[RankedEntry]
    vote_count: int = Field(alias="voteCount", ge=0)

    model_config = {"populate_by_name": True}
