"""API routes."""

from fastapi import APIRouter

from songrank.routes import voting

api_router = APIRouter()

# Voting endpoints (pair, vote, leaderboard)
api_router.include_router(voting.router, prefix="/v1", tags=["voting"])
