"""Data stores for persistence and caching.

Stores handle:
- PostgreSQL: DB session, song/counter repository
- Redis: leaderboard payload cache with TTL

No rating or ranking logic in stores - that belongs in services.
"""
