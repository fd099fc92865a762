"""SQLAlchemy ORM models.

Models represent database tables:
- songs: The fixed catalog with current ratings
- counters: Named integer counters (global vote count)
"""

from songrank.models.counter import Counter
from songrank.models.song import Song

__all__ = ["Counter", "Song"]
