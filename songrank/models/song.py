"""Song model.

A song is one catalog entry people vote on. The title doubles as the
primary key; the other descriptive columns are shown as-is and never parsed.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from songrank.stores.postgres import Base

DEFAULT_RATING = 1000


class Song(Base):
    """Catalog song with its current Elo rating."""

    __tablename__ = "songs"

    song: Mapped[str] = mapped_column(Text, primary_key=True)

    # Display info
    artist: Mapped[str] = mapped_column(Text, default="")
    writer: Mapped[str] = mapped_column(Text, default="")
    album: Mapped[str] = mapped_column(Text, default="")
    year: Mapped[str] = mapped_column(Text, default="")

    rating: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING)

    def __repr__(self) -> str:
        return f"<Song {self.song} ({self.rating})>"
