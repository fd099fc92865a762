"""Named counters (e.g. the global vote count)."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from songrank.stores.postgres import Base


class Counter(Base):
    """Single named integer counter."""

    __tablename__ = "counters"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=0)

    def __repr__(self) -> str:
        return f"<Counter {self.key}={self.count}>"
