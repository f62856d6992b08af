"""SQLAlchemy ORM models for MultiTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ModeUsage(Base):
    """How often each timer mode has been opened."""

    __tablename__ = "mode_usage"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mode = Column(String(20), nullable=False, unique=True)  # stopwatch | countdown | pomodoro
    use_count = Column(Integer, nullable=False, default=0)
    last_used = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<ModeUsage mode={self.mode} count={self.use_count}>"
