"""SQLAlchemy database models for the blocked-date registry."""
from datetime import datetime, UTC
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now():
    """Get current UTC timestamp."""
    return datetime.now(UTC)


class BlockedDate(Base):
    """Blocked calendar dates, keyed by their DD-MM-YYYY string."""
    __tablename__ = "blocked_dates"

    date = Column(String(10), primary_key=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    def __repr__(self):
        return f"<BlockedDate(date={self.date})>"
