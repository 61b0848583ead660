from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, UniqueConstraint

from deadstock.database.base import Base


class SessionEntry(Base):
    __tablename__ = "session_entries"

    id = Column(Integer, primary_key=True)
    session_key = Column(String, nullable=False)
    key = Column(String, nullable=False)
    value = Column(Text, nullable=False, default="")

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("session_key", "key", name="uq_session_entries_session_key"),
    )


__all__ = ["SessionEntry"]
