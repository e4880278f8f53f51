from sqlalchemy import Column, DateTime, Integer, String, Text

from app.db.base import Base


class CalendarToken(Base):
    """
    Google OAuth credentials for a host's connected calendar.
    """

    __tablename__ = "calendar_tokens"

    id = Column(Integer, primary_key=True, index=True)
    host_id = Column(String(64), nullable=False, unique=True)

    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    calendar_id = Column(String(255), nullable=False, default="primary")

    def __repr__(self) -> str:
        return f"<CalendarToken host_id={self.host_id} calendar_id={self.calendar_id}>"
