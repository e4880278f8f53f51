from sqlalchemy import JSON, Column, Integer, String

from app.db.base import Base


class AvailabilityRule(Base):
    """
    Working-hours configuration of a single host.

    `weekly_hours` holds {"monday": [{"start": "09:00", "end": "17:00"}], ...}
    with null for days off, interpreted in `timezone`.
    """

    __tablename__ = "availability_rules"

    id = Column(Integer, primary_key=True, index=True)
    host_id = Column(String(64), nullable=False, unique=True)

    timezone = Column(String(64), nullable=False, default="UTC")
    weekly_hours = Column(JSON, nullable=True)

    min_notice = Column(Integer, nullable=True, default=1440)
    max_advance = Column(Integer, nullable=True, default=60)
    default_buffer_before = Column(Integer, nullable=True, default=0)
    default_buffer_after = Column(Integer, nullable=True, default=0)

    def __repr__(self) -> str:
        return f"<AvailabilityRule host_id={self.host_id} timezone={self.timezone}>"
