from sqlalchemy import Boolean, Column, Integer, String

from app.db.base import Base


class MeetingType(Base):
    """
    A bookable meeting type owned by a host.

    Only the columns read by the availability engine are mapped here.
    """

    __tablename__ = "meeting_types"

    id = Column(Integer, primary_key=True, index=True)
    host_id = Column(String(64), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)

    duration = Column(Integer, nullable=False, default=30)
    buffer_before = Column(Integer, nullable=True, default=0)
    buffer_after = Column(Integer, nullable=True, default=0)

    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return (
            f"<MeetingType id={self.id} host_id={self.host_id} "
            f"slug={self.slug} duration={self.duration}>"
        )
