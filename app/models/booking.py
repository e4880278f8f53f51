from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import Base


class Booking(Base):
    """
    A guest's reservation of a host's meeting type.

    Only bookings with status "confirmed" count as busy time.
    """

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)

    meeting_type_id = Column(
        Integer,
        ForeignKey("meeting_types.id", ondelete="CASCADE"),
        nullable=False,
    )
    host_id = Column(String(64), nullable=False)

    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=False)

    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(String(32), nullable=False, default="confirmed")
    timezone = Column(String(64), nullable=False, default="UTC")

    meeting_type = relationship("MeetingType", backref="bookings")

    __table_args__ = (
        Index("ix_bookings_host_start", "host_id", "start_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking id={self.id} host_id={self.host_id} "
            f"start={self.start_time} status={self.status}>"
        )
