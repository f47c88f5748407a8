from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from cookbook_club.db.base import Base


class Meetup(Base):
    __tablename__ = "meetups"

    id = Column(String(64), primary_key=True)
    club_id = Column(String(64), ForeignKey("clubs.id"), nullable=False, index=True)
    host_user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    scheduled_for = Column(DateTime(timezone=True), nullable=True)
    theme = Column(String(255), nullable=False)
    status = Column(String(16), nullable=False)
    sequence = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
