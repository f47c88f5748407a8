from sqlalchemy import Column, DateTime, ForeignKey, String

from cookbook_club.db.base import Base


class Membership(Base):
    __tablename__ = "memberships"

    id = Column(String(64), primary_key=True)
    club_id = Column(String(64), ForeignKey("clubs.id"), nullable=False, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    role = Column(String(16), nullable=False)
    joined_at = Column(DateTime(timezone=True), nullable=False)
    cookbook_access_from = Column(String(64), ForeignKey("meetups.id"), nullable=True)
