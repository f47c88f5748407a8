from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text

from cookbook_club.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_due", "due_at", "delivered_at"),)

    id = Column(String(64), primary_key=True)
    club_id = Column(String(64), ForeignKey("clubs.id"), nullable=False)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)
    key = Column(String(64), nullable=True)
    payload_json = Column(Text, nullable=False, default="{}")
    due_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
