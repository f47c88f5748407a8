from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from cookbook_club.db.base import Base


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(String(64), primary_key=True)
    club_id = Column(String(64), ForeignKey("clubs.id"), nullable=False)
    meetup_id = Column(String(64), ForeignKey("meetups.id"), nullable=False, index=True)
    author_user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    image_path = Column(String(1024), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
