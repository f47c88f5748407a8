from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from cookbook_club.db.base import Base


class Club(Base):
    __tablename__ = "clubs"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    host_user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    membership_policy = Column(String(16), nullable=False)
    # JSON documents; `data doctor` reports rows that no longer parse.
    reminder_policy_json = Column(Text, nullable=False, default="{}")
    reminder_templates_json = Column(Text, nullable=False, default="{}")
    created_at = Column(DateTime(timezone=True), nullable=False)
