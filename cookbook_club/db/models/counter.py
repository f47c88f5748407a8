from sqlalchemy import Column, Integer, String

from cookbook_club.db.base import Base


class Counter(Base):
    __tablename__ = "counters"

    key = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False)
