from sqlalchemy import Column, DateTime, ForeignKey, String

from cookbook_club.db.base import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    recipe_id = Column(String(64), ForeignKey("recipes.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class PersonalCollection(Base):
    __tablename__ = "personal_collections"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class CollectionItem(Base):
    __tablename__ = "collection_items"

    id = Column(String(64), primary_key=True)
    collection_id = Column(String(64), ForeignKey("personal_collections.id"), nullable=False)
    recipe_id = Column(String(64), ForeignKey("recipes.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class CookbookAccessGrant(Base):
    __tablename__ = "cookbook_access_grants"

    id = Column(String(64), primary_key=True)
    club_id = Column(String(64), ForeignKey("clubs.id"), nullable=False)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    meetup_id = Column(String(64), ForeignKey("meetups.id"), nullable=False)
    granted_by_user_id = Column(String(64), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
