"""The in-memory aggregate of every entity collection; the unit of persistence."""

from typing import Annotated

from pydantic import Field, PrivateAttr

from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.club import Club
from cookbook_club.schemas.cookbook import (
    CollectionItem,
    CookbookAccessGrant,
    Favorite,
    PersonalCollection,
)
from cookbook_club.schemas.meetup import Meetup
from cookbook_club.schemas.membership import Membership
from cookbook_club.schemas.notification import Notification
from cookbook_club.schemas.recipe import Recipe
from cookbook_club.schemas.user import User

SNAPSHOT_VERSION = 1

# Snapshot keys as they appear in files (camelCase), in persistence order.
ENTITY_COLLECTIONS = (
    "clubs",
    "users",
    "memberships",
    "meetups",
    "recipes",
    "favorites",
    "personalCollections",
    "collectionItems",
    "cookbookAccessGrants",
    "notifications",
)

NotificationIndexKey = tuple[str, str, str | None, str | None]


class StateSnapshot(CamelModel):
    version: int = SNAPSHOT_VERSION
    clubs: list[Club] = Field(default_factory=list)
    users: list[User] = Field(default_factory=list)
    memberships: list[Membership] = Field(default_factory=list)
    meetups: list[Meetup] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    favorites: list[Favorite] = Field(default_factory=list)
    personal_collections: list[PersonalCollection] = Field(default_factory=list)
    collection_items: list[CollectionItem] = Field(default_factory=list)
    cookbook_access_grants: list[CookbookAccessGrant] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)
    counters: dict[str, Annotated[int, Field(ge=0)]] = Field(default_factory=dict)

    # Undelivered notifications keyed for upsert; built lazily by the
    # notification repository and never persisted.
    _pending_index: dict[NotificationIndexKey, Notification] | None = PrivateAttr(
        default=None
    )

    def to_document(self) -> dict:
        """JSON-ready dict in the interchange shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


def create_default_state() -> StateSnapshot:
    return StateSnapshot()
