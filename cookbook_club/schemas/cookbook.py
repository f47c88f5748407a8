from datetime import datetime

from pydantic import Field

from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.recipe import Recipe


class Favorite(CamelModel):
    id: str
    user_id: str
    recipe_id: str
    created_at: datetime


class PersonalCollection(CamelModel):
    id: str
    user_id: str
    name: str
    created_at: datetime


class CollectionItem(CamelModel):
    id: str
    collection_id: str
    recipe_id: str
    created_at: datetime


class CookbookAccessGrant(CamelModel):
    id: str
    club_id: str
    user_id: str
    meetup_id: str
    granted_by_user_id: str
    created_at: datetime


class CollectionWithRecipes(PersonalCollection):
    recipes: list[Recipe]


class CollectionItemCreate(CamelModel):
    recipe_id: str


class AccessGrantCreate(CamelModel):
    user_id: str
    from_meetup_id: str | None = None
    all_past: bool = Field(False, alias="all")


class CookbookAccess(CamelModel):
    meetup_id: str
    can_view: bool
