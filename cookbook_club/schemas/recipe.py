from datetime import datetime

from pydantic import Field

from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.user import User


class Recipe(CamelModel):
    id: str
    club_id: str
    meetup_id: str
    author_user_id: str
    title: str
    content: str
    image_path: str
    created_at: datetime


class RecipeWithAuthor(Recipe):
    author: User


class RecipeCreate(CamelModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image_path: str = Field(..., min_length=1)
