from cookbook_club.db.models.counter import Counter
from cookbook_club.db.models.user import User
from cookbook_club.db.models.club import Club
from cookbook_club.db.models.membership import Membership
from cookbook_club.db.models.meetup import Meetup
from cookbook_club.db.models.recipe import Recipe
from cookbook_club.db.models.cookbook import (
    CollectionItem,
    CookbookAccessGrant,
    Favorite,
    PersonalCollection,
)
from cookbook_club.db.models.notification import Notification

__all__ = [
    "Counter",
    "User",
    "Club",
    "Membership",
    "Meetup",
    "Recipe",
    "Favorite",
    "PersonalCollection",
    "CollectionItem",
    "CookbookAccessGrant",
    "Notification",
]
