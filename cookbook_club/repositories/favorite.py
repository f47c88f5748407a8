from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.cookbook import Favorite
from cookbook_club.schemas.state import StateSnapshot


def get_favorite(state: StateSnapshot, user_id: str, recipe_id: str) -> Favorite | None:
    return next(
        (f for f in state.favorites if f.user_id == user_id and f.recipe_id == recipe_id),
        None,
    )


def create_favorite(
    state: StateSnapshot, user_id: str, recipe_id: str, created_at: datetime
) -> Favorite:
    favorite = Favorite(
        id=ids.next_id(state.counters, ids.FAVORITE),
        user_id=user_id,
        recipe_id=recipe_id,
        created_at=created_at,
    )
    state.favorites.append(favorite)
    return favorite
