from datetime import datetime

from cookbook_club.core.validation import require_non_empty
from cookbook_club.domain.clock import resolve_now
import cookbook_club.repositories.collection as collection_repo
import cookbook_club.repositories.recipe as recipe_repo
from cookbook_club.schemas.cookbook import CollectionItem, CollectionWithRecipes, PersonalCollection
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import assert_member
from cookbook_club.services.recipe import favorite_recipe


def ensure_personal_collection(
    state: StateSnapshot,
    actor_user_id: str,
    name: str,
    now: str | datetime | None = None,
) -> PersonalCollection:
    normalized_name = require_non_empty(name, "Collection name")
    existing = collection_repo.get_collection_by_name(state, actor_user_id, normalized_name)
    if existing is not None:
        return existing
    return collection_repo.create_collection(
        state, user_id=actor_user_id, name=normalized_name, created_at=resolve_now(now)
    )


def add_favorite_to_collection(
    state: StateSnapshot,
    actor_user_id: str,
    recipe_id: str,
    collection_name: str,
    now: str | datetime | None = None,
) -> CollectionItem:
    """Favorite a recipe and file it under a personal collection, creating it if needed."""
    require_non_empty(collection_name, "Collection name")
    timestamp = resolve_now(now)
    favorite = favorite_recipe(state, actor_user_id, recipe_id, now=timestamp)
    collection = ensure_personal_collection(state, actor_user_id, collection_name, now=timestamp)

    existing = collection_repo.get_collection_item(state, collection.id, favorite.recipe_id)
    if existing is not None:
        return existing
    return collection_repo.create_collection_item(
        state, collection_id=collection.id, recipe_id=favorite.recipe_id, created_at=timestamp
    )


def list_personal_collections(
    state: StateSnapshot, actor_user_id: str
) -> list[CollectionWithRecipes]:
    assert_member(state, actor_user_id)
    collections = []
    for collection in collection_repo.get_collections_by_user(state, actor_user_id):
        recipes = [
            recipe
            for item in collection_repo.get_items_by_collection(state, collection.id)
            if (recipe := recipe_repo.get_recipe_by_id(state, item.recipe_id)) is not None
        ]
        collections.append(CollectionWithRecipes(**collection.model_dump(), recipes=recipes))
    return collections
