from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.cookbook import CollectionItem, PersonalCollection
from cookbook_club.schemas.state import StateSnapshot


def get_collection_by_name(
    state: StateSnapshot, user_id: str, name: str
) -> PersonalCollection | None:
    return next(
        (c for c in state.personal_collections if c.user_id == user_id and c.name == name),
        None,
    )


def get_collections_by_user(state: StateSnapshot, user_id: str) -> list[PersonalCollection]:
    return [c for c in state.personal_collections if c.user_id == user_id]


def get_collection_item(
    state: StateSnapshot, collection_id: str, recipe_id: str
) -> CollectionItem | None:
    return next(
        (
            item
            for item in state.collection_items
            if item.collection_id == collection_id and item.recipe_id == recipe_id
        ),
        None,
    )


def get_items_by_collection(state: StateSnapshot, collection_id: str) -> list[CollectionItem]:
    return [item for item in state.collection_items if item.collection_id == collection_id]


def create_collection(
    state: StateSnapshot, user_id: str, name: str, created_at: datetime
) -> PersonalCollection:
    collection = PersonalCollection(
        id=ids.next_id(state.counters, ids.COLLECTION),
        user_id=user_id,
        name=name,
        created_at=created_at,
    )
    state.personal_collections.append(collection)
    return collection


def create_collection_item(
    state: StateSnapshot, collection_id: str, recipe_id: str, created_at: datetime
) -> CollectionItem:
    item = CollectionItem(
        id=ids.next_id(state.counters, ids.COLLECTION_ITEM),
        collection_id=collection_id,
        recipe_id=recipe_id,
        created_at=created_at,
    )
    state.collection_items.append(item)
    return item
