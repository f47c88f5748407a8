from fastapi import APIRouter, Depends, status

from cookbook_club.api.deps import get_current_actor, get_state, save_state
from cookbook_club.schemas.cookbook import (
    AccessGrantCreate,
    CollectionItem,
    CollectionItemCreate,
    CollectionWithRecipes,
    CookbookAccess,
    CookbookAccessGrant,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.services.collection import (
    add_favorite_to_collection,
    list_personal_collections,
)
from cookbook_club.services.cookbook import (
    can_view_meetup_cookbook,
    grant_past_cookbook_access,
)

router = APIRouter(prefix="/cookbook", tags=["cookbook"])


@router.get("/collections", response_model=list[CollectionWithRecipes])
def get_collections(
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return list_personal_collections(state, actor.id)


@router.post(
    "/collections/{name}/items",
    response_model=CollectionItem,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def add_to_collection(
    name: str,
    item_data: CollectionItemCreate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Favorite a recipe and file it under the named collection, creating it if needed."""
    return add_favorite_to_collection(state, actor.id, item_data.recipe_id, name)


@router.get("/meetups/{meetup_id}/access", response_model=CookbookAccess)
def get_cookbook_access(
    meetup_id: str,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return CookbookAccess(
        meetup_id=meetup_id,
        can_view=can_view_meetup_cookbook(state, actor.id, meetup_id),
    )


@router.post(
    "/access-grants",
    response_model=list[CookbookAccessGrant],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def grant_access(
    grant_data: AccessGrantCreate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """
    Open past cookbooks to a member. Host/admin/co_admin only.
    Returns only the grants created by this call.
    """
    return grant_past_cookbook_access(
        state,
        actor.id,
        grant_data.user_id,
        from_meetup_id=grant_data.from_meetup_id,
        all_past=grant_data.all_past,
    )
