from fastapi import APIRouter, Depends, Query, status

from cookbook_club.api.deps import get_current_actor, get_state, save_state
from cookbook_club.schemas.cookbook import Favorite
from cookbook_club.schemas.recipe import Recipe, RecipeCreate, RecipeWithAuthor
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.services.recipe import add_recipe, favorite_recipe, list_meetup_recipes

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("", response_model=list[RecipeWithAuthor])
def get_recipes(
    meetup_id: str | None = Query(None, alias="meetupId"),
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """
    Recipes of a meetup; the upcoming one when no meetupId is given.
    Past meetups require cookbook access.
    """
    return list_meetup_recipes(state, actor.id, meetup_id)


@router.post(
    "",
    response_model=Recipe,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def create_recipe(
    recipe_data: RecipeCreate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Add a recipe to the upcoming meetup. The image path must exist on the server."""
    return add_recipe(
        state,
        actor.id,
        title=recipe_data.title,
        content=recipe_data.content,
        image_path=recipe_data.image_path,
    )


@router.post(
    "/{recipe_id}/favorite",
    response_model=Favorite,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def favorite(
    recipe_id: str,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return favorite_recipe(state, actor.id, recipe_id)
