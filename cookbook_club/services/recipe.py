import logging
import os
from collections.abc import Callable
from datetime import datetime

from cookbook_club.core.validation import require_non_empty
from cookbook_club.domain.clock import resolve_now
from cookbook_club.errors import ForbiddenError, NotFoundError, PreconditionFailedError
import cookbook_club.repositories.favorite as favorite_repo
import cookbook_club.repositories.recipe as recipe_repo
from cookbook_club.schemas.cookbook import Favorite
from cookbook_club.schemas.recipe import Recipe, RecipeWithAuthor
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import assert_member, require_user
from cookbook_club.services.cookbook import can_view_meetup_cookbook
from cookbook_club.services.meetup import get_upcoming_meetup

logger = logging.getLogger(__name__)


def add_recipe(
    state: StateSnapshot,
    actor_user_id: str,
    title: str,
    content: str,
    image_path: str,
    path_exists: Callable[[str], bool] = os.path.exists,
    now: str | datetime | None = None,
) -> Recipe:
    """
    Submit a recipe for the upcoming meetup.

    - Requires an upcoming meetup and a member actor
    - Title, content and image path are required
    - The image must exist on disk

    Raises:
        PreconditionFailedError: If there is no upcoming meetup or the image is missing
    """
    upcoming = get_upcoming_meetup(state)
    if upcoming is None:
        raise PreconditionFailedError("No upcoming meetup.")
    assert_member(state, actor_user_id)
    normalized_title = require_non_empty(title, "Recipe title")
    normalized_content = require_non_empty(content, "Recipe content")
    normalized_image_path = require_non_empty(image_path, "Recipe image path")
    if not path_exists(normalized_image_path):
        raise PreconditionFailedError(f"Image path not found: {normalized_image_path}")

    recipe = recipe_repo.create_recipe(
        state,
        club_id=upcoming.club_id,
        meetup_id=upcoming.id,
        author_user_id=actor_user_id,
        title=normalized_title,
        content=normalized_content,
        image_path=normalized_image_path,
        created_at=resolve_now(now),
    )
    logger.info("Recipe %s added to meetup %s by %s", recipe.id, upcoming.id, actor_user_id)
    return recipe


def list_meetup_recipes(
    state: StateSnapshot, actor_user_id: str, meetup_id: str | None = None
) -> list[RecipeWithAuthor]:
    """
    Recipes of a meetup (default: the upcoming one), each with its author.

    Raises:
        ForbiddenError: If the actor may not see that meetup's cookbook
    """
    assert_member(state, actor_user_id)
    if not meetup_id:
        upcoming = get_upcoming_meetup(state)
        if upcoming is None:
            return []
        meetup_id = upcoming.id
    if not can_view_meetup_cookbook(state, actor_user_id, meetup_id):
        raise ForbiddenError("No cookbook access for this meetup.")

    return [
        RecipeWithAuthor(**recipe.model_dump(), author=require_user(state, recipe.author_user_id))
        for recipe in recipe_repo.get_recipes_by_meetup(state, meetup_id)
    ]


def favorite_recipe(
    state: StateSnapshot,
    actor_user_id: str,
    recipe_id: str,
    now: str | datetime | None = None,
) -> Favorite:
    """Favorite a visible recipe. Idempotent per (user, recipe)."""
    assert_member(state, actor_user_id)
    recipe = recipe_repo.get_recipe_by_id(state, recipe_id)
    if recipe is None:
        raise NotFoundError(f"Unknown recipe: {recipe_id}")
    if not can_view_meetup_cookbook(state, actor_user_id, recipe.meetup_id):
        raise ForbiddenError("You cannot favorite recipes you cannot view.")

    existing = favorite_repo.get_favorite(state, actor_user_id, recipe_id)
    if existing is not None:
        return existing
    return favorite_repo.create_favorite(
        state, user_id=actor_user_id, recipe_id=recipe_id, created_at=resolve_now(now)
    )
