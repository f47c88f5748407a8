from datetime import datetime

from cookbook_club.domain import ids
from cookbook_club.schemas.recipe import Recipe
from cookbook_club.schemas.state import StateSnapshot


def get_recipe_by_id(state: StateSnapshot, recipe_id: str) -> Recipe | None:
    """Get a recipe by ID."""
    return next((r for r in state.recipes if r.id == recipe_id), None)


def get_recipes_by_meetup(state: StateSnapshot, meetup_id: str) -> list[Recipe]:
    return [r for r in state.recipes if r.meetup_id == meetup_id]


def get_recipes_by_club(state: StateSnapshot, club_id: str) -> list[Recipe]:
    return [r for r in state.recipes if r.club_id == club_id]


def create_recipe(
    state: StateSnapshot,
    club_id: str,
    meetup_id: str,
    author_user_id: str,
    title: str,
    content: str,
    image_path: str,
    created_at: datetime,
) -> Recipe:
    """Create a recipe. Pure data access - no business logic."""
    recipe = Recipe(
        id=ids.next_id(state.counters, ids.RECIPE),
        club_id=club_id,
        meetup_id=meetup_id,
        author_user_id=author_user_id,
        title=title,
        content=content,
        image_path=image_path,
        created_at=created_at,
    )
    state.recipes.append(recipe)
    return recipe
