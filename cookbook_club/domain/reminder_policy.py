"""Reminder window normalization and the built-in reminder templates."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

Hours = int | float

TEMPLATE_NAME_PATTERN = re.compile(r"^[a-z0-9_]{2,40}$")
TEMPLATE_PREFIX_PATTERN = re.compile(r"^[a-z0-9_]{1,20}$")


@dataclass(frozen=True, slots=True)
class ReminderWindows:
    """Canonical reminder configuration.

    - meetup_window_hours: distinct non-negative offsets, largest first
    - recipe_prompt_hours: a single non-negative offset
    """

    meetup_window_hours: tuple[Hours, ...]
    recipe_prompt_hours: Hours


DEFAULT_REMINDER_WINDOWS = ReminderWindows(
    meetup_window_hours=(168, 24, 3, 0),
    recipe_prompt_hours=48,
)

BUILTIN_TEMPLATES: Mapping[str, ReminderWindows] = {
    "standard": DEFAULT_REMINDER_WINDOWS,
    "light": ReminderWindows(meetup_window_hours=(24, 2, 0), recipe_prompt_hours=24),
    "tight": ReminderWindows(
        meetup_window_hours=(336, 168, 72, 24, 3, 1, 0), recipe_prompt_hours=72
    ),
    "same_day": ReminderWindows(meetup_window_hours=(8, 3, 1, 0), recipe_prompt_hours=6),
}


def is_valid_template_name(name: Any) -> bool:
    return isinstance(name, str) and TEMPLATE_NAME_PATTERN.fullmatch(name) is not None


def is_valid_template_prefix(prefix: Any) -> bool:
    return isinstance(prefix, str) and TEMPLATE_PREFIX_PATTERN.fullmatch(prefix) is not None


def is_builtin_template(name: str) -> bool:
    return name in BUILTIN_TEMPLATES


def coerce_hours(value: Any) -> Hours | None:
    """Return ``value`` as a finite non-negative number, or None when it is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            value = int(value)
    if value < 0:
        return None
    return value


def _field(candidate: Any, *names: str) -> Any:
    if candidate is None:
        return None
    if isinstance(candidate, Mapping):
        for name in names:
            if name in candidate:
                return candidate[name]
        return None
    for name in names:
        if hasattr(candidate, name):
            return getattr(candidate, name)
    return None


def sanitize_reminder_policy(candidate: Any) -> ReminderWindows:
    """Normalize an arbitrary, possibly partially invalid, reminder policy.

    Invalid window entries are dropped; an absent or emptied window list and
    an invalid prompt offset fall back to the defaults.
    """
    raw_windows = _field(candidate, "meetup_window_hours", "meetupWindowHours")
    if isinstance(raw_windows, (list, tuple)):
        valid = {h for h in (coerce_hours(v) for v in raw_windows) if h is not None}
        windows = tuple(sorted(valid, reverse=True))
    else:
        windows = DEFAULT_REMINDER_WINDOWS.meetup_window_hours

    prompt = coerce_hours(_field(candidate, "recipe_prompt_hours", "recipePromptHours"))
    return ReminderWindows(
        meetup_window_hours=windows or DEFAULT_REMINDER_WINDOWS.meetup_window_hours,
        recipe_prompt_hours=(
            prompt if prompt is not None else DEFAULT_REMINDER_WINDOWS.recipe_prompt_hours
        ),
    )


def format_hours(hours: Hours) -> str:
    return str(int(hours)) if float(hours).is_integer() else str(hours)


def meetup_reminder_key(hours: Hours) -> str:
    return f"meetup_{format_hours(hours)}h"


RECIPE_PROMPT_KEY = "recipe_prompt"
