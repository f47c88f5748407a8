"""Club reminder policy and named reminder templates (built-in and custom)."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from cookbook_club.domain.reminder_policy import (
    BUILTIN_TEMPLATES,
    Hours,
    is_builtin_template,
    is_valid_template_name,
    is_valid_template_prefix,
)
from cookbook_club.errors import DomainValidationError, DuplicateResourceError, NotFoundError
from cookbook_club.schemas.club import (
    AppliedReminderTemplate,
    ReminderPolicy,
    ReminderTemplateImportResult,
    ReminderTemplateView,
    RemovedReminderTemplate,
    SkippedTemplate,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.services.authorization import assert_host, require_club

logger = logging.getLogger(__name__)


def _policy(
    meetup_window_hours: Iterable[Hours] | None, recipe_prompt_hours: Hours | None
) -> ReminderPolicy:
    return ReminderPolicy.model_validate(
        {
            "meetup_window_hours": (
                list(meetup_window_hours) if meetup_window_hours is not None else None
            ),
            "recipe_prompt_hours": recipe_prompt_hours,
        }
    )


def set_reminder_policy(
    state: StateSnapshot,
    actor_user_id: str,
    meetup_window_hours: Iterable[Hours] | None = None,
    recipe_prompt_hours: Hours | None = None,
) -> ReminderPolicy:
    """Replace the club's reminder policy. Host only; missing parts fall back to defaults."""
    club = assert_host(state, actor_user_id)
    club.reminder_policy = _policy(meetup_window_hours, recipe_prompt_hours)
    return club.reminder_policy


def list_reminder_templates(state: StateSnapshot) -> list[ReminderTemplateView]:
    """Built-in templates first, then the club's custom ones."""
    club = require_club(state)
    builtin = [
        ReminderTemplateView(name=name, source="builtin", policy=ReminderPolicy.from_windows(windows))
        for name, windows in BUILTIN_TEMPLATES.items()
    ]
    custom = [
        ReminderTemplateView(name=name, source="custom", policy=policy)
        for name, policy in club.reminder_templates.items()
    ]
    return builtin + custom


def add_reminder_template(
    state: StateSnapshot,
    actor_user_id: str,
    name: str,
    meetup_window_hours: Iterable[Hours] | None,
    recipe_prompt_hours: Hours | None = None,
) -> ReminderTemplateView:
    """
    Store a named custom template. Host only.

    Raises:
        DomainValidationError: If the name does not match ``^[a-z0-9_]{2,40}$``
        DuplicateResourceError: If the name belongs to a built-in template
    """
    club = assert_host(state, actor_user_id)
    if not is_valid_template_name(name):
        raise DomainValidationError(
            "Invalid template name. Use 2-40 chars: lowercase letters, numbers, underscore."
        )
    if is_builtin_template(name):
        raise DuplicateResourceError("Cannot overwrite built-in reminder template.")

    policy = _policy(meetup_window_hours, recipe_prompt_hours)
    club.reminder_templates[name] = policy
    return ReminderTemplateView(name=name, source="custom", policy=policy)


def remove_reminder_template(
    state: StateSnapshot, actor_user_id: str, name: str
) -> RemovedReminderTemplate:
    club = assert_host(state, actor_user_id)
    if name not in club.reminder_templates:
        raise NotFoundError(f"Unknown custom reminder template: {name}")
    del club.reminder_templates[name]
    return RemovedReminderTemplate(removed=name)


def apply_reminder_template(
    state: StateSnapshot, actor_user_id: str, template_name: str
) -> AppliedReminderTemplate:
    """Overwrite the active reminder policy with a template's (re-normalized) policy. Host only."""
    club = assert_host(state, actor_user_id)
    if template_name in club.reminder_templates:
        source = "custom"
        policy = ReminderPolicy.model_validate(club.reminder_templates[template_name].model_dump())
    elif is_builtin_template(template_name):
        source = "builtin"
        policy = ReminderPolicy.from_windows(BUILTIN_TEMPLATES[template_name])
    else:
        raise NotFoundError(f"Unknown reminder template: {template_name}")

    club.reminder_policy = policy
    return AppliedReminderTemplate(template=template_name, source=source, policy=policy)


def export_custom_reminder_templates(state: StateSnapshot) -> dict[str, ReminderPolicy]:
    club = require_club(state)
    return {
        name: ReminderPolicy.model_validate(policy.model_dump())
        for name, policy in club.reminder_templates.items()
    }


def import_custom_reminder_templates(
    state: StateSnapshot,
    actor_user_id: str,
    templates: Mapping[str, Any],
    overwrite: bool = False,
    prefix: str | None = None,
) -> ReminderTemplateImportResult:
    """
    Merge templates keyed by name into the club's custom templates. Host only.

    Each incoming name is optionally prefixed (``<prefix>_<name>``). Entries
    are skipped, not rejected, when the name is invalid, belongs to a
    built-in, or already exists and ``overwrite`` is off.
    """
    club = assert_host(state, actor_user_id)
    if not isinstance(templates, Mapping):
        raise DomainValidationError(
            "Invalid template payload. Expected an object keyed by template name."
        )
    normalized_prefix = (prefix or "").strip()
    if normalized_prefix and not is_valid_template_prefix(normalized_prefix):
        raise DomainValidationError(
            "Invalid template prefix. Use 1-20 chars: lowercase letters, numbers, underscore."
        )

    imported: list[str] = []
    skipped: list[SkippedTemplate] = []
    for raw_name, policy in templates.items():
        if not is_valid_template_name(raw_name):
            skipped.append(SkippedTemplate(name=str(raw_name), reason="invalid_name"))
            continue
        name = f"{normalized_prefix}_{raw_name}" if normalized_prefix else raw_name
        if not is_valid_template_name(name):
            skipped.append(SkippedTemplate(name=name, reason="invalid_name"))
            continue
        if is_builtin_template(name):
            skipped.append(SkippedTemplate(name=name, reason="builtin_conflict"))
            continue
        if name in club.reminder_templates and not overwrite:
            skipped.append(SkippedTemplate(name=name, reason="already_exists"))
            continue
        club.reminder_templates[name] = ReminderPolicy.model_validate(policy)
        imported.append(name)

    if imported:
        logger.info("Imported %d reminder template(s) into club %s", len(imported), club.id)
    return ReminderTemplateImportResult(
        imported=imported,
        skipped=skipped,
        overwrite=bool(overwrite),
        prefix=normalized_prefix or None,
    )
