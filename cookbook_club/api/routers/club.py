from fastapi import APIRouter, Depends, status

from cookbook_club.api.deps import get_current_actor, get_state, save_state
from cookbook_club.schemas.club import (
    AppliedReminderTemplate,
    Club,
    ClubCreate,
    ClubInitResult,
    ClubOverview,
    ClubPolicyUpdate,
    HostTransfer,
    ReminderPolicy,
    ReminderPolicyUpdate,
    ReminderTemplateCreate,
    ReminderTemplateImport,
    ReminderTemplateImportResult,
    ReminderTemplateView,
    RemovedReminderTemplate,
    StatusReport,
)
from cookbook_club.schemas.state import StateSnapshot
from cookbook_club.schemas.user import User
from cookbook_club.services.club import (
    build_status,
    init_club,
    set_host,
    set_policy,
    show_club,
)
from cookbook_club.services.reminder import (
    add_reminder_template,
    apply_reminder_template,
    export_custom_reminder_templates,
    import_custom_reminder_templates,
    list_reminder_templates,
    remove_reminder_template,
    set_reminder_policy,
)

router = APIRouter(prefix="/club", tags=["club"])


@router.post(
    "",
    response_model=ClubInitResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def create_club(club_data: ClubCreate, state: StateSnapshot = Depends(get_state)):
    """
    Initialize the club together with its host user. Only one club can exist.
    """
    return init_club(
        state,
        club_name=club_data.club_name,
        host_name=club_data.host_name,
        host_email=club_data.host_email,
        host_phone=club_data.host_phone,
    )


@router.get("", response_model=ClubOverview)
def get_club(state: StateSnapshot = Depends(get_state)):
    return show_club(state)


@router.get("/status", response_model=StatusReport)
def get_status(state: StateSnapshot = Depends(get_state)):
    """Summary counts; answers even before the club is initialized."""
    return build_status(state)


@router.put("/policy", response_model=Club, dependencies=[Depends(save_state)])
def update_policy(
    policy_data: ClubPolicyUpdate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Switch between open and closed membership. Host only."""
    return set_policy(state, actor.id, policy_data.policy)


@router.put("/host", response_model=Club, dependencies=[Depends(save_state)])
def transfer_host(
    transfer: HostTransfer,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    """Hand the host role to another member. Host only."""
    return set_host(state, actor.id, transfer.user_id)


@router.put(
    "/reminder-policy", response_model=ReminderPolicy, dependencies=[Depends(save_state)]
)
def update_reminder_policy(
    policy_data: ReminderPolicyUpdate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return set_reminder_policy(
        state,
        actor.id,
        meetup_window_hours=policy_data.meetup_window_hours,
        recipe_prompt_hours=policy_data.recipe_prompt_hours,
    )


@router.get("/reminder-templates", response_model=list[ReminderTemplateView])
def get_reminder_templates(state: StateSnapshot = Depends(get_state)):
    """Built-in templates first, then the club's custom ones."""
    return list_reminder_templates(state)


@router.post(
    "/reminder-templates",
    response_model=ReminderTemplateView,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(save_state)],
)
def create_reminder_template(
    template_data: ReminderTemplateCreate,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return add_reminder_template(
        state,
        actor.id,
        name=template_data.name,
        meetup_window_hours=template_data.meetup_window_hours,
        recipe_prompt_hours=template_data.recipe_prompt_hours,
    )


@router.get("/reminder-templates/export", response_model=dict[str, ReminderPolicy])
def export_reminder_templates(state: StateSnapshot = Depends(get_state)):
    """Custom templates only, keyed by name."""
    return export_custom_reminder_templates(state)


@router.post(
    "/reminder-templates/import",
    response_model=ReminderTemplateImportResult,
    dependencies=[Depends(save_state)],
)
def import_reminder_templates(
    import_data: ReminderTemplateImport,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return import_custom_reminder_templates(
        state,
        actor.id,
        templates=import_data.templates,
        overwrite=import_data.overwrite,
        prefix=import_data.prefix,
    )


@router.post(
    "/reminder-templates/{name}/apply",
    response_model=AppliedReminderTemplate,
    dependencies=[Depends(save_state)],
)
def apply_template(
    name: str,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return apply_reminder_template(state, actor.id, name)


@router.delete(
    "/reminder-templates/{name}",
    response_model=RemovedReminderTemplate,
    dependencies=[Depends(save_state)],
)
def delete_reminder_template(
    name: str,
    state: StateSnapshot = Depends(get_state),
    actor: User = Depends(get_current_actor),
):
    return remove_reminder_template(state, actor.id, name)
