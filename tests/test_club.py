import pytest

from cookbook_club.domain.roles import ClubPolicy, Role
from cookbook_club.errors import (
    DomainValidationError,
    ForbiddenError,
    NotFoundError,
    PreconditionFailedError,
)
from cookbook_club.schemas.meetup import MeetupStatus
from cookbook_club.services.club import (
    build_status,
    init_club,
    set_host,
    set_policy,
    show_club,
)
from helpers import NOW


# ============================================================================
# INIT
# ============================================================================


def test_init_club_creates_club_host_membership_and_meetup(state, club):
    """Test club init creates exactly one of each founding record."""
    assert len(state.clubs) == 1
    assert len(state.users) == 1
    assert len(state.memberships) == 1
    assert len(state.meetups) == 1

    assert club.host.id == "user_1"
    assert club.host.name == "Alice"
    assert club.club.id == "club_1"
    assert club.club.name == "Sunday Supper"
    assert club.club.host_user_id == "user_1"
    assert club.club.membership_policy == ClubPolicy.CLOSED

    membership = state.memberships[0]
    assert membership.user_id == "user_1"
    assert membership.role == Role.HOST
    assert membership.cookbook_access_from is None

    meetup = state.meetups[0]
    assert meetup.id == "meetup_1"
    assert meetup.status == MeetupStatus.UPCOMING
    assert meetup.theme == "TBD"
    assert meetup.scheduled_for is None
    assert meetup.host_user_id == "user_1"


def test_init_club_uses_default_reminder_policy(club):
    """Test a new club starts with the standard reminder policy."""
    policy = club.club.reminder_policy
    assert policy.meetup_window_hours == [168, 24, 3, 0]
    assert policy.recipe_prompt_hours == 48
    assert club.club.reminder_templates == {}


def test_init_club_twice_fails(state, club):
    """Test a second initialization is rejected and creates nothing."""
    with pytest.raises(PreconditionFailedError, match="Club already initialized"):
        init_club(state, club_name="Other", host_name="Zed", now=NOW)
    assert len(state.clubs) == 1
    assert len(state.users) == 1


@pytest.mark.parametrize(
    "club_name, host_name",
    [("", "Alice"), ("   ", "Alice"), ("Sunday Supper", ""), ("Sunday Supper", "  ")],
)
def test_init_club_blank_names_create_nothing(state, club_name, host_name):
    """Test blank names fail validation before anything is created."""
    with pytest.raises(DomainValidationError):
        init_club(state, club_name=club_name, host_name=host_name, now=NOW)
    assert state.clubs == []
    assert state.users == []
    assert state.memberships == []
    assert state.meetups == []
    assert state.counters == {}


def test_init_club_strips_names_and_contact_fields(state):
    """Test names are trimmed and blank contact fields are dropped."""
    result = init_club(
        state,
        club_name="  Sunday Supper ",
        host_name=" Alice ",
        host_email="  ",
        host_phone=" 555-0100 ",
        now=NOW,
    )
    assert result.club.name == "Sunday Supper"
    assert result.host.name == "Alice"
    assert result.host.email is None
    assert result.host.phone == "555-0100"


# ============================================================================
# SHOW / STATUS
# ============================================================================


def test_show_club_before_init_fails(state):
    """Test showing the club requires initialization."""
    with pytest.raises(PreconditionFailedError):
        show_club(state)


def test_show_club_returns_host_and_upcoming(state, club):
    """Test the overview joins the host and the upcoming meetup."""
    overview = show_club(state)
    assert overview.club.id == "club_1"
    assert overview.host.name == "Alice"
    assert overview.upcoming.id == "meetup_1"


def test_build_status_before_init(state):
    """Test status works on an empty snapshot."""
    status = build_status(state)
    assert status.initialized is False
    assert status.club is None
    assert status.upcoming_meetup is None
    assert status.counts.users == 0


def test_build_status_counts(state, club, bob):
    """Test status counts users, members and the upcoming meetup."""
    status = build_status(state)
    assert status.initialized is True
    assert status.club.name == "Sunday Supper"
    assert status.host.id == "user_1"
    assert status.upcoming_meetup.id == "meetup_1"
    assert status.counts.users == 2
    assert status.counts.members == 2
    assert status.counts.recipes == 0
    assert status.counts.pending_notifications == 0


# ============================================================================
# POLICY
# ============================================================================


def test_set_policy_as_host(state, host_id):
    """Test the host can open the club."""
    club = set_policy(state, host_id, "open")
    assert club.membership_policy == ClubPolicy.OPEN


def test_set_policy_as_member_fails(state, bob):
    """Test a plain member cannot change the policy."""
    with pytest.raises(ForbiddenError, match="Only current host"):
        set_policy(state, bob.id, ClubPolicy.OPEN)
    assert state.clubs[0].membership_policy == ClubPolicy.CLOSED


def test_set_policy_invalid_value_fails(state, host_id):
    """Test unknown policy values are rejected."""
    with pytest.raises(DomainValidationError, match="Invalid policy"):
        set_policy(state, host_id, "secret")


# ============================================================================
# HOST TRANSFER
# ============================================================================


def test_set_host_transfers_roles_and_upcoming_meetup(state, host_id, bob):
    """Test host transfer swaps roles and moves the upcoming meetup's host."""
    club = set_host(state, host_id, bob.id)

    assert club.host_user_id == bob.id
    roles = {m.user_id: m.role for m in state.memberships}
    assert roles[host_id] == Role.MEMBER
    assert roles[bob.id] == Role.HOST
    assert state.meetups[0].host_user_id == bob.id


def test_set_host_by_non_host_fails(state, host_id, bob):
    """Test only the current host can transfer."""
    with pytest.raises(ForbiddenError):
        set_host(state, bob.id, bob.id)
    assert state.clubs[0].host_user_id == host_id


def test_set_host_to_non_member_fails(state, host_id, carol):
    """Test the new host must already be a member."""
    with pytest.raises(NotFoundError):
        set_host(state, host_id, carol.id)
    assert state.clubs[0].host_user_id == host_id


def test_former_host_loses_host_privileges(state, host_id, bob):
    """Test the old host cannot act as host after the transfer."""
    set_host(state, host_id, bob.id)
    with pytest.raises(ForbiddenError):
        set_policy(state, host_id, "open")
