import pytest

from cookbook_club.domain.cookbook_visibility import CookbookVisibilityPolicy
from cookbook_club.errors import ForbiddenError, NotFoundError
from cookbook_club.services.cookbook import can_view_meetup_cookbook, grant_past_cookbook_access
from cookbook_club.services.meetup import advance_meetup
from cookbook_club.services.membership import invite_member
from cookbook_club.services.user import create_user
from helpers import NOW


@pytest.fixture(scope="function")
def late_joiner(state, host_id, bob):
    """Dave joins after three meetups have gone by (meetup_4 is upcoming)."""
    for _ in range(3):
        advance_meetup(state, host_id, now=NOW)
    dave = create_user(state, name="Dave", now=NOW)
    invite_member(state, host_id, dave.id, now=NOW)
    return dave


# ============================================================================
# VISIBILITY POLICY
# ============================================================================


def test_policy_without_boundary_sees_everything():
    """Test founders see every meetup."""
    policy = CookbookVisibilityPolicy(access_from_sequence=None)
    assert policy.can_view(meetup_id="meetup_1", meetup_sequence=1)


def test_policy_compares_sequences_numerically():
    """Test meetup_10 is after meetup_9."""
    policy = CookbookVisibilityPolicy(access_from_sequence=9)
    assert policy.can_view(meetup_id="meetup_10", meetup_sequence=10)
    assert policy.can_view(meetup_id="meetup_9", meetup_sequence=9)
    assert not policy.can_view(meetup_id="meetup_8", meetup_sequence=8)


def test_policy_grants_override_boundary():
    """Test grants open individual earlier meetups."""
    policy = CookbookVisibilityPolicy(
        access_from_sequence=5, granted_meetup_ids=frozenset({"meetup_2"})
    )
    assert policy.can_view(meetup_id="meetup_2", meetup_sequence=2)
    assert not policy.can_view(meetup_id="meetup_3", meetup_sequence=3)


# ============================================================================
# DEFAULT ACCESS
# ============================================================================


def test_late_joiner_sees_from_join_meetup(state, late_joiner):
    """Test a late joiner sees the upcoming meetup but not earlier ones."""
    assert state.memberships[-1].cookbook_access_from == "meetup_4"
    assert can_view_meetup_cookbook(state, late_joiner.id, "meetup_4")
    assert not can_view_meetup_cookbook(state, late_joiner.id, "meetup_3")
    assert not can_view_meetup_cookbook(state, late_joiner.id, "meetup_1")


def test_founding_members_see_everything(state, host_id, bob, late_joiner):
    """Test the host and early members keep access to old meetups."""
    assert can_view_meetup_cookbook(state, host_id, "meetup_1")
    assert can_view_meetup_cookbook(state, bob.id, "meetup_1")


def test_non_member_visibility_fails(state, carol):
    """Test asking about a non-member is Forbidden."""
    with pytest.raises(ForbiddenError):
        can_view_meetup_cookbook(state, carol.id, "meetup_1")


def test_unknown_meetup_visibility_fails(state, host_id):
    """Test asking about an unknown meetup is NotFound."""
    with pytest.raises(NotFoundError):
        can_view_meetup_cookbook(state, host_id, "meetup_77")


# ============================================================================
# GRANTS
# ============================================================================


def test_grant_all_past(state, host_id, late_joiner):
    """Test granting every past meetup."""
    grants = grant_past_cookbook_access(state, host_id, late_joiner.id, all_past=True, now=NOW)
    assert [g.meetup_id for g in grants] == ["meetup_1", "meetup_2", "meetup_3"]
    assert all(g.granted_by_user_id == host_id for g in grants)
    assert can_view_meetup_cookbook(state, late_joiner.id, "meetup_1")


def test_grant_defaults_to_all_past(state, host_id, late_joiner):
    """Test no boundary means every past meetup."""
    grants = grant_past_cookbook_access(state, host_id, late_joiner.id, now=NOW)
    assert len(grants) == 3


def test_grant_from_meetup(state, host_id, late_joiner):
    """Test granting from a past meetup onwards."""
    grants = grant_past_cookbook_access(
        state, host_id, late_joiner.id, from_meetup_id="meetup_2", now=NOW
    )
    assert [g.meetup_id for g in grants] == ["meetup_2", "meetup_3"]
    assert not can_view_meetup_cookbook(state, late_joiner.id, "meetup_1")
    assert can_view_meetup_cookbook(state, late_joiner.id, "meetup_2")


def test_grant_is_idempotent(state, host_id, late_joiner):
    """Test re-granting only returns newly created grants."""
    grant_past_cookbook_access(state, host_id, late_joiner.id, from_meetup_id="meetup_3", now=NOW)
    grants = grant_past_cookbook_access(state, host_id, late_joiner.id, all_past=True, now=NOW)
    assert [g.meetup_id for g in grants] == ["meetup_1", "meetup_2"]
    assert len(state.cookbook_access_grants) == 3
    assert grant_past_cookbook_access(state, host_id, late_joiner.id, now=NOW) == []


def test_grant_unknown_past_meetup_fails(state, host_id, late_joiner):
    """Test the boundary must be a past meetup."""
    with pytest.raises(NotFoundError, match="Unknown past meetup: meetup_4"):
        grant_past_cookbook_access(state, host_id, late_joiner.id, from_meetup_id="meetup_4")


def test_grant_without_past_meetups(state, host_id, bob):
    """Test granting is a no-op before any meetup is past."""
    assert grant_past_cookbook_access(state, host_id, bob.id, all_past=True) == []


def test_grant_as_member_fails(state, bob, late_joiner):
    """Test plain members cannot grant access."""
    with pytest.raises(ForbiddenError, match="Only host/admin/co_admin"):
        grant_past_cookbook_access(state, bob.id, late_joiner.id, all_past=True)


def test_grant_to_non_member_fails(state, host_id, carol, late_joiner):
    """Test the target must be a member."""
    with pytest.raises(NotFoundError, match="not a member"):
        grant_past_cookbook_access(state, host_id, carol.id, all_past=True)


def test_co_admin_can_grant(state, host_id, late_joiner):
    """Test co_admins may grant access."""
    eve = create_user(state, name="Eve", now=NOW)
    invite_member(state, host_id, eve.id, role="co_admin", now=NOW)
    grants = grant_past_cookbook_access(state, eve.id, late_joiner.id, all_past=True, now=NOW)
    assert len(grants) == 3


def test_grant_all_past_with_unknown_from_meetup_fails(state, host_id, late_joiner):
    """Test an unknown boundary is rejected even when granting everything."""
    with pytest.raises(NotFoundError, match="Unknown past meetup: meetup_42"):
        grant_past_cookbook_access(
            state, host_id, late_joiner.id, from_meetup_id="meetup_42", all_past=True
        )
    assert state.cookbook_access_grants == []


def test_grant_all_past_with_known_from_meetup(state, host_id, late_joiner):
    """Test all_past wins over a valid boundary."""
    grants = grant_past_cookbook_access(
        state, host_id, late_joiner.id, from_meetup_id="meetup_3", all_past=True, now=NOW
    )
    assert [g.meetup_id for g in grants] == ["meetup_1", "meetup_2", "meetup_3"]
