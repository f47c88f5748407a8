from datetime import datetime

from cookbook_club.domain.roles import Role
from cookbook_club.schemas.base import CamelModel
from cookbook_club.schemas.user import User


class Membership(CamelModel):
    id: str
    club_id: str
    user_id: str
    role: Role
    joined_at: datetime
    # Meetup id of the first cookbook visible by default; None means everything.
    cookbook_access_from: str | None = None


class MemberWithUser(Membership):
    user: User


class MemberInvite(CamelModel):
    user_id: str
    role: Role = Role.MEMBER


class RoleUpdate(CamelModel):
    role: Role
