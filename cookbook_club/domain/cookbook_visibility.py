from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class CookbookVisibilityPolicy:
    """Decides which meetups' recipes a member may see.

    Rules:
    - A member whose access starts at no meetup (founders) sees everything.
    - Otherwise a meetup is visible when its sequence is >= the sequence of
      the meetup that was upcoming when the member joined.
    - Earlier meetups are visible only through an explicit access grant.

    Grants are a sparse override set; they never move the default boundary.
    """

    access_from_sequence: int | None
    granted_meetup_ids: frozenset[str] = field(default_factory=frozenset)

    def is_visible_by_default(self, meetup_sequence: int) -> bool:
        if self.access_from_sequence is None:
            return True
        return meetup_sequence >= self.access_from_sequence

    def can_view(self, *, meetup_id: str, meetup_sequence: int) -> bool:
        return self.is_visible_by_default(meetup_sequence) or meetup_id in self.granted_meetup_ids
