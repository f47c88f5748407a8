"""Entity identifiers of the form ``<kind>_<n>``.

``n`` comes from a per-kind counter held in the state snapshot, so ids are
unique and strictly increasing for the lifetime of that snapshot.
"""

from collections.abc import MutableMapping

CLUB = "club"
USER = "user"
MEMBERSHIP = "membership"
MEETUP = "meetup"
RECIPE = "recipe"
FAVORITE = "favorite"
COLLECTION = "collection"
COLLECTION_ITEM = "collectionItem"
ACCESS_GRANT = "accessGrant"
NOTIFICATION = "notification"


def next_sequence(counters: MutableMapping[str, int], kind: str) -> int:
    """Advance the counter for ``kind`` and return the new value."""
    value = int(counters.get(kind, 0)) + 1
    counters[kind] = value
    return value


def format_id(kind: str, sequence: int) -> str:
    return f"{kind}_{sequence}"


def next_id(counters: MutableMapping[str, int], kind: str) -> str:
    return format_id(kind, next_sequence(counters, kind))


def id_sequence(entity_id: str | None) -> int:
    """Numeric suffix of an id, or -1 when it has none."""
    if not entity_id:
        return -1
    _, _, suffix = str(entity_id).rpartition("_")
    try:
        return int(suffix)
    except ValueError:
        return -1
