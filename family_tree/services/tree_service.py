"""Relationship resolver and three-generation family tree expander.

The resolver turns the flat edge rows touching a person into four buckets
(parents, children, spouses, siblings). A parent row (A, B) reads as "A is
parent of B", so the child role is derived from direction and never stored.

The expander resolves a center person and then, in one batched pass, every
parent (surfacing grandparents) and every child (surfacing grandchildren).
Relatives are not expanded any further.
"""
import logging
from family_tree.services.person_service import get_persons_by_ids
from family_tree.services.relationship_service import get_relationship_rows

logger = logging.getLogger(__name__)

BUCKETS = ("parents", "children", "spouses", "siblings")

def _bucket_for(row: dict, subject_id: int) -> str | None:
    kind = row["relationship_type"]
    if kind == "parent":
        return "children" if row["person1_id"] == subject_id else "parents"
    if kind == "spouse":
        return "spouses"
    if kind == "sibling":
        return "siblings"
    return None

async def resolve_many(person_ids) -> dict[int, dict]:
    """Resolve several persons with three queries total.

    Returns a mapping of id -> person-with-relationships; ids that do not
    exist are left out.
    """
    subjects = await get_persons_by_ids(person_ids)
    if not subjects:
        return {}
    rows = await get_relationship_rows(subjects.keys())

    counterpart_ids = {r["person1_id"] for r in rows} | {r["person2_id"] for r in rows}
    people = dict(subjects)
    people.update(await get_persons_by_ids(counterpart_ids - set(subjects)))

    # counterpart id -> snapshot, so both rows of a symmetric pair yield one entry
    buckets = {pid: {name: {} for name in BUCKETS} for pid in subjects}
    for row in rows:
        p1, p2 = row["person1_id"], row["person2_id"]
        if p1 == p2:
            continue
        for subject_id, other_id in ((p1, p2), (p2, p1)):
            if subject_id not in buckets:
                continue
            other = people.get(other_id)
            if other is None:
                # counterpart vanished after the edge was read
                continue
            bucket = _bucket_for(row, subject_id)
            if bucket:
                buckets[subject_id][bucket].setdefault(other_id, other)

    return {
        pid: {**person, **{name: list(found.values()) for name, found in buckets[pid].items()}}
        for pid, person in subjects.items()
    }

async def resolve_person(person_id: int) -> dict | None:
    resolved = await resolve_many([person_id])
    return resolved.get(person_id)

async def get_family_tree(person_id: int) -> dict | None:
    center = await resolve_person(person_id)
    if center is None:
        return None

    parent_ids = [p["id"] for p in center["parents"]]
    child_ids = [c["id"] for c in center["children"]]
    relatives = await resolve_many(parent_ids + child_ids)

    # A relative removed between the two reads is skipped, not an error
    grandparents = [relatives[pid] for pid in parent_ids if pid in relatives]
    grandchildren = [relatives[cid] for cid in child_ids if cid in relatives]
    if len(grandparents) + len(grandchildren) < len(parent_ids) + len(child_ids):
        logger.info("Family tree for %s skipped relatives that no longer exist", person_id)

    return {
        "center_person": center,
        "grandparents": grandparents,
        "grandchildren": grandchildren,
    }
