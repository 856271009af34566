import asyncio
import logging
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError
from family_tree.core.config import settings
from family_tree.core.errors import (
    PartialRelationshipError,
    PersonsNotFoundError,
    RelationshipExistsError,
    SelfRelationshipError,
)
from family_tree.db.mongo import mongo, PERSONS, RELATIONSHIPS, next_sequence, now

logger = logging.getLogger(__name__)

# How each kind is materialized: symmetric kinds store one row per direction,
# parent stores a single (parent, child) row and the child role is read off the direction.
RELATIONSHIP_KINDS = {
    "parent": {"symmetric": False},
    "spouse": {"symmetric": True},
    "sibling": {"symmetric": True},
}

def _pair_key(person1_id: int, person2_id: int) -> str:
    low, high = sorted((person1_id, person2_id))
    return f"{low}:{high}"

def _pair_filter(person1_id: int, person2_id: int, relationship_type: str) -> dict:
    return {
        "relationship_type": relationship_type,
        "$or": [
            {"person1_id": person1_id, "person2_id": person2_id},
            {"person1_id": person2_id, "person2_id": person1_id},
        ],
    }

def _doc_to_dict(doc) -> dict:
    return {
        "id": doc["_id"],
        "person1_id": doc["person1_id"],
        "person2_id": doc["person2_id"],
        "relationship_type": doc["relationship_type"],
        "created_at": doc["created_at"],
    }

async def _insert_row(person1_id: int, person2_id: int, relationship_type: str, primary: bool, session=None) -> dict:
    doc = {
        "_id": await next_sequence("relationships", session=session),
        "person1_id": person1_id,
        "person2_id": person2_id,
        "relationship_type": relationship_type,
        "pair_key": _pair_key(person1_id, person2_id),
        "primary": primary,
        "created_at": now(),
    }
    await RELATIONSHIPS().insert_one(doc, session=session)
    return doc

async def _remove_row(row_id: int):
    await RELATIONSHIPS().delete_one({"_id": row_id})

async def _insert_in_transaction(person1_id: int, person2_id: int, relationship_type: str, symmetric: bool) -> dict:
    async with await mongo.client.start_session() as session:
        async with session.start_transaction():
            primary = await _insert_row(person1_id, person2_id, relationship_type, True, session=session)
            if symmetric:
                await _insert_row(person2_id, person1_id, relationship_type, False, session=session)
    return primary

async def _insert_with_compensation(person1_id: int, person2_id: int, relationship_type: str, symmetric: bool) -> dict:
    primary = await _insert_row(person1_id, person2_id, relationship_type, True)
    if not symmetric:
        return primary
    try:
        await _insert_row(person2_id, person1_id, relationship_type, False)
    except BaseException:
        # Includes cancellation; the primary row must not outlive a half-finished write
        logger.error(
            "Mirrored %s row %s->%s failed, removing primary row %s",
            relationship_type, person2_id, person1_id, primary["_id"],
        )
        try:
            await asyncio.shield(_remove_row(primary["_id"]))
        except PyMongoError as exc:
            logger.error(
                "Could not remove primary row %s; %s relationship %s<->%s is one-sided",
                primary["_id"], relationship_type, person1_id, person2_id,
            )
            raise PartialRelationshipError(person1_id, person2_id, relationship_type) from exc
        raise
    return primary

async def create_relationship(person1_id: int, person2_id: int, relationship_type: str) -> dict:
    if relationship_type not in RELATIONSHIP_KINDS:
        raise ValueError(f"Unknown relationship type: {relationship_type}")
    if person1_id == person2_id:
        logger.warning("Rejected self %s relationship for person %s", relationship_type, person1_id)
        raise SelfRelationshipError(person1_id)

    # 1. Both endpoints must exist
    found = await PERSONS().count_documents({"_id": {"$in": [person1_id, person2_id]}})
    if found < 2:
        logger.warning("Rejected %s relationship %s->%s: missing person", relationship_type, person1_id, person2_id)
        raise PersonsNotFoundError(person1_id, person2_id)

    # 2. No existing relationship of this kind in either direction
    existing = await RELATIONSHIPS().find_one(_pair_filter(person1_id, person2_id, relationship_type))
    if existing:
        logger.warning("Rejected duplicate %s relationship %s->%s", relationship_type, person1_id, person2_id)
        raise RelationshipExistsError(person1_id, person2_id, relationship_type)

    symmetric = RELATIONSHIP_KINDS[relationship_type]["symmetric"]
    try:
        if settings.MONGODB_TRANSACTIONS:
            primary = await _insert_in_transaction(person1_id, person2_id, relationship_type, symmetric)
        else:
            primary = await _insert_with_compensation(person1_id, person2_id, relationship_type, symmetric)
    except DuplicateKeyError as exc:
        # A concurrent writer got past the duplicate check first
        logger.warning("Unique index rejected %s relationship %s->%s", relationship_type, person1_id, person2_id)
        raise RelationshipExistsError(person1_id, person2_id, relationship_type) from exc

    logger.info("Created %s relationship %s->%s (id %s)", relationship_type, person1_id, person2_id, primary["_id"])
    return _doc_to_dict(primary)

async def delete_relationship(person1_id: int, person2_id: int, relationship_type: str) -> dict:
    # Same filter for every kind, so a parent row can be removed with the pair in either order
    res = await RELATIONSHIPS().delete_many(_pair_filter(person1_id, person2_id, relationship_type))
    deleted = res.deleted_count > 0
    logger.info(
        "Deleted %s %s row(s) between %s and %s",
        res.deleted_count, relationship_type, person1_id, person2_id,
    )
    return {"deleted": deleted}

async def get_relationship_rows(person_ids) -> list[dict]:
    """Every stored row touching any of ``person_ids``, in insertion order."""
    ids = list(set(person_ids))
    if not ids:
        return []
    return await RELATIONSHIPS().find(
        {"$or": [{"person1_id": {"$in": ids}}, {"person2_id": {"$in": ids}}]},
        sort=[("_id", ASCENDING)],
    ).to_list(length=None)
