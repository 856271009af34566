import logging
import re
from datetime import date
from pymongo import ASCENDING
from family_tree.core.errors import PersonNotFoundError
from family_tree.db.mongo import PERSONS, next_sequence, now

logger = logging.getLogger(__name__)

def _doc_to_dict(doc) -> dict:
    birth_date = doc.get("birth_date")
    # Stored as ISO string; Mongo has no date-only type
    if isinstance(birth_date, str):
        birth_date = date.fromisoformat(birth_date)
    return {
        "id": doc["_id"],
        "name": doc["name"],
        "birth_date": birth_date,
        "created_at": doc["created_at"],
        "updated_at": doc["updated_at"],
    }

def _birth_date_value(birth_date):
    return birth_date.isoformat() if birth_date else None

async def create_person(name: str, birth_date: date | None = None) -> dict:
    person_id = await next_sequence("persons")
    ts = now()
    await PERSONS().insert_one({
        "_id": person_id,
        "name": name,
        "birth_date": _birth_date_value(birth_date),
        "created_at": ts,
        "updated_at": ts,
    })
    logger.info("Created person %s", person_id)
    doc = await PERSONS().find_one({"_id": person_id})
    return _doc_to_dict(doc)

async def update_person(person_id: int, patch: dict) -> dict:
    # Always refresh the timestamp, even when nothing else changes
    update_fields = {"updated_at": now()}
    if patch.get("name") is not None:
        update_fields["name"] = patch["name"]
    if "birth_date" in patch:
        update_fields["birth_date"] = _birth_date_value(patch["birth_date"])

    res = await PERSONS().update_one({"_id": person_id}, {"$set": update_fields})
    if not res.matched_count:
        raise PersonNotFoundError(person_id)
    logger.info("Updated person %s", person_id)
    doc = await PERSONS().find_one({"_id": person_id})
    return _doc_to_dict(doc)

async def get_person_by_id(person_id: int) -> dict | None:
    doc = await PERSONS().find_one({"_id": person_id})
    return _doc_to_dict(doc) if doc else None

async def get_persons_by_ids(person_ids) -> dict[int, dict]:
    """Batch lookup keyed by id; missing ids are simply absent."""
    ids = list(set(person_ids))
    if not ids:
        return {}
    docs = await PERSONS().find({"_id": {"$in": ids}}).to_list(length=None)
    return {doc["_id"]: _doc_to_dict(doc) for doc in docs}

async def get_persons() -> list[dict]:
    docs = await PERSONS().find({}, sort=[("name", ASCENDING)]).to_list(length=None)
    return [_doc_to_dict(d) for d in docs]

async def search_persons(query: str) -> list[dict]:
    docs = await PERSONS().find(
        {"name": {"$regex": re.escape(query), "$options": "i"}}, sort=[("name", ASCENDING)],
    ).to_list(length=None)
    return [_doc_to_dict(d) for d in docs]
