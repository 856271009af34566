import logging
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, ReturnDocument
from family_tree.core.config import settings

logger = logging.getLogger(__name__)

class Mongo:
    client: AsyncIOMotorClient | None = None

mongo = Mongo()

PERSONS = lambda: mongo.client[settings.MONGODB_DB].persons
RELATIONSHIPS = lambda: mongo.client[settings.MONGODB_DB].relationships
COUNTERS = lambda: mongo.client[settings.MONGODB_DB].counters

def now():
    return datetime.now(timezone.utc)

async def connect_to_mongo():
    mongo.client = AsyncIOMotorClient(settings.MONGODB_URI, tz_aware=True)
    await ensure_indexes()
    logger.info("Connected to MongoDB database %s", settings.MONGODB_DB)
    return mongo.client

async def ensure_indexes():
    db = mongo.client[settings.MONGODB_DB]
    await db.persons.create_index("name")
    await db.relationships.create_index([("person1_id", ASCENDING), ("relationship_type", ASCENDING)])
    await db.relationships.create_index([("person2_id", ASCENDING), ("relationship_type", ASCENDING)])
    # One logical relationship per unordered pair and kind; mirrored rows carry primary=False
    await db.relationships.create_index(
        [("pair_key", ASCENDING), ("relationship_type", ASCENDING)],
        unique=True,
        partialFilterExpression={"primary": True},
        name="unique_pair_per_kind",
    )

async def close_mongo():
    if mongo.client:
        mongo.client.close()
        mongo.client = None

async def next_sequence(name: str, session=None) -> int:
    """Atomically allocate the next integer id for ``name``."""
    doc = await COUNTERS().find_one_and_update(
        {"_id": name},
        {"$inc": {"value": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
        session=session,
    )
    return doc["value"]
