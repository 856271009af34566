from pydantic import BaseModel
from typing import Literal
from datetime import datetime

RelationshipType = Literal["parent", "spouse", "sibling"]

class RelationshipIn(BaseModel):
    person1_id: int
    person2_id: int
    relationship_type: RelationshipType

class RelationshipOut(BaseModel):
    id: int
    person1_id: int
    person2_id: int
    relationship_type: RelationshipType
    created_at: datetime
