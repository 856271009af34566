from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

class PersonCreate(BaseModel):
    name: str = Field(min_length=1, description="Name is required")
    birth_date: Optional[date] = None

class PersonUpdate(BaseModel):
    # Omitted fields are left untouched; birth_date may be explicitly cleared with null
    name: Optional[str] = Field(default=None, min_length=1)
    birth_date: Optional[date] = None

class PersonOut(BaseModel):
    id: int
    name: str
    birth_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

class PersonWithRelationships(PersonOut):
    parents: List[PersonOut] = []
    children: List[PersonOut] = []
    spouses: List[PersonOut] = []
    siblings: List[PersonOut] = []

class PersonListOut(BaseModel):
    data: List[PersonOut]
