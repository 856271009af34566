"""Domain errors raised by the service layer.

Each error is an ``HTTPException`` so routers can let it propagate untouched,
while callers inside Python can still match on the concrete type.
"""
from fastapi import HTTPException


class PersonNotFoundError(HTTPException):
    def __init__(self, person_id: int):
        super().__init__(status_code=404, detail=f"Person with id {person_id} not found")
        self.person_id = person_id


class PersonsNotFoundError(HTTPException):
    def __init__(self, person1_id: int, person2_id: int):
        super().__init__(status_code=404, detail="One or both persons do not exist")
        self.person_ids = (person1_id, person2_id)


class SelfRelationshipError(HTTPException):
    def __init__(self, person_id: int):
        super().__init__(status_code=400, detail="A person cannot be related to themselves")
        self.person_id = person_id


class RelationshipExistsError(HTTPException):
    def __init__(self, person1_id: int, person2_id: int, relationship_type: str):
        super().__init__(status_code=409, detail="Relationship already exists")
        self.person_ids = (person1_id, person2_id)
        self.relationship_type = relationship_type


class PartialRelationshipError(HTTPException):
    """The mirrored row of a symmetric relationship could not be written and the
    primary row could not be rolled back. Needs delete-then-recreate."""

    def __init__(self, person1_id: int, person2_id: int, relationship_type: str):
        super().__init__(
            status_code=500,
            detail=f"Partial {relationship_type} relationship stored between {person1_id} and {person2_id}",
        )
        self.person_ids = (person1_id, person2_id)
        self.relationship_type = relationship_type
