from pydantic import BaseModel
from family_tree.models.person_model import PersonWithRelationships

class FamilyTreeOut(BaseModel):
    center_person: PersonWithRelationships
    grandparents: list[PersonWithRelationships]
    grandchildren: list[PersonWithRelationships]
