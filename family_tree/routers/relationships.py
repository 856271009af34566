from fastapi import APIRouter
from family_tree.models.common import DeletedOut
from family_tree.models.relationship_model import RelationshipIn, RelationshipOut
from family_tree.services.relationship_service import create_relationship, delete_relationship

router = APIRouter(prefix="/api/v1/relationships", tags=["Relationships"])

@router.post("", response_model=RelationshipOut)
async def create_relationship_route(body: RelationshipIn):
    return await create_relationship(body.person1_id, body.person2_id, body.relationship_type)

@router.delete("", response_model=DeletedOut)
async def delete_relationship_route(body: RelationshipIn):
    return await delete_relationship(body.person1_id, body.person2_id, body.relationship_type)
