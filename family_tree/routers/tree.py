from fastapi import APIRouter, HTTPException
from family_tree.services.tree_service import get_family_tree
from family_tree.models.tree_model import FamilyTreeOut

router = APIRouter(prefix="/api/v1/tree", tags=["Tree"])

@router.get("/{personId}", response_model=FamilyTreeOut)
async def get_tree_route(personId: int):
    data = await get_family_tree(personId)
    if not data:
        raise HTTPException(status_code=404, detail="Person not found")
    return data
