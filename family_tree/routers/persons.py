from fastapi import APIRouter, HTTPException, Query
from family_tree.models.person_model import PersonCreate, PersonUpdate, PersonOut, PersonListOut, PersonWithRelationships
from family_tree.services.person_service import create_person, update_person, get_person_by_id, get_persons, search_persons
from family_tree.services.tree_service import resolve_person

router = APIRouter(prefix="/api/v1/persons", tags=["Persons"])

@router.post("", response_model=PersonOut)
async def create_person_route(body: PersonCreate):
    return await create_person(body.name, body.birth_date)

@router.get("", response_model=PersonListOut)
async def list_persons():
    return {"data": await get_persons()}

@router.get("/search", response_model=PersonListOut)
async def search_persons_route(q: str = Query(..., min_length=1, description="Search query is required")):
    return {"data": await search_persons(q)}

@router.get("/{personId}", response_model=PersonOut)
async def get_person_route(personId: int):
    person = await get_person_by_id(personId)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person

@router.patch("/{personId}", response_model=PersonOut)
async def update_person_route(personId: int, body: PersonUpdate):
    # exclude_unset keeps an explicit null birth_date so it can be cleared
    return await update_person(personId, body.model_dump(exclude_unset=True))

@router.get("/{personId}/relationships", response_model=PersonWithRelationships)
async def get_person_relationships_route(personId: int):
    person = await resolve_person(personId)
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")
    return person
