"""
Person router backing the phonebook client.

No authentication; names are unique per collection.
"""

from typing import List
from fastapi import APIRouter, Depends, Response, status

from server.src.dependencies import get_person_repository
from server.src.models.auth import ErrorResponse
from server.src.models.person import PersonCreate, PersonResponse, PersonUpdate
from server.src.repositories.person_repo import PersonRepository

router = APIRouter(
    prefix="/persons",
    tags=["Persons"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    }
)


@router.get("", response_model=List[PersonResponse])
async def list_persons(
    person_repo: PersonRepository = Depends(get_person_repository)
) -> List[dict]:
    return await person_repo.list_persons()


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: str,
    person_repo: PersonRepository = Depends(get_person_repository)
) -> dict:
    return await person_repo.get_person(person_id)


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def create_person(
    person: PersonCreate,
    person_repo: PersonRepository = Depends(get_person_repository)
) -> dict:
    return await person_repo.create_person(person.name, person.number)


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: str,
    person: PersonUpdate,
    person_repo: PersonRepository = Depends(get_person_repository)
) -> dict:
    return await person_repo.update_person(person_id, person.model_dump(exclude_unset=True))


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_person(
    person_id: str,
    person_repo: PersonRepository = Depends(get_person_repository)
) -> Response:
    await person_repo.delete_person(person_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
