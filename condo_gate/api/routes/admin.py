"""
Administration API routes.

CRUD for houses, people and vehicles. Administrator only: gatekeepers
are redirected to their dashboard by the navigation guard.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from pydantic import BaseModel, Field

from condo_gate.api.deps import GUARD_RESPONSES, AdministrationSvc, guard
from condo_gate.application.administration import VehicleDraft
from condo_gate.domain.models import House, Person, PersonSubtype, PersonType, User, Vehicle
from condo_gate.domain.navigation import HOUSES, PEOPLE

router = APIRouter(prefix="/admin", tags=["admin"], responses=GUARD_RESPONSES)

HousesAdmin = Annotated[User, Depends(guard(HOUSES.path))]
PeopleAdmin = Annotated[User, Depends(guard(PEOPLE.path))]

EntityId = Annotated[str, Path(min_length=1, max_length=64)]


class HouseResponse(BaseModel):
    """House with its address and linked people."""

    id: str
    street_type: str
    street_name: str
    number: str
    address: str
    residents: list[str]
    authorized: list[str]
    created_at: datetime

    @classmethod
    def from_house(cls, house: House) -> "HouseResponse":
        return cls(
            id=house.id,
            street_type=house.street_type,
            street_name=house.street_name,
            number=house.number,
            address=house.address,
            residents=list(house.residents),
            authorized=list(house.authorized),
            created_at=house.created_at,
        )


class HouseListResponse(BaseModel):
    houses: list[HouseResponse]
    count: int


class StreetGroup(BaseModel):
    street: str
    houses: list[HouseResponse]


class HouseRequest(BaseModel):
    """House address."""

    street_type: str = Field(..., min_length=1, max_length=30)
    street_name: str = Field(..., min_length=1, max_length=100)
    number: str = Field(..., min_length=1, max_length=10)


class HouseUpdateRequest(BaseModel):
    street_type: str | None = Field(None, max_length=30)
    street_name: str | None = Field(None, max_length=100)
    number: str | None = Field(None, max_length=10)


class VehicleResponse(BaseModel):
    id: str
    plate: str
    model: str
    owner_id: str

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> "VehicleResponse":
        return cls(
            id=vehicle.id,
            plate=vehicle.plate,
            model=vehicle.model,
            owner_id=vehicle.owner_id,
        )


class VehicleRequest(BaseModel):
    """Vehicle as typed by the administrator. Plates are normalized."""

    plate: str = Field(..., min_length=1, max_length=16)
    model: str = Field(default="", max_length=60)
    id: str | None = Field(default=None, max_length=64)


class PersonResponse(BaseModel):
    id: str
    name: str
    national_id: str
    type: PersonType
    subtype: PersonSubtype | None
    house_id: str
    vehicles: list[VehicleResponse]
    created_at: datetime

    @classmethod
    def from_person(cls, person: Person) -> "PersonResponse":
        return cls(
            id=person.id,
            name=person.name,
            national_id=person.national_id,
            type=person.type,
            subtype=person.subtype,
            house_id=person.house_id,
            vehicles=[VehicleResponse.from_vehicle(v) for v in person.vehicles],
            created_at=person.created_at,
        )


class PersonListResponse(BaseModel):
    people: list[PersonResponse]
    count: int


class PersonRequest(BaseModel):
    """Full person record; the subtype is required for Authorized people only."""

    name: str = Field(..., min_length=1, max_length=100)
    national_id: str = Field(..., min_length=1, max_length=20)
    type: PersonType
    subtype: PersonSubtype | None = None
    house_id: str = Field(..., min_length=1, max_length=64)
    vehicles: list[VehicleRequest] | None = None


class HouseMembersResponse(BaseModel):
    house: HouseResponse
    residents: list[PersonResponse]
    authorized: list[PersonResponse]


def _drafts(vehicles: list[VehicleRequest] | None) -> list[VehicleDraft] | None:
    if vehicles is None:
        return None
    return [VehicleDraft(plate=v.plate, model=v.model, id=v.id) for v in vehicles]


# Houses


@router.get("/houses", response_model=HouseListResponse, summary="List houses")
async def list_houses(_: HousesAdmin, admin: AdministrationSvc) -> HouseListResponse:
    houses = admin.list_houses()
    return HouseListResponse(
        houses=[HouseResponse.from_house(house) for house in houses],
        count=len(houses),
    )


@router.get(
    "/houses/by-street",
    response_model=list[StreetGroup],
    summary="Houses grouped by street",
)
async def list_houses_by_street(_: HousesAdmin, admin: AdministrationSvc) -> list[StreetGroup]:
    return [
        StreetGroup(street=street, houses=[HouseResponse.from_house(h) for h in houses])
        for street, houses in admin.houses_by_street().items()
    ]


@router.get(
    "/houses/{house_id}",
    response_model=HouseMembersResponse,
    summary="House details",
)
async def get_house(
    house_id: EntityId,
    _: HousesAdmin,
    admin: AdministrationSvc,
) -> HouseMembersResponse:
    house = admin.get_house(house_id)
    residents, authorized = admin.house_members(house_id)
    return HouseMembersResponse(
        house=HouseResponse.from_house(house),
        residents=[PersonResponse.from_person(p) for p in residents],
        authorized=[PersonResponse.from_person(p) for p in authorized],
    )


@router.post(
    "/houses",
    response_model=HouseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create house",
)
async def create_house(
    request: HouseRequest,
    _: HousesAdmin,
    admin: AdministrationSvc,
) -> HouseResponse:
    house = admin.create_house(request.street_type, request.street_name, request.number)
    return HouseResponse.from_house(house)


@router.put(
    "/houses/{house_id}",
    response_model=HouseResponse,
    summary="Update house address",
)
async def update_house(
    house_id: EntityId,
    request: HouseUpdateRequest,
    _: HousesAdmin,
    admin: AdministrationSvc,
) -> HouseResponse:
    house = admin.update_house(
        house_id,
        street_type=request.street_type,
        street_name=request.street_name,
        number=request.number,
    )
    return HouseResponse.from_house(house)


@router.delete(
    "/houses/{house_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete house",
    description="Only houses without linked people can be deleted.",
)
async def delete_house(house_id: EntityId, _: HousesAdmin, admin: AdministrationSvc) -> None:
    admin.delete_house(house_id)


# People


@router.get("/people", response_model=PersonListResponse, summary="List people")
async def list_people(
    _: PeopleAdmin,
    admin: AdministrationSvc,
    q: Annotated[str | None, Query(max_length=100, description="Name or national id")] = None,
) -> PersonListResponse:
    people = admin.list_people(q)
    return PersonListResponse(
        people=[PersonResponse.from_person(person) for person in people],
        count=len(people),
    )


@router.get("/people/{person_id}", response_model=PersonResponse, summary="Person details")
async def get_person(
    person_id: EntityId,
    _: PeopleAdmin,
    admin: AdministrationSvc,
) -> PersonResponse:
    return PersonResponse.from_person(admin.get_person(person_id))


@router.post(
    "/people",
    response_model=PersonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create person",
)
async def create_person(
    request: PersonRequest,
    _: PeopleAdmin,
    admin: AdministrationSvc,
) -> PersonResponse:
    person = admin.create_person(
        name=request.name,
        national_id=request.national_id,
        type=request.type,
        house_id=request.house_id,
        subtype=request.subtype,
        vehicles=_drafts(request.vehicles) or [],
    )
    return PersonResponse.from_person(person)


@router.put("/people/{person_id}", response_model=PersonResponse, summary="Update person")
async def update_person(
    person_id: EntityId,
    request: PersonRequest,
    _: PeopleAdmin,
    admin: AdministrationSvc,
) -> PersonResponse:
    """Replace a person's details. Omitting ``vehicles`` keeps the current fleet."""
    person = admin.update_person(
        person_id,
        name=request.name,
        national_id=request.national_id,
        type=request.type,
        house_id=request.house_id,
        subtype=request.subtype,
        vehicles=_drafts(request.vehicles),
    )
    return PersonResponse.from_person(person)


@router.delete(
    "/people/{person_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete person",
)
async def delete_person(person_id: EntityId, _: PeopleAdmin, admin: AdministrationSvc) -> None:
    admin.delete_person(person_id)


@router.post(
    "/people/{person_id}/vehicles",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add vehicle",
)
async def add_vehicle(
    person_id: EntityId,
    request: VehicleRequest,
    _: PeopleAdmin,
    admin: AdministrationSvc,
) -> VehicleResponse:
    vehicle = admin.add_vehicle(person_id, request.plate, request.model)
    return VehicleResponse.from_vehicle(vehicle)


@router.delete(
    "/people/{person_id}/vehicles/{vehicle_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove vehicle",
)
async def remove_vehicle(
    person_id: EntityId,
    vehicle_id: EntityId,
    _: PeopleAdmin,
    admin: AdministrationSvc,
) -> None:
    admin.remove_vehicle(person_id, vehicle_id)
