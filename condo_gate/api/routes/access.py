"""
Access registration and history API routes.

Registration endpoints sit behind the "Register Access" navigation
rule; history and exports behind "History". Both are open to every
operator role.
"""

from datetime import date, datetime
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query, Response, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from condo_gate.api.deps import GUARD_RESPONSES, Container, RegistrationSvc, guard
from condo_gate.application.audit_export import render_csv, render_print_document
from condo_gate.domain.directory import DirectoryEntry, EntryKind, Selection
from condo_gate.domain.ledger import EventFilter
from condo_gate.domain.models import AccessEvent, Direction, User
from condo_gate.domain.navigation import ACCESS_HISTORY, REGISTER_ACCESS

router = APIRouter(prefix="/access", tags=["access"], responses=GUARD_RESPONSES)

RegisterOperator = Annotated[User, Depends(guard(REGISTER_ACCESS.path))]
HistoryOperator = Annotated[User, Depends(guard(ACCESS_HISTORY.path))]


class DirectoryEntryResponse(BaseModel):
    """Searchable directory row."""

    key: str
    label: str
    kind: EntryKind
    person_id: str
    person_name: str
    vehicle_id: str | None = None
    plate: str | None = None

    @classmethod
    def from_entry(cls, entry: DirectoryEntry) -> "DirectoryEntryResponse":
        vehicle = entry.vehicle
        return cls(
            key=entry.key,
            label=entry.label,
            kind=entry.kind,
            person_id=entry.person.id,
            person_name=entry.person.name,
            vehicle_id=entry.vehicle_id,
            plate=vehicle.plate if vehicle else None,
        )


class DirectoryResponse(BaseModel):
    entries: list[DirectoryEntryResponse]
    count: int


class VehicleOption(BaseModel):
    id: str
    plate: str
    model: str


class SelectionResponse(BaseModel):
    """Resolved directory entry, with the vehicles still to choose from."""

    person_id: str
    person_name: str
    label: str
    vehicle_id: str | None = None
    needs_vehicle_choice: bool
    vehicles: list[VehicleOption]

    @classmethod
    def from_selection(cls, selection: Selection) -> "SelectionResponse":
        return cls(
            person_id=selection.person.id,
            person_name=selection.person.name,
            label=selection.label,
            vehicle_id=selection.vehicle.id if selection.vehicle else None,
            needs_vehicle_choice=selection.needs_vehicle_choice,
            vehicles=[
                VehicleOption(id=v.id, plate=v.plate, model=v.model)
                for v in selection.person.vehicles
            ],
        )


class RegisterAccessRequest(BaseModel):
    """
    Entry/exit registration.

    Identify the subject either by ``entry_key`` (a directory key) or by
    ``person_id``; ``vehicle_id`` picks one of the person's vehicles.
    """

    direction: Direction
    entry_key: str | None = Field(default=None, max_length=64)
    person_id: str | None = Field(default=None, max_length=64)
    vehicle_id: str | None = Field(default=None, max_length=64)


class AccessEventResponse(BaseModel):
    """A registered access event."""

    id: int
    person_id: str
    person_name: str
    direction: Direction
    timestamp: datetime
    house_id: str
    house_address: str
    vehicle_id: str | None = None
    vehicle_plate: str | None = None

    @classmethod
    def from_event(cls, event: AccessEvent) -> "AccessEventResponse":
        return cls(
            id=event.id,
            person_id=event.person_id,
            person_name=event.person_name,
            direction=event.direction,
            timestamp=event.timestamp,
            house_id=event.house_id,
            house_address=event.house_address,
            vehicle_id=event.vehicle_id,
            vehicle_plate=event.vehicle_plate,
        )


class AccessEventListResponse(BaseModel):
    events: list[AccessEventResponse]
    count: int


def _event_list(events: list[AccessEvent]) -> AccessEventListResponse:
    return AccessEventListResponse(
        events=[AccessEventResponse.from_event(event) for event in events],
        count=len(events),
    )


def history_filter(
    q: Annotated[str | None, Query(max_length=100, description="Name, plate or address")] = None,
    direction: Annotated[Literal["Entry", "Exit", "all"] | None, Query()] = None,
    on_date: Annotated[date | None, Query(alias="date", description="Local calendar date")] = None,
) -> EventFilter:
    """Build history criteria from query parameters."""
    return EventFilter(free_text=q, direction=direction, on_date=on_date)


HistoryFilter = Annotated[EventFilter, Depends(history_filter)]


@router.get(
    "/directory",
    response_model=DirectoryResponse,
    summary="Search people and vehicles",
)
async def search_directory(
    _: RegisterOperator,
    registration: RegistrationSvc,
    q: Annotated[str | None, Query(max_length=100)] = None,
) -> DirectoryResponse:
    """Case-insensitive substring search over names and "PLATE - Name" labels."""
    entries = registration.search(q)
    return DirectoryResponse(
        entries=[DirectoryEntryResponse.from_entry(entry) for entry in entries],
        count=len(entries),
    )


@router.get(
    "/directory/{key}",
    response_model=SelectionResponse,
    summary="Select a directory entry",
)
async def select_directory_entry(
    key: Annotated[str, Path(max_length=64)],
    _: RegisterOperator,
    registration: RegistrationSvc,
) -> SelectionResponse:
    return SelectionResponse.from_selection(registration.select(key))


@router.post(
    "/events",
    response_model=AccessEventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register entry or exit",
)
async def register_access(
    request: RegisterAccessRequest,
    _: RegisterOperator,
    registration: RegistrationSvc,
) -> AccessEventResponse:
    """Append an event to the access ledger."""
    if request.entry_key:
        selection = registration.select(request.entry_key, request.vehicle_id)
        event = registration.register_selection(selection, request.direction)
    else:
        event = registration.register(
            request.person_id,
            request.direction,
            vehicle_id=request.vehicle_id,
        )
    return AccessEventResponse.from_event(event)


@router.get(
    "/today",
    response_model=AccessEventListResponse,
    summary="Today's accesses",
)
async def list_today(
    _: RegisterOperator,
    registration: RegistrationSvc,
) -> AccessEventListResponse:
    """Events registered on the local calendar day, most recent first."""
    return _event_list(registration.today())


@router.get(
    "/history",
    response_model=AccessEventListResponse,
    summary="Access history",
)
async def list_history(
    _: HistoryOperator,
    registration: RegistrationSvc,
    criteria: HistoryFilter,
) -> AccessEventListResponse:
    return _event_list(registration.history(criteria))


@router.get(
    "/history/export.csv",
    summary="Export history as CSV",
    response_class=Response,
)
async def export_history_csv(
    _: HistoryOperator,
    container: Container,
    criteria: HistoryFilter,
) -> Response:
    """Download the filtered history with the same rows the list shows."""
    settings = container.settings
    events = container.registration.history(criteria)
    artifact = render_csv(
        events,
        today=container.ledger.now().date(),
        timestamp_format=settings.export_timestamp_format,
        tz=settings.tzinfo,
    )
    return Response(
        content=artifact.content,
        media_type=f"{artifact.media_type}; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{artifact.filename}"',
            "X-Record-Count": str(artifact.row_count),
        },
    )


@router.get(
    "/history/report",
    summary="Printable history report",
    response_class=HTMLResponse,
)
async def history_report(
    _: HistoryOperator,
    container: Container,
    criteria: HistoryFilter,
) -> HTMLResponse:
    settings = container.settings
    events = container.registration.history(criteria)
    artifact = render_print_document(
        events,
        generated_at=container.ledger.now(),
        timestamp_format=settings.export_timestamp_format,
        date_format=settings.report_date_format,
        tz=settings.tzinfo,
    )
    return HTMLResponse(
        content=artifact.content,
        headers={"X-Record-Count": str(artifact.row_count)},
    )
