"""
FastAPI routes for court terms, term sheet imports and the room inventory.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from court_facilities.db.models import RoomStatus, RoomType
from court_facilities.schemas import (
    AssignmentCreate,
    AssignmentUpdate,
    ManualImportRequest,
    PersonnelCreate,
    ReimportRequest,
    RoomCreate,
    RoomFilters,
    RoomStatusChange,
    RoomUpdate,
    TermCreate,
    TermImportData,
    TermUpdate,
)

router = APIRouter()
terms_router = APIRouter(tags=["terms"])
imports_router = APIRouter(prefix="/imports", tags=["imports"])
rooms_router = APIRouter(tags=["rooms"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_app_state(request: Request):
    return request.app.state


# --- Terms -----------------------------------------------------------------


@terms_router.get("/terms")
async def list_terms(state=Depends(get_app_state)):
    terms = await run_in_threadpool(state.term_service.fetch_terms)
    return {"terms": terms}


@terms_router.post("/terms", status_code=201)
async def create_term(payload: TermCreate, state=Depends(get_app_state)):
    term_id = await run_in_threadpool(state.term_service.create_term, payload)
    return {"id": term_id}


@terms_router.get("/terms/current")
async def get_current_term(today: Optional[date] = None, state=Depends(get_app_state)):
    term = await run_in_threadpool(state.term_service.fetch_current_term, today)
    return {"term": term}


@terms_router.get("/terms/{term_id}")
async def get_term(term_id: str, state=Depends(get_app_state)):
    term = await run_in_threadpool(state.term_service.fetch_term_by_id, term_id)
    if not term:
        raise HTTPException(status_code=404, detail="Term not found.")
    return term


@terms_router.patch("/terms/{term_id}")
async def update_term(term_id: str, payload: TermUpdate, state=Depends(get_app_state)):
    return await run_in_threadpool(state.term_service.update_term, term_id, payload)


@terms_router.delete("/terms/{term_id}")
async def delete_term(term_id: str, state=Depends(get_app_state)):
    await run_in_threadpool(state.term_service.delete_term, term_id)
    return {"deleted": term_id}


@terms_router.get("/terms/{term_id}/assignments")
async def list_assignments(term_id: str, state=Depends(get_app_state)):
    assignments = await run_in_threadpool(state.term_service.fetch_term_assignments, term_id)
    return {"assignments": assignments}


@terms_router.post("/terms/{term_id}/assignments", status_code=201)
async def create_assignment(term_id: str, payload: AssignmentCreate, state=Depends(get_app_state)):
    payload = payload.model_copy(update={"term_id": term_id})
    assignment_id = await run_in_threadpool(state.term_service.create_term_assignment, payload)
    return {"id": assignment_id}


@terms_router.patch("/assignments/{assignment_id}")
async def update_assignment(assignment_id: str, payload: AssignmentUpdate, state=Depends(get_app_state)):
    await run_in_threadpool(state.term_service.update_term_assignment, assignment_id, payload)
    return {"updated": assignment_id}


@terms_router.delete("/assignments/{assignment_id}")
async def delete_assignment(assignment_id: str, state=Depends(get_app_state)):
    await run_in_threadpool(state.term_service.delete_term_assignment, assignment_id)
    return {"deleted": assignment_id}


@terms_router.get("/terms/{term_id}/personnel")
async def list_personnel(term_id: str, state=Depends(get_app_state)):
    personnel = await run_in_threadpool(state.term_service.fetch_term_personnel, term_id)
    return {"personnel": personnel}


@terms_router.post("/terms/{term_id}/personnel", status_code=201)
async def create_personnel(term_id: str, payload: PersonnelCreate, state=Depends(get_app_state)):
    payload = payload.model_copy(update={"term_id": term_id})
    personnel_id = await run_in_threadpool(state.term_service.create_term_personnel, payload)
    return {"id": personnel_id}


@terms_router.delete("/personnel/{personnel_id}")
async def delete_personnel(personnel_id: str, state=Depends(get_app_state)):
    await run_in_threadpool(state.term_service.delete_term_personnel, personnel_id)
    return {"deleted": personnel_id}


# --- Term sheet imports ----------------------------------------------------


@imports_router.post("/document")
async def import_document(file: UploadFile = File(...), state=Depends(get_app_state)):
    """Parse an uploaded term sheet into a bundle for review. Nothing is saved."""
    content = await file.read()
    return await run_in_threadpool(
        state.import_pipeline.import_document, file.filename, file.content_type, content
    )


@imports_router.post("/text")
async def import_text(payload: ManualImportRequest, state=Depends(get_app_state)):
    return await run_in_threadpool(state.import_pipeline.import_text, payload.text)


@imports_router.post("/commit", status_code=201)
async def commit_import(payload: TermImportData, state=Depends(get_app_state)):
    """Save a reviewed bundle as a new term."""
    term_id = await run_in_threadpool(state.import_pipeline.commit, payload)
    return {"term_id": term_id}


@imports_router.post("/terms/{term_id}/reimport")
async def reimport_term(term_id: str, payload: ReimportRequest, state=Depends(get_app_state)):
    return await run_in_threadpool(state.import_pipeline.reimport_from_url, term_id, payload.url)


# --- Rooms -----------------------------------------------------------------


@rooms_router.get("/buildings")
async def list_buildings(state=Depends(get_app_state)):
    buildings = await run_in_threadpool(state.facilities_service.list_buildings)
    return {"buildings": buildings}


@rooms_router.get("/floors")
async def list_floors(building_id: Optional[str] = None, state=Depends(get_app_state)):
    floors = await run_in_threadpool(state.facilities_service.list_floors, building_id)
    return {"floors": floors}


@rooms_router.get("/rooms")
async def list_rooms(
    building_id: Optional[str] = None,
    floor_id: Optional[str] = None,
    room_type: Optional[RoomType] = None,
    status: Optional[RoomStatus] = None,
    search: Optional[str] = None,
    state=Depends(get_app_state),
):
    filters = RoomFilters(
        building_id=building_id, floor_id=floor_id, room_type=room_type, status=status, search=search
    )
    rooms = await run_in_threadpool(state.facilities_service.list_rooms, filters)
    return {"rooms": rooms}


@rooms_router.post("/rooms", status_code=201)
async def create_room(payload: RoomCreate, state=Depends(get_app_state)):
    room_id = await run_in_threadpool(state.facilities_service.create_room, payload)
    return {"id": room_id}


@rooms_router.get("/rooms/export")
async def export_rooms(state=Depends(get_app_state)):
    content = await run_in_threadpool(state.facilities_service.export_rooms_workbook)
    filename = f"rooms-export-{date.today().isoformat()}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@rooms_router.post("/rooms/import")
async def import_rooms(
    file: UploadFile = File(...),
    dry_run: bool = Query(False),
    state=Depends(get_app_state),
):
    """Apply edits from a rooms workbook; ``dry_run`` previews without writing."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file provided")
    return await run_in_threadpool(state.facilities_service.import_rooms_workbook, content, dry_run)


@rooms_router.get("/rooms/{room_id}")
async def get_room(room_id: str, state=Depends(get_app_state)):
    return await run_in_threadpool(state.facilities_service.get_room, room_id)


@rooms_router.patch("/rooms/{room_id}")
async def update_room(room_id: str, payload: RoomUpdate, state=Depends(get_app_state)):
    return await run_in_threadpool(state.facilities_service.update_room, room_id, payload)


@rooms_router.delete("/rooms/{room_id}")
async def delete_room(room_id: str, state=Depends(get_app_state)):
    await run_in_threadpool(state.facilities_service.delete_room, room_id)
    return {"deleted": room_id}


@rooms_router.post("/rooms/{room_id}/status")
async def change_room_status(room_id: str, payload: RoomStatusChange, state=Depends(get_app_state)):
    return await run_in_threadpool(state.facilities_service.change_room_status, room_id, payload.status)


@rooms_router.post("/rooms/{room_id}/photos/{view}")
async def upload_courtroom_photo(
    room_id: str,
    view: str,
    file: UploadFile = File(...),
    state=Depends(get_app_state),
):
    content = await file.read()
    photos = await run_in_threadpool(
        state.facilities_service.save_courtroom_photo, room_id, view, file.filename or "photo", content
    )
    return {"courtroom_photos": photos}


router.include_router(terms_router)
router.include_router(imports_router)
router.include_router(rooms_router)
