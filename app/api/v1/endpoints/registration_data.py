# File: app/api/v1/endpoints/registration_data.py
import logging
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session
from app import schemas
from app.api import deps
from app.core.context import ActorContext
from app.core.exceptions import ApplicationError
from app.db.database import get_db
from app.services.registration_data_service import registration_data_service
from app.services.registration_export_service import build_csv, export_filename
from app.services.registration_submission_service import registration_submission_service

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/events/{event_id}/registration-data/form", response_model=schemas.RegistrationForm)
def get_registration_form(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.get_actor_context)
) -> Any:
    """Inputs the current user should fill in for their family's RSVP"""
    event = registration_data_service.get_event(db, event_id)
    return registration_data_service.build_form(db, event, actor.id)

@router.post("/events/{event_id}/registration-data", response_model=schemas.SaveResult)
async def save_registration_data(
    event_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.get_actor_context)
) -> Any:
    """Save a form-encoded registration submission, all or nothing"""
    registration_data_service.get_event(db, event_id)

    form = await request.form()
    submission: Dict[str, str] = {key: value for key, value in form.items() if isinstance(value, str)}

    try:
        registration_submission_service.save_submission(db, actor, event_id, submission)
    except ApplicationError as e:
        logger.warning(f"Registration data for event {event_id} rejected for user {actor.id}: {e.message}")
        return JSONResponse(
            status_code=e.status_code,
            content={
                "success": False,
                "message": f"Failed to save registration data: {e.message}",
                "redirect_to": f"/events/{event_id}/registration-data/form",
            },
        )

    return {
        "success": True,
        "message": "Registration data saved successfully.",
        "redirect_to": f"/events/{event_id}",
    }

@router.get("/events/{event_id}/registration-data", response_model=schemas.RegistrationGrid)
def view_registration_data(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Any:
    """Every "yes" participant with their answers, for on-screen review"""
    registration_data_service.get_event(db, event_id)
    return registration_data_service.get_registration_data_for_event(db, event_id)

@router.get("/events/{event_id}/registration-data/export")
def export_registration_data(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.require_admin)
) -> Response:
    """Download the registration grid as CSV"""
    event = registration_data_service.get_event(db, event_id)
    grid = registration_data_service.get_registration_data_for_event(db, event_id)
    filename = export_filename(event.name)

    return Response(
        content=build_csv(grid),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        },
    )

@router.get("/events/{event_id}/registration-data/status", response_model=schemas.CompletionStatus)
def get_registration_status(
    event_id: int,
    db: Session = Depends(get_db),
    actor: ActorContext = Depends(deps.get_actor_context)
) -> Any:
    """Whether the current user's family has answered every required field"""
    registration_data_service.get_event(db, event_id)
    return registration_data_service.get_completion_status_for_user_rsvp(db, event_id, actor.id)
