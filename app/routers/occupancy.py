# app/routers/occupancy.py
"""Occupancy: report readings, read current state and history."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
from app.database import get_db
from app.models.occupancy import CrowdLevel
from app.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from app.schemas.occupancy import CurrentOccupancyOut, OccupancyReadingOut, OccupancyReport
from app.security import Permission, Principal, ensure_owner_or_permission, get_current_principal
from app.services import occupancy_service
from app.services.space_service import get_space
from app.utils.pagination import page_params

router = APIRouter()


def _authorize_report(db: Session, principal: Principal, space_id: int) -> None:
    space = get_space(db, space_id)
    ensure_owner_or_permission(principal, space.owner_id,
                               Permission.OCCUPANCY_REPORT_OWN, Permission.OCCUPANCY_REPORT_ANY)


@router.post("/spaces/{space_id}/occupancy", response_model=ApiResponse[CurrentOccupancyOut],
             summary="Report a headcount for a space")
def report_occupancy(space_id: int, body: OccupancyReport,
                     principal: Principal = Depends(get_current_principal),
                     db: Session = Depends(get_db)):
    """
    Logs the raw reading and recomputes the space's current occupancy.
    Counts above capacity are accepted; the percentage is clamped to 100.
    """
    _authorize_report(db, principal, space_id)
    current = occupancy_service.record_reading(db, space_id, body.count, body.source)
    return ok(CurrentOccupancyOut.model_validate(current), "Occupancy updated")


@router.get("/spaces/{space_id}/occupancy", response_model=ApiResponse[CurrentOccupancyOut],
            summary="Current occupancy for a space")
def get_space_occupancy(space_id: int, db: Session = Depends(get_db)):
    current = occupancy_service.get_current(db, space_id)
    return ok(CurrentOccupancyOut.model_validate(current))


@router.get("/spaces/{space_id}/occupancy/history",
            response_model=ApiResponse[Page[OccupancyReadingOut]],
            summary="Raw reading history for a space, newest first")
def get_occupancy_history(space_id: int,
                          since: Optional[datetime] = None,
                          until: Optional[datetime] = None,
                          params: PageParams = Depends(page_params),
                          db: Session = Depends(get_db)):
    items, total = occupancy_service.list_history(db, space_id, params, since, until)
    return ok(page_of([OccupancyReadingOut.model_validate(r) for r in items], total, params))


@router.put("/spaces/{space_id}/occupancy/reset", response_model=ApiResponse[CurrentOccupancyOut],
            summary="Reset a space's count to zero")
def reset_space_occupancy(space_id: int,
                          principal: Principal = Depends(get_current_principal),
                          db: Session = Depends(get_db)):
    """Records a zero reading. Use after sensor restarts or miscounts."""
    _authorize_report(db, principal, space_id)
    current = occupancy_service.reset_occupancy(db, space_id)
    return ok(CurrentOccupancyOut.model_validate(current), "Occupancy reset")


@router.get("/occupancy", response_model=ApiResponse[Page[CurrentOccupancyOut]],
            summary="Current occupancy for all spaces")
def get_all_occupancy(crowd_level: Optional[CrowdLevel] = None,
                      params: PageParams = Depends(page_params),
                      db: Session = Depends(get_db)):
    """Filter by crowd_level, e.g. ?crowd_level=LOW to find quiet spaces."""
    items, total = occupancy_service.list_current(db, params, crowd_level)
    return ok(page_of([CurrentOccupancyOut.model_validate(c) for c in items], total, params))
