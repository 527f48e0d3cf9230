# app/services/occupancy_service.py
"""
Occupancy computation.

A reading (space, headcount) is always appended to occupancy_readings first.
Then the space's current_occupancy row is replaced as a whole with the new
count, percentage and crowd level.

Percentage = count / capacity × 100, clamped to [0, 100]. The raw count is
stored unclamped. Crowd level bands are lower-bound inclusive and come from
settings (CROWD_MODERATE_PERCENT / CROWD_HIGH_PERCENT / CROWD_FULL_PERCENT).

Writers for the same space are serialized through the version column on
current_occupancy: a stale version (or a racing first insert) rolls back and
retries against the fresh row. Reading ids only ever increase, so the row
only moves forward: a reading that loses the race to a later one is logged
but does not replace it. Different spaces never contend.
"""

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.occupancy import CrowdLevel, CurrentOccupancy, OccupancyReading
from app.models.space import Space
from app.schemas.common import PageParams
from app.utils.logger import get_logger
from app.utils.pagination import paginate

logger = get_logger(__name__)


def _clamped_percentage(count: int, capacity: int) -> float:
    if capacity is None or capacity <= 0:
        raise ValidationFailedError(f"Space capacity must be positive (got {capacity})")
    return min(max(count * 100 / capacity, 0.0), 100.0)


def compute_percentage(count: int, capacity: int) -> float:
    return round(_clamped_percentage(count, capacity), 2)


def evaluate(count: int, capacity: int) -> Tuple[float, CrowdLevel]:
    """
    Returns (percentage, crowd level) for a headcount.

    The level is classified on the unrounded percentage, so a single person in
    a huge space is LOW and one seat short of capacity is never FULL, even when
    the two-decimal percentage reads 0.0 or 100.0.
    """
    raw = _clamped_percentage(count, capacity)
    return round(raw, 2), classify_crowd_level(raw)


def classify_crowd_level(percentage: float) -> CrowdLevel:
    if percentage <= 0:
        return CrowdLevel.EMPTY
    if percentage >= settings.CROWD_FULL_PERCENT:
        return CrowdLevel.FULL
    if percentage >= settings.CROWD_HIGH_PERCENT:
        return CrowdLevel.HIGH
    if percentage >= settings.CROWD_MODERATE_PERCENT:
        return CrowdLevel.MODERATE
    return CrowdLevel.LOW


def _get_space(db: Session, space_id: int) -> Space:
    space = db.query(Space).filter(Space.id == space_id).first()
    if not space:
        raise NotFoundError(f"Space {space_id} not found")
    return space


def _write_current(db: Session, space_id: int, reading: OccupancyReading,
                   percentage: float, level: CrowdLevel) -> CurrentOccupancy:
    """
    Replace every field of the space's current row (or insert it) in one flush.
    A row already holding a later reading is returned untouched.
    """
    current = db.query(CurrentOccupancy).filter(CurrentOccupancy.space_id == space_id).first()
    if not current:
        current = CurrentOccupancy(space_id=space_id)
        db.add(current)
    elif current.reading_id is not None and current.reading_id > reading.id:
        return current

    current.current_count = reading.count
    current.percentage = percentage
    current.crowd_level = level
    current.reading_id = reading.id
    current.updated_at = reading.recorded_at
    db.commit()
    return current


def record_reading(db: Session, space_id: int, count: int,
                   source: Optional[str] = None) -> CurrentOccupancy:
    """
    Log a raw reading and update the space's current occupancy.

    Raises NotFoundError for an unknown space and ValidationFailedError for a
    negative count or a space with capacity <= 0 (the reading is still logged
    in the latter case).
    """
    space = _get_space(db, space_id)
    if count is None or count < 0:
        raise ValidationFailedError(f"Reported count must be >= 0 (got {count})")
    capacity = space.capacity

    reading = OccupancyReading(space_id=space_id, count=count, source=source,
                               recorded_at=datetime.utcnow())
    db.add(reading)
    db.commit()
    db.refresh(reading)

    if capacity is None or capacity <= 0:
        logger.error(f"[OCCUPANCY] Space {space_id} has invalid capacity {capacity}; "
                     f"reading {reading.id} logged but current state not updated")
        raise ValidationFailedError(f"Space {space_id} has invalid capacity {capacity}")

    percentage, level = evaluate(count, capacity)

    for attempt in range(1, settings.OCCUPANCY_MAX_RETRIES + 1):
        try:
            current = _write_current(db, space_id, reading, percentage, level)
            break
        except (StaleDataError, IntegrityError) as e:
            db.rollback()
            if isinstance(e, IntegrityError):
                # A foreign-key failure means the space is gone, not contended
                _get_space(db, space_id)
            logger.warning(f"[OCCUPANCY] Space {space_id}: concurrent update on attempt "
                           f"{attempt}/{settings.OCCUPANCY_MAX_RETRIES} ({type(e).__name__}), retrying")
    else:
        raise ConflictError(f"Could not update occupancy for space {space_id}: too many concurrent updates")

    if current.reading_id != reading.id:
        logger.info(f"[OCCUPANCY] Space {space_id}: reading {reading.id} superseded by "
                    f"reading {current.reading_id}, current state kept")
        return current

    logger.info(f"[OCCUPANCY] Space {space_id}: {count}/{capacity} → {percentage}% {level.value}")
    if level == CrowdLevel.FULL:
        logger.warning(f"[ALERT][OCCUPANCY_FULL] Space {space_id} at {count}/{capacity}")
    return current


def reset_occupancy(db: Session, space_id: int) -> CurrentOccupancy:
    """Record a zero reading. Used after sensor restarts or miscounts."""
    return record_reading(db, space_id, 0, source="reset")


def get_current(db: Session, space_id: int) -> CurrentOccupancy:
    _get_space(db, space_id)
    current = db.query(CurrentOccupancy).filter(CurrentOccupancy.space_id == space_id).first()
    if not current:
        raise NotFoundError(f"No occupancy reported yet for space {space_id}")
    return current


def list_current(db: Session, params: PageParams,
                 crowd_level: Optional[CrowdLevel] = None) -> Tuple[list, int]:
    q = db.query(CurrentOccupancy)
    if crowd_level:
        q = q.filter(CurrentOccupancy.crowd_level == crowd_level)
    return paginate(q.order_by(CurrentOccupancy.space_id), params)


def list_history(db: Session, space_id: int, params: PageParams,
                 since: Optional[datetime] = None, until: Optional[datetime] = None) -> Tuple[list, int]:
    _get_space(db, space_id)
    q = db.query(OccupancyReading).filter(OccupancyReading.space_id == space_id)
    if since:
        q = q.filter(OccupancyReading.recorded_at >= since)
    if until:
        q = q.filter(OccupancyReading.recorded_at < until)
    return paginate(q.order_by(OccupancyReading.recorded_at.desc(), OccupancyReading.id.desc()), params)
