# vaxcare/notifications.py
import logging
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional

from . import database, models, schemas
from .deps import get_current_user, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])
admin_router = APIRouter(prefix="/api/admin", tags=["notifications"])

require_admin = require_role(models.ROLE_ADMIN, detail="Admin only")

AUDIENCE_ROLES = {
    "patients": models.ROLE_PATIENT,
    "staff": models.ROLE_STAFF,
}


def mark_read(db: Session, notification_id: int, user_id: int) -> int:
    """Flag one notification read; only its owner can. Returns rows affected."""
    count = (
        db.query(models.Notification)
        .filter(models.Notification.id == notification_id, models.Notification.user_id == user_id)
        .update({models.Notification.is_read: True})
    )
    db.commit()
    return count


def broadcast(db: Session, audience: Optional[str], title: str, message: str, user_id: Optional[int] = None) -> int:
    """Insert one notification per recipient and return how many were written.

    ``single`` targets ``user_id``; ``patients``/``staff`` every user of that
    role; any other audience every user.
    """
    if audience == "single":
        recipients = [user_id]
    else:
        q = db.query(models.User.id)
        if audience in AUDIENCE_ROLES:
            q = q.filter(models.User.role == AUDIENCE_ROLES[audience])
        recipients = [uid for (uid,) in q.all()]

    for uid in recipients:
        db.add(models.Notification(user_id=uid, title=title, message=message))
        db.commit()
    return len(recipients)


@router.get("/unread-count")
def unread_count(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    count = (
        db.query(func.count(models.Notification.id))
        .filter(models.Notification.user_id == current.id, models.Notification.is_read.is_(False))
        .scalar()
    )
    return {"count": count}


@router.get("", response_model=list[schemas.NotificationOut])
def list_notifications(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return (
        db.query(models.Notification)
        .filter(models.Notification.user_id == current.id)
        .order_by(models.Notification.created_at.desc(), models.Notification.id.desc())
        .all()
    )


@router.post("/read/{notification_id}")
def read_notification(
    notification_id: int,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    mark_read(db, notification_id, current.id)
    return {"success": True}


@admin_router.post("/notify")
def notify(
    payload: schemas.NotifyIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    sent = broadcast(db, payload.audience, payload.title, payload.message, payload.user_id)
    logger.info("Sent notification to %s recipient(s) (audience=%s)", sent, payload.audience)
    return {"success": True}
