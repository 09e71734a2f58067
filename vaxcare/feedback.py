# vaxcare/feedback.py
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from typing import Optional

from . import database, models, schemas
from .deps import get_current_user, require_role
from .errors import VaxcareError
from .uploads import save_upload

router = APIRouter(prefix="/api/feedback", tags=["feedback"])

require_admin = require_role(models.ROLE_ADMIN, detail="Admin only")


def _int_or_none(raw: Optional[str]) -> Optional[int]:
    try:
        return int(raw) if raw not in (None, "") else None
    except ValueError:
        return None


# ---- Any signed-in user opens a ticket
@router.post("")
async def create_feedback(
    type: Optional[str] = Form(default=None),
    appointment_id: Optional[str] = Form(default=None),
    center_id: Optional[str] = Form(default=None),
    rating: Optional[str] = Form(default=None),
    message: Optional[str] = Form(default=None),
    attachment: Optional[UploadFile] = File(default=None),
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    if not message or not message.strip():
        raise VaxcareError("Message required")

    attachment_path = await save_upload(attachment)

    db.add(models.Feedback(
        user_id=current.id,
        type=type or "feedback",
        appointment_id=_int_or_none(appointment_id),
        center_id=_int_or_none(center_id),
        rating=_int_or_none(rating) or 5,
        message=message,
        attachment_path=attachment_path,
        status="open",
    ))
    db.commit()
    return {"success": True}


@router.get("/my", response_model=list[schemas.FeedbackOut])
def my_feedback(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    return (
        db.query(models.Feedback)
        .filter(models.Feedback.user_id == current.id)
        .order_by(models.Feedback.created_at.desc(), models.Feedback.id.desc())
        .all()
    )


@router.get("")
def all_feedback(
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    rows = (
        db.query(models.Feedback, models.User.name)
        .outerjoin(models.User, models.User.id == models.Feedback.user_id)
        .order_by(models.Feedback.created_at.desc(), models.Feedback.id.desc())
        .all()
    )
    return [
        {**schemas.FeedbackOut.model_validate(f).model_dump(mode="json"), "patient_name": name}
        for f, name in rows
    ]


# Replying reopens the ticket so the author sees it again.
@router.post("/{feedback_id}/reply")
def reply_feedback(
    feedback_id: int,
    payload: schemas.ReplyIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Feedback).filter(models.Feedback.id == feedback_id).update(
        {models.Feedback.admin_reply: payload.reply or "", models.Feedback.status: "open"}
    )
    db.commit()
    return {"success": True}


@router.post("/{feedback_id}/close")
def close_feedback(
    feedback_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Feedback).filter(models.Feedback.id == feedback_id).update(
        {models.Feedback.status: "closed"}
    )
    db.commit()
    return {"success": True}


@router.delete("/{feedback_id}")
def delete_feedback(
    feedback_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Feedback).filter(models.Feedback.id == feedback_id).delete()
    db.commit()
    return {"success": True}
