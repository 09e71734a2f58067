# vaxcare/appointments.py
import logging
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_admin, require_role
from .errors import AppointmentNotFound, InvalidDate, InvalidPatient, OutOfStock
from .inventory import available_quantity, pick_fefo_batch, take_one
from .patients import patient_id_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["appointments"])

require_booking_patient = require_role(models.ROLE_PATIENT, detail="Only patients can book")

STATUS_BOOKED = "booked"
STATUS_COMPLETED = "completed"


def parse_appointment_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse a client supplied date/time; ``None`` when it is not a real calendar moment."""
    raw = (raw or "").strip()
    if not raw:
        return None
    iso = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        parsed = None
        for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%d/%m/%Y %H:%M", "%d %b %Y", "%d %B %Y"):
            try:
                parsed = datetime.strptime(raw, fmt)
                break
            except ValueError:
                continue
    if parsed and parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def complete_appointment(
    db: Session,
    appointment_id: int,
    given_by: int,
    dose_no: Optional[int] = None,
    today: Optional[date] = None,
) -> models.VaccinationRecord:
    """Administer the dose for an appointment in one transaction.

    Takes one unit from the FEFO batch, writes the vaccination record and
    marks the appointment completed. Either all three writes commit or none
    do; the session's connection goes back to the pool on commit/rollback.
    """
    try:
        appt = db.get(models.Appointment, appointment_id)
        if not appt:
            raise AppointmentNotFound()

        batch = pick_fefo_batch(db, appt.vaccine_id, today)
        if not batch:
            raise OutOfStock("No inventory available")

        batch_id = batch.id
        if not take_one(db, batch_id):
            # emptied by a concurrent completion since the pick
            raise OutOfStock("No inventory available")
        record = models.VaccinationRecord(
            patient_id=appt.patient_id,
            vaccine_id=appt.vaccine_id,
            dose_no=dose_no or 1,
            given_on=datetime.now(),
            given_by=given_by,
            appointment_id=appt.id,
        )
        db.add(record)
        appt.status = STATUS_COMPLETED
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Completed appointment %s from batch %s (record %s)", appointment_id, batch_id, record.id
    )
    return record


def _row(appt: models.Appointment, **names) -> dict:
    row = {
        "id": appt.id,
        "patient_id": appt.patient_id,
        "vaccine_id": appt.vaccine_id,
        "center_id": appt.center_id,
        "appointment_date": appt.appointment_date.isoformat() if appt.appointment_date else None,
        "status": appt.status,
        "assigned_to": appt.assigned_to,
        "dose_no": appt.dose_no,
        "note": appt.note,
    }
    row.update(names)
    return row


@router.get("")
def list_appointments(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    q = (
        db.query(models.Appointment, models.Patient.name, models.Vaccine.name, models.Center.name)
        .outerjoin(models.Patient, models.Patient.id == models.Appointment.patient_id)
        .outerjoin(models.Vaccine, models.Vaccine.id == models.Appointment.vaccine_id)
        .outerjoin(models.Center, models.Center.id == models.Appointment.center_id)
        .order_by(models.Appointment.appointment_date.desc())
    )
    if current.role == models.ROLE_ADMIN:
        return [
            _row(a, patient_name=p, vaccine_name=v, center_name=c)
            for a, p, v, c in q.all()
        ]

    pid = patient_id_for(db, current.id)
    rows = q.filter(models.Appointment.patient_id == pid).all() if pid else []
    return [_row(a, vaccine_name=v, center_name=c) for a, _, v, c in rows]


@router.post("")
def book_appointment(
    payload: schemas.AppointmentIn,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_booking_patient),
):
    when = parse_appointment_date(payload.appointment_date)
    if when is None:
        raise InvalidDate()

    owned = (
        db.query(models.Patient)
        .filter(models.Patient.id == payload.patient_id, models.Patient.user_id == current.id)
        .first()
    )
    if not owned:
        raise InvalidPatient()

    # Not reserved: stock only moves at completion, so concurrent bookings can overbook.
    if available_quantity(db, payload.vaccine_id) <= 0:
        raise OutOfStock()

    appt = models.Appointment(
        patient_id=payload.patient_id,
        vaccine_id=payload.vaccine_id,
        appointment_date=when,
        center_id=payload.center_id or None,
        status=STATUS_BOOKED,
        note=payload.note or None,
        dose_no=payload.dose_no or 1,
    )
    db.add(appt)
    db.commit()
    logger.info("Booked appointment %s for patient %s", appt.id, payload.patient_id)
    return {"success": True}


@router.post("/{appointment_id}/status")
def set_status(
    appointment_id: int,
    payload: schemas.StatusIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Appointment).filter(models.Appointment.id == appointment_id).update(
        {models.Appointment.status: payload.status}
    )
    db.commit()
    return {"success": True}


@router.post("/{appointment_id}/assign")
def assign_staff(
    appointment_id: int,
    payload: schemas.AssignIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Appointment).filter(models.Appointment.id == appointment_id).update(
        {models.Appointment.assigned_to: payload.staff_id}
    )
    db.commit()
    return {"success": True}


@router.post("/{appointment_id}/complete")
def complete(
    appointment_id: int,
    payload: Optional[schemas.CompleteIn] = None,
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_admin),
):
    dose_no = payload.dose_no if payload else None
    complete_appointment(db, appointment_id, given_by=current.id, dose_no=dose_no)
    return {"success": True}
