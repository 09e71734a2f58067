# vaxcare/records.py
import logging
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from . import database, models, schemas
from .certificates import write_certificate
from .deps import get_current_user, require_admin, require_role
from .patients import patient_id_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["vaccination-records"])

require_patient_only = require_role(models.ROLE_PATIENT, detail="Patients only")

Record = models.VaccinationRecord


def _joined(db: Session):
    return (
        db.query(Record, models.Patient.name, models.Vaccine.name, models.User.name)
        .outerjoin(models.Patient, models.Patient.id == Record.patient_id)
        .outerjoin(models.Vaccine, models.Vaccine.id == Record.vaccine_id)
        .outerjoin(models.User, models.User.id == Record.given_by)
    )


def _row(r: models.VaccinationRecord, **names) -> dict:
    row = {
        "id": r.id,
        "patient_id": r.patient_id,
        "vaccine_id": r.vaccine_id,
        "dose_no": r.dose_no,
        "given_on": r.given_on.isoformat() if r.given_on else None,
        "given_by": r.given_by,
        "appointment_id": r.appointment_id,
    }
    row.update(names)
    return row


@router.get("/vaccination-records")
def list_records(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    q = _joined(db).order_by(Record.given_on.desc(), Record.id.desc())
    if current.role == models.ROLE_ADMIN:
        return [
            _row(r, patient_name=p, vaccine_name=v, staff_name=s)
            for r, p, v, s in q.all()
        ]
    pid = patient_id_for(db, current.id)
    rows = q.filter(Record.patient_id == pid).all() if pid else []
    return [_row(r, vaccine_name=v, staff_name=s) for r, _, v, s in rows]


@router.get("/my/vaccinations")
def my_vaccinations(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(require_patient_only),
):
    pid = patient_id_for(db, current.id)
    if not pid:
        return []
    rows = (
        db.query(Record, models.Vaccine.name)
        .outerjoin(models.Vaccine, models.Vaccine.id == Record.vaccine_id)
        .filter(Record.patient_id == pid)
        .order_by(Record.given_on.desc(), Record.id.desc())
        .all()
    )
    return [_row(r, vaccine_name=v) for r, v in rows]


@router.put("/vaccination-records/{record_id}")
def update_record(
    record_id: int,
    payload: schemas.RecordUpdateIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(Record).filter(Record.id == record_id).update(
        {Record.dose_no: payload.dose_no, Record.given_on: payload.given_on}
    )
    db.commit()
    return {"success": True}


@router.delete("/vaccination-records/{record_id}")
def delete_record(
    record_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(Record).filter(Record.id == record_id).delete()
    db.commit()
    return {"success": True}


@router.get("/vaccination-records/{record_id}/certificate")
def get_certificate(
    record_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    row = _joined(db).filter(Record.id == record_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="Not found")
    r, patient_name, vaccine_name, staff_name = row

    path = write_certificate({
        "id": r.id,
        "patient_name": patient_name,
        "vaccine_name": vaccine_name,
        "dose_no": r.dose_no,
        "given_on": r.given_on,
        "staff_name": staff_name,
    })
    logger.info("Generated certificate %s", path.name)
    return FileResponse(path, media_type="application/pdf", filename=path.name)
