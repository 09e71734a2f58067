# vaxcare/patients.py
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user
from .uploads import save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patient", tags=["patients"])


def ensure_patient_profile(db: Session, user_id: int, name: str) -> models.Patient:
    """Return the patient row for ``user_id``, creating it on first use."""
    patient = db.query(models.Patient).filter(models.Patient.user_id == user_id).first()
    if patient:
        return patient
    patient = models.Patient(user_id=user_id, name=name)
    db.add(patient)
    db.commit()
    db.refresh(patient)
    logger.info("Created patient profile %s for user %s", patient.id, user_id)
    return patient


def patient_id_for(db: Session, user_id: int) -> Optional[int]:
    row = db.query(models.Patient.id).filter(models.Patient.user_id == user_id).first()
    return row[0] if row else None


def _parse_dob(raw: Optional[str]) -> Optional[date]:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        return None


# ---- Own profile (falls back to the account name when none exists yet)
@router.get("/profile")
def get_profile(
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    patient = db.query(models.Patient).filter(models.Patient.user_id == current.id).first()
    if patient:
        return schemas.PatientOut.model_validate(patient)
    return {"id": None, "name": current.name}


# ---- Create or update own profile, optional ID proof upload
@router.post("/profile")
async def save_profile(
    name: Optional[str] = Form(default=None),
    dob: Optional[str] = Form(default=None),
    phone: Optional[str] = Form(default=None),
    gender: Optional[str] = Form(default=None),
    medical_history: Optional[str] = Form(default=None),
    address: Optional[str] = Form(default=None),
    id_proof: Optional[UploadFile] = File(default=None),
    db: Session = Depends(database.get_db),
    current: models.User = Depends(get_current_user),
):
    proof_path = await save_upload(id_proof)

    patient = db.query(models.Patient).filter(models.Patient.user_id == current.id).first()
    if not patient:
        patient = models.Patient(user_id=current.id)
        db.add(patient)

    patient.name = name
    patient.dob = _parse_dob(dob)
    patient.phone = phone or None
    patient.gender = gender or None
    patient.medical_history = medical_history or None
    patient.address = address or None
    if proof_path:
        patient.id_proof = proof_path
    db.commit()
    return {"success": True}
