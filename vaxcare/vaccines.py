# vaxcare/vaccines.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_admin

router = APIRouter(prefix="/api/vaccines", tags=["vaccines"])


def _apply(vaccine: models.Vaccine, payload: schemas.VaccineIn) -> None:
    vaccine.name = payload.name
    vaccine.dose_type = payload.dose_type or None
    vaccine.required_age = payload.required_age or 0
    vaccine.description = payload.description or None
    vaccine.side_effects = payload.side_effects or None
    vaccine.manufacturer = payload.manufacturer or None


@router.get("", response_model=list[schemas.VaccineOut])
def list_vaccines(
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    return db.query(models.Vaccine).order_by(models.Vaccine.id.desc()).all()


# Missing ids answer with an empty object, existing clients rely on it.
@router.get("/{vaccine_id}")
def get_vaccine(
    vaccine_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    vaccine = db.get(models.Vaccine, vaccine_id)
    if not vaccine:
        return {}
    return schemas.VaccineOut.model_validate(vaccine)


@router.post("")
def create_vaccine(
    payload: schemas.VaccineIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    vaccine = models.Vaccine()
    _apply(vaccine, payload)
    db.add(vaccine)
    db.commit()
    return {"success": True}


@router.put("/{vaccine_id}")
def update_vaccine(
    vaccine_id: int,
    payload: schemas.VaccineIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    vaccine = db.get(models.Vaccine, vaccine_id)
    if vaccine:
        _apply(vaccine, payload)
        db.commit()
    return {"success": True}


@router.delete("/{vaccine_id}")
def delete_vaccine(
    vaccine_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Vaccine).filter(models.Vaccine.id == vaccine_id).delete()
    db.commit()
    return {"success": True}
