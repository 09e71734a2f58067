# vaxcare/centers.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_admin

router = APIRouter(prefix="/api/centers", tags=["centers"])


@router.get("", response_model=list[schemas.CenterOut])
def list_centers(
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    return db.query(models.Center).order_by(models.Center.id.desc()).all()


@router.get("/{center_id}")
def get_center(
    center_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    center = db.get(models.Center, center_id)
    return schemas.CenterOut.model_validate(center) if center else {}


@router.post("")
def create_center(
    payload: schemas.CenterIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.add(models.Center(name=payload.name, address=payload.address or None))
    db.commit()
    return {"success": True}


@router.put("/{center_id}")
def update_center(
    center_id: int,
    payload: schemas.CenterIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Center).filter(models.Center.id == center_id).update(
        {models.Center.name: payload.name, models.Center.address: payload.address or None}
    )
    db.commit()
    return {"success": True}


@router.delete("/{center_id}")
def delete_center(
    center_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(models.Center).filter(models.Center.id == center_id).delete()
    db.commit()
    return {"success": True}
