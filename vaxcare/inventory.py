# vaxcare/inventory.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, or_
from sqlalchemy.orm import Session

from . import database, models, schemas
from .deps import get_current_user, require_admin

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

Batch = models.InventoryBatch


def _usable(vaccine_id: int, today: date):
    return (
        Batch.vaccine_id == vaccine_id,
        or_(Batch.expiry_date.is_(None), Batch.expiry_date >= today),
    )


def available_quantity(db: Session, vaccine_id: int, today: Optional[date] = None) -> int:
    """Units on hand across all batches of a vaccine that have not expired."""
    today = today or date.today()
    total = db.query(func.sum(Batch.quantity)).filter(*_usable(vaccine_id, today)).scalar()
    return int(total or 0)


def pick_fefo_batch(db: Session, vaccine_id: int, today: Optional[date] = None) -> Optional[models.InventoryBatch]:
    """First-expiry-first-out: the stocked, unexpired batch that expires soonest.

    Batches without an expiry date come after every dated batch; ties are
    broken by batch id. The row stays locked until the caller's transaction
    ends on backends that support ``FOR UPDATE``.
    """
    today = today or date.today()
    return (
        db.query(Batch)
        .filter(*_usable(vaccine_id, today), Batch.quantity > 0)
        .order_by(Batch.expiry_date.is_(None), Batch.expiry_date.asc(), Batch.id.asc())
        .with_for_update()
        .first()
    )


def take_one(db: Session, batch_id: int) -> bool:
    """Decrement a batch by one unit unless it is already empty."""
    updated = (
        db.query(Batch)
        .filter(Batch.id == batch_id, Batch.quantity > 0)
        .update({Batch.quantity: Batch.quantity - 1}, synchronize_session=False)
    )
    return updated == 1


def _row(batch: models.InventoryBatch, vaccine_name: Optional[str]) -> dict:
    return {
        "id": batch.id,
        "vaccine_id": batch.vaccine_id,
        "batch_no": batch.batch_no,
        "quantity": batch.quantity,
        "expiry_date": batch.expiry_date.isoformat() if batch.expiry_date else None,
        "vaccine_name": vaccine_name,
    }


def _joined(db: Session):
    return db.query(Batch, models.Vaccine.name).outerjoin(
        models.Vaccine, models.Vaccine.id == Batch.vaccine_id
    )


@router.get("")
def list_inventory(
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    rows = _joined(db).order_by(Batch.id.desc()).all()
    return [_row(b, name) for b, name in rows]


@router.get("/{batch_id}")
def get_batch(
    batch_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(get_current_user),
):
    row = _joined(db).filter(Batch.id == batch_id).first()
    return _row(*row) if row else {}


@router.post("")
def create_batch(
    payload: schemas.InventoryIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.add(Batch(
        vaccine_id=payload.vaccine_id,
        batch_no=payload.batch_no or None,
        quantity=max(payload.quantity or 0, 0),
        expiry_date=payload.expiry_date,
    ))
    db.commit()
    return {"success": True}


@router.put("/{batch_id}")
def update_batch(
    batch_id: int,
    payload: schemas.InventoryIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(Batch).filter(Batch.id == batch_id).update({
        Batch.vaccine_id: payload.vaccine_id,
        Batch.batch_no: payload.batch_no or None,
        Batch.quantity: max(payload.quantity or 0, 0),
        Batch.expiry_date: payload.expiry_date,
    })
    db.commit()
    return {"success": True}


@router.delete("/{batch_id}")
def delete_batch(
    batch_id: int,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    db.query(Batch).filter(Batch.id == batch_id).delete()
    db.commit()
    return {"success": True}


@router.post("/{batch_id}/adjust")
def adjust_batch(
    batch_id: int,
    payload: schemas.AdjustIn,
    db: Session = Depends(database.get_db),
    current = Depends(require_admin),
):
    # single UPDATE, floored at zero
    new_qty = Batch.quantity + payload.delta
    db.query(Batch).filter(Batch.id == batch_id).update(
        {Batch.quantity: case((new_qty < 0, 0), else_=new_qty)},
        synchronize_session=False,
    )
    db.commit()
    return {"success": True}
