# vaxcare/auth.py
import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from jose import jwt
from passlib.hash import bcrypt

from . import schemas, models, database, config
from .deps import get_current_user
from .errors import DuplicateEmail, InvalidCredentials, MissingFields
from .patients import ensure_patient_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

def create_access_token(user: models.User) -> str:
    expire = datetime.utcnow() + timedelta(hours=config.JWT_EXPIRE_HOURS)
    payload = {"sub": str(user.id), "role": user.role, "exp": expire}
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

@router.post("/register")
def register(payload: schemas.RegisterIn, db: Session = Depends(database.get_db)):
    if not payload.name or not payload.email or not payload.password:
        raise MissingFields()
    existing = db.query(models.User).filter(models.User.email == payload.email).first()
    if existing:
        raise DuplicateEmail()

    user = models.User(
        name=payload.name,
        email=payload.email,
        password=bcrypt.hash(payload.password),
        role=models.ROLE_PATIENT,
    )
    db.add(user)
    # user and profile commit together
    db.flush()
    ensure_patient_profile(db, user.id, user.name)
    logger.info("Registered user %s", user.id)
    return {"success": True}

@router.post("/login")
def login(payload: schemas.LoginIn, db: Session = Depends(database.get_db)):
    if not payload.email or not payload.password:
        raise MissingFields("Missing")
    user = db.query(models.User).filter(models.User.email == payload.email).first()
    if not user or not bcrypt.verify(payload.password, user.password):
        logger.info("Failed login for %s", payload.email)
        raise InvalidCredentials()

    if user.role == models.ROLE_PATIENT:
        ensure_patient_profile(db, user.id, user.name)

    return {
        "success": True,
        "token": create_access_token(user),
        "user": schemas.UserOut.model_validate(user),
    }

@router.get("/me", response_model=schemas.UserOut)
def read_current_user(current: models.User = Depends(get_current_user)):
    return current
