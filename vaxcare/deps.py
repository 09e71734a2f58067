# vaxcare/deps.py
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session
from . import config, database, models

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    db: Session = Depends(database.get_db)
) -> models.User:
    if not creds:
        raise HTTPException(status_code=401, detail="No token")
    token = creds.credentials
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        user_id = int(payload.get("sub"))
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except (JWTError, ValueError, TypeError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user

def require_role(*roles: str, detail: str = "Unauthorized"):
    """Dependency factory: the current user must hold one of ``roles``.

    ``detail`` is the 403 message, so routes can keep their own wording.
    """
    def checker(current: models.User = Depends(get_current_user)) -> models.User:
        if current.role not in roles:
            raise HTTPException(status_code=403, detail=detail)
        return current
    return checker

require_admin = require_role(models.ROLE_ADMIN)
