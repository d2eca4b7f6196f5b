# helpdesk/core/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from helpdesk.auth import services as auth_service
from helpdesk.auth.models import Profile, UserRole
from helpdesk.core.database import get_db

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_token_claims(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> dict:
    claims = auth_service.validate_token(db, token)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


def get_current_user(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)) -> Profile:
    profile = auth_service.get_profile(db, int(claims["sub"]))
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


def require_roles(*roles: UserRole):
    allowed = {r.value for r in roles}

    def dependency(current_user: Profile = Depends(get_current_user)) -> Profile:
        if current_user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
        return current_user

    return dependency


def require_company_admin(current_user: Profile = Depends(require_roles(UserRole.ADMIN))) -> Profile:
    if current_user.company_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No company associated with admin")
    return current_user
