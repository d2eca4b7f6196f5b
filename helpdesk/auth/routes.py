# helpdesk/auth/routes.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from helpdesk.auth import services as auth_service
from helpdesk.auth.models import Profile
from helpdesk.auth.schemas import (
    LoginRequest,
    ProfileOut,
    ProfileUpdate,
    SignUpRequest,
    TokenOut,
    VerificationCodeCreate,
    VerificationCodeOut,
)
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user, get_token_claims, require_company_admin
from helpdesk.core.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=ProfileOut, status_code=201)
def signup(payload: SignUpRequest, db: Session = Depends(get_db)):
    try:
        return auth_service.sign_up(db, payload)
    except ConflictError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(exc))
    except NotFoundError as exc:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc))


@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    profile = auth_service.authenticate(db, payload.email, payload.password)
    if not profile:
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    return auth_service.issue_token(profile)


@router.get("/me", response_model=ProfileOut)
def me(current_user: Profile = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=ProfileOut)
def update_me(
    payload: ProfileUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return auth_service.update_profile(db, current_user, payload)


@router.post("/refresh", response_model=TokenOut)
def refresh(
    claims: dict = Depends(get_token_claims),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return auth_service.refresh_token(db, claims, current_user)


@router.post("/logout", status_code=204)
def logout(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)):
    auth_service.revoke_token(db, claims)
    return Response(status_code=204)


@router.post("/verification-codes", response_model=VerificationCodeOut, status_code=201)
def create_verification_code(
    payload: VerificationCodeCreate,
    current_user: Profile = Depends(require_company_admin),
    db: Session = Depends(get_db),
):
    return auth_service.issue_verification_code(db, payload.role, current_user.company_id)
