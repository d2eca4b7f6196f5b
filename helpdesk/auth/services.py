# helpdesk/auth/services.py
import logging
import secrets

from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile, RevokedToken, UserRole, VerificationCode
from helpdesk.auth.schemas import ProfileUpdate, SignUpRequest
from helpdesk.companies.models import Company
from helpdesk.core.config import get_settings
from helpdesk.core.database import utcnow
from helpdesk.core.errors import ConflictError, NotFoundError
from helpdesk.core.security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def get_profile(db: Session, profile_id: int) -> Profile | None:
    return db.query(Profile).filter(Profile.id == profile_id).first()


def get_profile_by_email(db: Session, email: str) -> Profile | None:
    return db.query(Profile).filter(Profile.email == email.lower()).first()


def _find_unused_code(db: Session, code: str | None, role: UserRole) -> VerificationCode | None:
    if not code:
        return None
    return (
        db.query(VerificationCode)
        .filter(
            VerificationCode.code == code,
            VerificationCode.role == role.value,
            VerificationCode.used.is_(False),
        )
        .first()
    )


def sign_up(db: Session, payload: SignUpRequest) -> Profile:
    """Create a profile for a new customer, agent or admin.

    Agents and admins must present an unused verification code issued for
    their role. An agent joins the company the code belongs to; an admin
    either joins that company or, with a company-less code, founds the
    company named in ``company_name``.
    """
    email = payload.email.lower()
    if get_profile_by_email(db, email):
        raise ConflictError("This email is already registered. Please sign in instead.")

    code = None
    if payload.role != UserRole.CUSTOMER:
        code = _find_unused_code(db, payload.verification_code, payload.role)
        if code is None:
            raise ValueError("Invalid verification code")

    company_id = None
    if code is not None and code.company_id is not None:
        company_id = code.company_id
    elif payload.role == UserRole.ADMIN:
        if not payload.company_name:
            raise ValueError("Company name is required for admins")
        if db.query(Company).filter(Company.name == payload.company_name).first():
            raise ConflictError("A company with this name already exists")
        company = Company(name=payload.company_name)
        db.add(company)
        db.flush()
        company_id = company.id
    elif payload.role == UserRole.CUSTOMER and payload.company_id is not None:
        if db.query(Company).filter(Company.id == payload.company_id).first() is None:
            raise NotFoundError("Company not found")
        company_id = payload.company_id

    profile = Profile(
        email=email,
        full_name=payload.full_name,
        role=payload.role.value,
        company_id=company_id,
        password_hash=hash_password(payload.password),
    )
    db.add(profile)
    db.flush()

    if code is not None:
        code.used = True
        code.used_at = utcnow()
        code.used_by = profile.id

    db.commit()
    db.refresh(profile)
    logger.info("Signed up %s as %s (company=%s)", profile.email, profile.role, profile.company_id)
    return profile


def authenticate(db: Session, email: str, password: str) -> Profile | None:
    profile = get_profile_by_email(db, email)
    if not profile or not verify_password(password, profile.password_hash):
        logger.warning("Failed sign-in for %s", email)
        return None
    return profile


def issue_token(profile: Profile) -> dict:
    return {
        "access_token": create_access_token(profile.id),
        "token_type": "bearer",
        "expires_in": get_settings().ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }


def is_revoked(db: Session, jti: str) -> bool:
    return db.query(RevokedToken).filter(RevokedToken.jti == jti).first() is not None


def validate_token(db: Session, token: str) -> dict | None:
    """Decoded claims of a live token, or None."""
    claims = decode_access_token(token)
    if not claims or "sub" not in claims or "jti" not in claims:
        return None
    if is_revoked(db, claims["jti"]):
        return None
    return claims


def revoke_token(db: Session, claims: dict) -> None:
    if not is_revoked(db, claims["jti"]):
        db.add(RevokedToken(jti=claims["jti"]))
        db.commit()


def refresh_token(db: Session, claims: dict, profile: Profile) -> dict:
    revoke_token(db, claims)
    return issue_token(profile)


def update_profile(db: Session, profile: Profile, payload: ProfileUpdate) -> Profile:
    profile.full_name = payload.full_name.strip()
    db.commit()
    db.refresh(profile)
    return profile


def issue_verification_code(db: Session, role: UserRole, company_id: int | None = None) -> VerificationCode:
    if role == UserRole.CUSTOMER:
        raise ValueError("Verification codes are only issued for agents and admins")
    value = secrets.token_hex(4).upper()
    while db.query(VerificationCode).filter(VerificationCode.code == value).first():
        value = secrets.token_hex(4).upper()
    code = VerificationCode(code=value, role=role.value, company_id=company_id)
    db.add(code)
    db.commit()
    db.refresh(code)
    logger.info("Issued %s verification code (company=%s)", role.value, company_id)
    return code
