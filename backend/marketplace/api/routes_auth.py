import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.user import User
from ..schemas.auth import AuthResponse, CheckEmailRequest, LoginRequest, RegisterRequest, UserOut
from ..services import security
from .deps import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserOut.model_validate(user),
        access_token=security.build_access_token(user_id=user.id, email=user.email),
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    if _get_user_by_email(db, payload.email) is not None:
        raise HTTPException(status_code=409, detail="Email is already registered.")

    user = User(
        email=normalize_email(payload.email),
        name=(payload.name or "").strip() or None,
        password_hash=security.hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Email is already registered.")
    db.refresh(user)

    logger.info("User registered", extra={"user_id": user.id, "step": "register"})
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = _get_user_by_email(db, payload.email)
    if user is None or not security.verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password.")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User is inactive.")

    return _auth_response(user)


@router.post("/check-email")
def check_email(payload: CheckEmailRequest, db: Session = Depends(get_db)):
    email = normalize_email(payload.email)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    exists = _get_user_by_email(db, email) is not None
    return {
        "exists": exists,
        "message": "Account exists" if exists else "Account doesn't exist",
    }


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
