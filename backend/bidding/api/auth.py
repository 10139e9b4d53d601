# backend/bidding/api/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..errors import BiddingError, NotFound, ServerError
from ..models.user import User
from ..schemas.user import LoginRequest, MeResponse, SignupRequest, TokenResponse, UserProfile
from ..services import auth as auth_service
from ..services.auth import TokenIdentity, get_current_identity
from ..utils.logging import api_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=TokenResponse)
async def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Register a buyer or seller and return an access token"""
    api_logger.info("Signing up user", extra={"email": payload.email, "role": payload.role})

    try:
        token = auth_service.signup(db, payload.email, payload.password, payload.name, payload.role)
        return {"token": token}
    except BiddingError:
        raise
    except Exception as e:
        db.rollback()
        api_logger.error("Failed to sign up user", extra={"email": payload.email, "error": str(e)}, exc_info=True)
        raise ServerError("Email already exists or server error")


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    api_logger.info("Logging in user", extra={"email": payload.email})

    try:
        token = auth_service.login(db, payload.email, payload.password)
        return {"token": token}
    except BiddingError as e:
        api_logger.warning("Login rejected", extra={"email": payload.email, "reason": e.message})
        raise
    except Exception as e:
        api_logger.error("Failed to log in", extra={"email": payload.email, "error": str(e)}, exc_info=True)
        raise ServerError("Failed to log in")


@router.get("/me", response_model=MeResponse)
async def get_me(
        identity: TokenIdentity = Depends(get_current_identity),
        db: Session = Depends(get_db)
):
    try:
        user = db.query(User).filter(User.id == identity.user_id).first()
        if not user:
            raise NotFound("User not found")
        return {"user": UserProfile.model_validate(user)}
    except BiddingError:
        raise
    except Exception as e:
        api_logger.error("Failed to fetch current user", extra={"user_id": identity.user_id, "error": str(e)})
        raise ServerError("Server error")
