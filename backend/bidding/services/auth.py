# backend/bidding/services/auth.py
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..errors import NotFound, ServerError, Unauthenticated, Unauthorized, ValidationError
from ..models.user import Role, User
from ..utils.dates import utcnow
from ..utils.logging import service_logger

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenIdentity:
    user_id: int
    email: Optional[str] = None
    role: Optional[Role] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token asserting the user's id, email and role"""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "userId": user.id,
        "email": user.email,
        "role": Role(user.role).value,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenIdentity:
    """Verify signature and expiry; raises Unauthenticated"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        service_logger.warning("JWT verification failed", extra={"error": str(e)})
        raise Unauthenticated("Invalid token")

    user_id = payload.get("userId")
    if not isinstance(user_id, int):
        raise Unauthenticated("Invalid token")

    role = payload.get("role")
    try:
        role = Role(role) if role else None
    except ValueError:
        raise Unauthenticated("Invalid token")

    return TokenIdentity(user_id=user_id, email=payload.get("email"), role=role)


def signup(db: Session, email, password, name, role) -> str:
    if not email or not password or not name or not role:
        raise ValidationError("All fields are required")
    try:
        role = Role(role)
    except ValueError:
        raise ValidationError("Role must be BUYER or SELLER")

    user = User(email=email, password=hash_password(password), name=name, role=role)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        service_logger.warning("Signup rejected", extra={"email": email, "error": str(e.orig)})
        raise ServerError("Email already exists or server error")

    service_logger.info("User signed up", extra={"user_id": user.id, "role": user.role.value})
    return create_access_token(user)


def login(db: Session, email, password) -> str:
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFound("User not found")
    if not verify_password(password, user.password):
        raise Unauthorized("Invalid password")

    service_logger.info("User logged in", extra={"user_id": user.id})
    return create_access_token(user)


async def get_current_identity(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: Session = Depends(get_db)
) -> TokenIdentity:
    """Resolve the bearer token to an identity before any domain logic runs"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("No token provided")

    identity = decode_access_token(credentials.credentials)
    if not settings.AUTH_VERIFY_USER_EXISTS:
        if identity.role is None:
            raise Unauthenticated("Invalid token")
        return identity

    user = db.query(User).filter(User.id == identity.user_id).first()
    if user is None:
        raise Unauthenticated("User no longer exists")
    # The stored role is authoritative over the token payload
    return TokenIdentity(user_id=user.id, email=user.email, role=Role(user.role))
