import hashlib
import secrets
from datetime import datetime, timedelta

from fastapi import Depends, Header
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import config
from .database import get_db
from .errors import AuthenticationFailed, PermissionDenied
from .models import User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str):
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str):
    return pwd_context.verify(password, hashed)


def create_access_token(user: User, expires_minutes: int = None):
    minutes = config.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    to_encode = {"user_id": user.id, "role": user.account_type, "exp": expire}
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationFailed("Token has expired", code="TOKEN_EXPIRED")
    except JWTError:
        raise AuthenticationFailed("Token is not valid")


def generate_reset_token():
    return secrets.token_hex(32)


def hash_token(token: str):
    return hashlib.sha256(token.encode()).hexdigest()


def generate_temp_password(length: int = 10):
    alphabet = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789"
    return "".join(secrets.choice(alphabet) for _ in range(length))


# -------------------- DEPENDENCIES --------------------

def get_current_user(authorization: str = Header(None), db: Session = Depends(get_db)) -> User:
    """Extract user from JWT token in Authorization header"""
    if not authorization:
        raise AuthenticationFailed("No token, authorization denied")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationFailed("Invalid authorization header")

    payload = decode_access_token(parts[1])
    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthenticationFailed("Token is not valid")

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationFailed("User not found")
    return user


def get_current_student(user: User = Depends(get_current_user)) -> User:
    if not user.is_student:
        raise PermissionDenied("Access denied. Student only.")
    return user


def get_current_instructor(user: User = Depends(get_current_user)) -> User:
    if not user.is_instructor:
        raise PermissionDenied("Access denied. Instructor only.")
    return user


def get_current_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise PermissionDenied("Admin access required")
    return user
