import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from passlib.context import CryptContext
from jose import JWTError, jwt
from sqlmodel import Session, select
from fastapi import (
    Depends,
    Request,
    Security,
    status,
)
from fastapi.security import (
    HTTPAuthorizationCredentials,
    HTTPBearer,
)

from src.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    RESET_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
)
from src.api.core.response import api_response
from src.api.models import User, UserRole

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
AUTH_COOKIE_NAME = "auth-token"
RESET_TOKEN_TYPE = "password-reset"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)

bearer_scheme = HTTPBearer(auto_error=False)


## get user
def exist_user(db: Session, email: str):
    user = db.exec(select(User).where(User.email == email.strip().lower())).first()
    return user


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def user_token_data(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value if isinstance(user.role, UserRole) else user.role,
    }


def create_access_token(
    user_data: dict,
    expires: Optional[timedelta] = None,
):
    expire = datetime.now(timezone.utc) + (
        expires or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "user": user_data,
        "exp": expire,
    }
    token = jwt.encode(
        payload,
        SECRET_KEY,
        algorithm=ALGORITHM,
    )
    return token


def create_reset_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "type": RESET_TOKEN_TYPE,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(
    token: str,
) -> Optional[Dict]:
    try:
        decode = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_exp": True},  # Ensure expiration is verified
        )

        return decode

    except JWTError as e:
        logger.debug("Token decoding failed: %s", e)
        return None


def decode_reset_token(token: str) -> Optional[Dict]:
    payload = decode_token(token)
    if not payload or payload.get("type") != RESET_TOKEN_TYPE:
        return None
    return payload


def get_request_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> Optional[str]:
    """Bearer header first, then the auth-token cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(AUTH_COOKIE_NAME)


def _user_from_token(token: Optional[str]) -> Optional[Dict]:
    if not token:
        return None
    payload = decode_token(token)
    if not payload or payload.get("type") == RESET_TOKEN_TYPE:
        return None
    return payload.get("user")


def is_authenticated(token: Optional[str] = Depends(get_request_token)):
    """
    Extract user from Bearer token or cookie.
    Return None if token is missing or invalid.
    """
    return _user_from_token(token)


def require_signin(token: Optional[str] = Depends(get_request_token)) -> Dict:
    if not token:
        api_response(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    user = _user_from_token(token)
    if user is None:
        api_response(status.HTTP_401_UNAUTHORIZED, "Invalid or expired token")

    return user  # contains {"id", "email", "name", "role"}


def require_admin(user: dict = Depends(require_signin)):
    if user.get("role") != UserRole.ADMIN.value:
        api_response(status.HTTP_403_FORBIDDEN, "Admin access required")
    return user
