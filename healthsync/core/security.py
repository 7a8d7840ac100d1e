import jwt
import bcrypt
from typing import Any, Dict, Union
from healthsync.core.config import settings
from datetime import datetime, timedelta, timezone


def create_access_token(user_id: Union[str, Any]) -> str:
    """Signed bearer token for one principal; the role is never embedded, it is re-read per request."""
    issued_at = datetime.now(timezone.utc)
    to_encode = {
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
        "user_id": str(user_id),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.SECURITY_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token, settings.SECRET_KEY, algorithms=[settings.SECURITY_ALGORITHM],
        options={"require": ["exp", "user_id"]}
    )


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')
