from datetime import datetime, timedelta, timezone
from app.core.auth.authentication import ALGORITHM
import jwt


def create_access_token(
    data: dict, secret_key: str, expires_delta: timedelta | None = None
):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=15)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def decode_jwt_token(token: str, secret_key: str):
    return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
