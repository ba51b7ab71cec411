import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

import jwt

from app.config import settings

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def new_verification_code() -> str:
    n = settings.verification_code_length
    return f"{secrets.randbelow(10 ** n):0{n}d}"

def hash_verification_code(email: str, code: str) -> str:
    msg = f"{email}:{code}".encode("utf-8")
    key = settings.verification_code_pepper.encode("utf-8")
    return hmac.new(key, msg, hashlib.sha256).hexdigest()

def issue_access_token(user_id: str) -> str:
    iat = now_utc()
    exp = iat + timedelta(minutes=settings.jwt_expires_minutes)
    payload = {
        "sub": str(user_id),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(iat.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm="HS256")

def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=["HS256"],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )
