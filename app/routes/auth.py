from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.codes import VerificationCodeStore, get_code_store
from app.auth.tokens import issue_access_token, new_verification_code
from app.config import settings
from app.db import get_db
from app.logger import logger
from app.models.user import User
from app.ratelimit import rate_limit
from app.schemas.auth import AccessTokenOut, RequestCodeIn, RequestCodeOut, VerifyCodeIn

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/request-code", response_model=RequestCodeOut)
def request_code(
    payload: RequestCodeIn,
    db: Session = Depends(get_db),
    codes: VerificationCodeStore = Depends(get_code_store),
    _: None = Depends(
        rate_limit(
            "auth:request_code",
            limit_per_window=settings.rate_limit_auth_request_code_per_min,
            window_seconds=60,
        )
    ),
) -> RequestCodeOut:
    email = payload.email.lower().strip()

    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        user = User(email=email)
        db.add(user)
        db.commit()

    code = new_verification_code()
    codes.put(email, code)
    logger.info("verification code issued", extra={"user_id": user.id, "ttl": codes.ttl_seconds})

    # delivery is out of band; outside prod the code comes back directly
    if settings.app_env == "prod":
        return RequestCodeOut(expires_in=codes.ttl_seconds)
    return RequestCodeOut(expires_in=codes.ttl_seconds, code=code)

@router.post("/verify-code", response_model=AccessTokenOut)
def verify_code(
    payload: VerifyCodeIn,
    db: Session = Depends(get_db),
    codes: VerificationCodeStore = Depends(get_code_store),
    _: None = Depends(
        rate_limit(
            "auth:verify_code",
            limit_per_window=settings.rate_limit_auth_verify_code_per_min,
            window_seconds=60,
        )
    ),
) -> AccessTokenOut:
    email = payload.email.lower().strip()

    if not codes.consume(email, payload.code.strip()):
        raise HTTPException(status_code=400, detail="invalid code")

    user = db.scalar(select(User).where(User.email == email))
    if user is None:
        raise HTTPException(status_code=400, detail="invalid code")

    return AccessTokenOut(access_token=issue_access_token(user.id))
