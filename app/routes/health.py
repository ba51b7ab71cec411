from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.db import db_ping
from app.redis_client import redis_ping

router = APIRouter(tags=["health"])

@router.get("/health")
def health() -> dict:
    return {"status": "ok"}

# readiness: 200 only when db and redis both answer, 503 with the failing checks otherwise
@router.get("/ready")
def ready():
    checks = {"db": db_ping(), "redis": redis_ping()}
    ok = all(checks.values())
    body = {"status": "ok" if ok else "unready", "checks": checks}
    return JSONResponse(status_code=200 if ok else 503, content=body)
