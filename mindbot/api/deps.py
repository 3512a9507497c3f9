import math
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from ..core.config import settings
from ..core.db import get_db
from ..core.security import decode_token
from ..conversation.pipeline import DecisionPipeline
from ..conversation.ratelimit import Limited, RateLimiter
from ..models import Listener

bearer = HTTPBearer(auto_error=False)

limiter = RateLimiter(
    max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
    window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
)
pipeline = DecisionPipeline(limiter=limiter)

def get_pipeline() -> DecisionPipeline:
    return pipeline

def client_ip(request: Request) -> str:
    peer = request.client.host if request.client and request.client.host else "unknown"
    # only a known proxy may speak for the caller
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and peer in settings.trusted_proxies:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return peer

def too_many_requests(result: Limited) -> HTTPException:
    return HTTPException(
        status_code=429,
        detail="Rate limit exceeded",
        headers={"Retry-After": str(max(1, math.ceil(result.retry_after)))},
    )

def enforce_rate_limit(request: Request) -> str:
    """Dependency for routes that do not go through the decision pipeline."""
    key = client_ip(request)
    result = limiter.check(key)
    if result.limited:
        raise too_many_requests(result)
    return key

def get_current_listener(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> Listener:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=401, detail="Missing Authorization Bearer token")
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if payload.get("typ") != "listener":
        raise HTTPException(status_code=401, detail="Invalid token type")
    listener = db.query(Listener).filter(Listener.id == payload.get("sub")).first()
    if not listener:
        raise HTTPException(status_code=401, detail="Listener not found")
    if listener.status != "active":
        raise HTTPException(status_code=403, detail="Listener not verified")
    return listener
