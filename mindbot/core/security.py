import secrets
from datetime import datetime, timedelta, timezone
from jose import jwt
from passlib.context import CryptContext
from .config import settings

# OTP codes are short-lived; pbkdf2 keeps hashing pure-python
otp_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

LISTENER_AUDIENCE = "mindbot-listener"

def generate_otp() -> str:
    return f"{secrets.randbelow(900000) + 100000}"

def hash_otp(code: str) -> str:
    return otp_context.hash(code)

def verify_otp(code: str, code_hash: str) -> bool:
    return otp_context.verify(code, code_hash)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _jti() -> str:
    return secrets.token_urlsafe(32)

def create_listener_token(listener_id: str) -> tuple[str, int]:
    ttl = int(timedelta(days=int(settings.LISTENER_TOKEN_TTL_DAYS)).total_seconds())
    exp = _now() + timedelta(seconds=ttl)
    payload = {
        "sub": listener_id,
        "iss": settings.TOKEN_ISSUER,
        "aud": LISTENER_AUDIENCE,
        "iat": int(_now().timestamp()),
        "exp": int(exp.timestamp()),
        "typ": "listener",
        "jti": _jti(),
    }
    token = jwt.encode(payload, settings.TOKEN_SECRET, algorithm="HS256")
    return token, ttl

def decode_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.TOKEN_SECRET,
        algorithms=["HS256"],
        audience=LISTENER_AUDIENCE,
        issuer=settings.TOKEN_ISSUER,
        options={"verify_aud": True, "verify_iss": True},
    )
