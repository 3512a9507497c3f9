import logging
import re
import secrets
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...core.config import settings
from ...core.db import get_db
from ...core.security import create_listener_token, generate_otp, hash_otp, verify_otp
from ...models import Listener
from ..deps import enforce_rate_limit, get_current_listener
from ..schemas import ListenerOut, ListenerRegister, ListenerStatusPatch, OtpResend, OtpVerify

log = logging.getLogger("mindbot.listeners")

router = APIRouter(prefix="/api/listeners", tags=["listeners"])

PHONE_RE = re.compile(r"^0[0-9]{9}$")
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"
MAX_OTP_ATTEMPTS = 5

def _mask(phone: str) -> str:
    return phone[:3] + "****" + phone[7:]

def _listener_out(l: Listener) -> ListenerOut:
    return ListenerOut(
        id=l.id,
        nickname=l.nickname,
        avatarUrl=AVATAR_URL.format(seed=l.avatar_seed),
        status=l.status,
        isOnline=l.is_online,
        isAvailable=l.is_available,
    )

def _issue_otp(l: Listener) -> str:
    code = generate_otp()
    l.otp_hash = hash_otp(code)
    l.otp_expires_at = datetime.utcnow() + timedelta(seconds=settings.OTP_TTL_SECONDS)
    l.otp_attempts = 0
    l.updated_at = datetime.utcnow()
    return code

def _otp_payload(code: str, **extra) -> dict:
    out = {"success": True, "expiresIn": settings.OTP_TTL_SECONDS, **extra}
    if not settings.is_production:
        out["testOtp"] = code
    return out

@router.post("/register")
def register(payload: ListenerRegister, db: Session = Depends(get_db)):
    if not PHONE_RE.match(payload.phone):
        raise HTTPException(status_code=400, detail="รูปแบบเบอร์โทรศัพท์ไม่ถูกต้อง")
    l = db.query(Listener).filter(Listener.phone == payload.phone).first()
    if l and l.status == "active":
        raise HTTPException(status_code=409, detail="เบอร์โทรศัพท์นี้ลงทะเบียนแล้ว")
    if not l:
        l = Listener(phone=payload.phone, nickname=payload.nickname, avatar_seed=secrets.token_hex(4))
        db.add(l)
    l.nickname = payload.nickname
    l.email = payload.email
    l.age = payload.age
    l.motivation = payload.motivation
    code = _issue_otp(l)
    db.commit()
    log.info("listener otp issued phone=%s", _mask(payload.phone))
    return _otp_payload(code, message="ส่ง OTP ไปยังเบอร์โทรของคุณแล้ว", phone=_mask(payload.phone))

@router.post("/verify-otp", dependencies=[Depends(enforce_rate_limit)])
def verify(payload: OtpVerify, db: Session = Depends(get_db)):
    l = db.query(Listener).filter(Listener.phone == payload.phone).first()
    if not l or not l.otp_hash:
        raise HTTPException(status_code=400, detail="ไม่พบข้อมูลการลงทะเบียน")
    if l.otp_expires_at is None or l.otp_expires_at < datetime.utcnow():
        raise HTTPException(status_code=400, detail="OTP หมดอายุแล้ว กรุณาขอ OTP ใหม่")
    if (l.otp_attempts or 0) >= MAX_OTP_ATTEMPTS:
        raise HTTPException(status_code=429, detail="กรอก OTP ผิดเกินจำนวนครั้งที่กำหนด กรุณาขอ OTP ใหม่")
    if not verify_otp(payload.otp, l.otp_hash):
        l.otp_attempts = (l.otp_attempts or 0) + 1
        db.commit()
        log.warning("listener otp mismatch phone=%s attempts=%d", _mask(l.phone), l.otp_attempts)
        raise HTTPException(status_code=400, detail="OTP ไม่ถูกต้อง")

    now = datetime.utcnow()
    l.status = "active"
    l.phone_verified = True
    l.verified_at = now
    l.otp_hash = None
    l.otp_expires_at = None
    l.updated_at = now
    db.commit()

    token, ttl = create_listener_token(l.id)
    log.info("listener verified id=%s", l.id)
    return {
        "success": True,
        "message": "ลงทะเบียนสำเร็จ! ยินดีต้อนรับสู่ Mind Fitness Listener",
        "listener": _listener_out(l),
        "token": token,
        "expiresIn": ttl,
    }

@router.post("/resend-otp", dependencies=[Depends(enforce_rate_limit)])
def resend(payload: OtpResend, db: Session = Depends(get_db)):
    l = db.query(Listener).filter(Listener.phone == payload.phone).first()
    if not l:
        raise HTTPException(status_code=400, detail="ไม่พบข้อมูลการลงทะเบียน")
    if l.status == "active":
        raise HTTPException(status_code=409, detail="เบอร์โทรศัพท์นี้ยืนยันแล้ว")
    code = _issue_otp(l)
    db.commit()
    return _otp_payload(code, message="ส่ง OTP ใหม่แล้ว")

@router.get("/me")
def me(listener: Listener = Depends(get_current_listener)):
    return {
        "success": True,
        "listener": _listener_out(listener),
        "stats": {
            "totalChats": listener.total_chats,
            "totalMinutes": listener.total_minutes,
            "avgRating": listener.avg_rating,
        },
        "memberSince": listener.created_at.replace(microsecond=0).isoformat() + "Z",
    }

@router.patch("/me/status")
def update_status(payload: ListenerStatusPatch, db: Session = Depends(get_db), listener: Listener = Depends(get_current_listener)):
    l = listener
    if payload.isOnline is not None:
        l.is_online = payload.isOnline
        if not payload.isOnline:
            l.is_available = False
    if payload.isAvailable is not None:
        l.is_available = payload.isAvailable and l.is_online
    l.updated_at = datetime.utcnow()
    db.commit()
    return {"success": True, "listener": _listener_out(l)}
