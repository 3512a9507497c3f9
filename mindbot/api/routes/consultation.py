import json
import logging
import re
from datetime import datetime, date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...core.db import get_db
from ...models import Booking, Psychologist
from ...services import consultation as svc
from ..schemas import BookingCreate, BookingOut, CancelRequest, RateRequest

log = logging.getLogger("mindbot.consultation")

router = APIRouter(prefix="/api/consultation", tags=["consultation"])

PHONE_RE = re.compile(r"^0[0-9]{9}$")
TIME_RE = re.compile(r"^\d{2}:\d{2}$")

def _iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat() + "Z"

def _psychologist_summary(p: Psychologist) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "title": p.title,
        "specialties": json.loads(p.specialties_json or "[]"),
        "experience": p.experience,
        "rating": p.rating,
        "totalReviews": p.total_reviews,
        "ratePerSession": p.rate_per_session,
        "sessionDuration": p.session_duration,
        "isOnline": p.is_online,
    }

def _booking_out(b: Booking) -> BookingOut:
    return BookingOut(
        bookingRef=b.booking_ref,
        psychologistId=b.psychologist_id,
        clientName=b.client_name,
        clientPhone=b.client_phone,
        clientEmail=b.client_email,
        scheduledDate=b.scheduled_date,
        scheduledTime=b.scheduled_time,
        sessionType=b.session_type,
        duration=b.duration,
        amount=b.amount,
        platformFee=b.platform_fee,
        psychologistEarning=b.psychologist_earning,
        notes=b.notes,
        status=b.status,
        rating=b.rating,
        createdAt=_iso(b.created_at),
    )

def _get_psychologist(db: Session, psychologist_id: str) -> Psychologist:
    p = db.query(Psychologist).filter(Psychologist.id == psychologist_id).first()
    if not p:
        raise HTTPException(status_code=404, detail="Psychologist not found")
    return p

def _get_booking(db: Session, ref: str) -> Booking:
    b = db.query(Booking).filter(Booking.booking_ref == ref).first()
    if not b:
        raise HTTPException(status_code=404, detail="Booking not found")
    return b

@router.get("/psychologists")
def list_psychologists(db: Session = Depends(get_db)):
    items = db.query(Psychologist).order_by(Psychologist.rating.desc()).all()
    return {
        "success": True,
        "psychologists": [_psychologist_summary(p) for p in items],
        "platformConfig": {
            "platformFeePercent": svc.PLATFORM_FEE_PERCENT,
            "sessionDuration": svc.DEFAULT_SESSION_MINUTES,
        },
    }

@router.get("/psychologists/{psychologist_id}")
def get_psychologist(psychologist_id: str, db: Session = Depends(get_db)):
    p = _get_psychologist(db, psychologist_id)
    detail = _psychologist_summary(p)
    detail.update({
        "licenseNumber": p.license_number,
        "bio": p.bio,
        "education": p.education,
        "languages": json.loads(p.languages_json or "[]"),
        "sessionTypes": ["video", "chat"],
    })
    return {"success": True, "psychologist": detail}

@router.get("/psychologists/{psychologist_id}/availability")
def get_availability(psychologist_id: str, date_: str | None = Query(None, alias="date"), db: Session = Depends(get_db)):
    _get_psychologist(db, psychologist_id)
    day = date_ or date.today().isoformat()
    try:
        datetime.strptime(day, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(status_code=422, detail="date must be YYYY-MM-DD")
    return {
        "success": True,
        "date": day,
        "psychologistId": psychologist_id,
        "slots": svc.availability(db, psychologist_id, day),
    }

@router.post("/bookings")
def create_booking(payload: BookingCreate, db: Session = Depends(get_db)):
    if not PHONE_RE.match(payload.clientPhone):
        raise HTTPException(status_code=400, detail="กรุณากรอกเบอร์โทรศัพท์ที่ถูกต้อง")
    if not TIME_RE.match(payload.scheduledTime):
        raise HTTPException(status_code=422, detail="scheduledTime must be HH:MM")
    try:
        start = svc.parse_slot(payload.scheduledDate, payload.scheduledTime)
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid scheduled date/time")
    if payload.scheduledTime not in svc.slot_times():
        raise HTTPException(status_code=422, detail="scheduledTime is not a bookable slot")
    if start <= datetime.utcnow():
        raise HTTPException(status_code=422, detail="Cannot book a time in the past")

    p = _get_psychologist(db, payload.psychologistId)
    if payload.scheduledTime in svc.booked_times(db, p.id, payload.scheduledDate):
        raise HTTPException(status_code=409, detail="Time slot already booked")

    fee, earning = svc.split_fee(p.rate_per_session)
    ref = svc.new_booking_ref()
    while db.query(Booking).filter(Booking.booking_ref == ref).first():
        ref = svc.new_booking_ref()

    b = Booking(
        booking_ref=ref,
        psychologist_id=p.id,
        client_name=payload.clientName or "Anonymous",
        client_phone=payload.clientPhone,
        client_email=payload.clientEmail,
        scheduled_date=payload.scheduledDate,
        scheduled_time=payload.scheduledTime,
        session_type=payload.sessionType or "video",
        duration=p.session_duration,
        amount=p.rate_per_session,
        platform_fee=fee,
        psychologist_earning=earning,
        notes=payload.notes,
        status="pending_payment",
    )
    db.add(b)
    db.commit()
    db.refresh(b)
    log.info("booking created ref=%s psychologist=%s", b.booking_ref, p.id)
    return {
        "success": True,
        "booking": _booking_out(b),
        "message": "สร้างการจองสำเร็จ กรุณาชำระเงินภายใน 30 นาที",
    }

@router.get("/bookings/{booking_ref}")
def get_booking(booking_ref: str, db: Session = Depends(get_db)):
    return {"success": True, "booking": _booking_out(_get_booking(db, booking_ref))}

@router.post("/bookings/{booking_ref}/cancel")
def cancel_booking(booking_ref: str, payload: CancelRequest, db: Session = Depends(get_db)):
    b = _get_booking(db, booking_ref)
    if b.status not in svc.ACTIVE_STATUSES:
        raise HTTPException(status_code=409, detail=f"Booking cannot be cancelled in status {b.status}")
    if not svc.can_cancel(b):
        raise HTTPException(
            status_code=409,
            detail=f"Bookings can only be cancelled at least {svc.CANCELLATION_HOURS} hours in advance",
        )
    was_paid = b.status == "confirmed"
    b.status = "cancelled"
    b.cancel_reason = payload.reason
    db.commit()
    return {
        "success": True,
        "message": "ยกเลิกการจองสำเร็จ",
        "refund": {"amount": b.amount if was_paid else 0, "status": "processing" if was_paid else "none"},
    }

@router.post("/bookings/{booking_ref}/rate")
def rate_session(booking_ref: str, payload: RateRequest, db: Session = Depends(get_db)):
    if payload.rating < 1 or payload.rating > 5:
        raise HTTPException(status_code=400, detail="Rating must be between 1 and 5")
    b = _get_booking(db, booking_ref)
    if b.status != "completed":
        raise HTTPException(status_code=409, detail="Only completed sessions can be rated")
    if b.rating is not None:
        raise HTTPException(status_code=409, detail="Session already rated")
    b.rating = payload.rating
    b.feedback = payload.feedback

    p = b.psychologist
    p.rating = round((p.rating * p.total_reviews + payload.rating) / (p.total_reviews + 1), 2)
    p.total_reviews += 1
    db.commit()
    return {"success": True, "message": "ขอบคุณสำหรับการให้คะแนน!"}
