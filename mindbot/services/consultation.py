import json
import logging
import secrets
import string
from datetime import datetime, timedelta
from sqlalchemy.orm import Session
from ..models import Booking, Psychologist

log = logging.getLogger("mindbot.consultation")

PLATFORM_FEE_PERCENT = 20
DEFAULT_SESSION_MINUTES = 50
CANCELLATION_HOURS = 24
SLOT_HOURS = range(9, 17)  # 09:00 .. 16:00
ACTIVE_STATUSES = ("pending_payment", "confirmed")

# application form value -> stored position
POSITIONS = {
    "psychiatrist": "psychiatrist",
    "clinical": "clinical_psychologist",
    "counseling": "counseling_psychologist",
}

_REF_ALPHABET = string.ascii_uppercase + string.digits

DEMO_PSYCHOLOGISTS = [
    {
        "name": "ดร.สมใจ รักษาใจ",
        "title": "นักจิตวิทยาคลินิก",
        "license_number": "ท.จ. 12345",
        "bio": "นักจิตวิทยาคลินิกที่มีประสบการณ์มากกว่า 10 ปี เชี่ยวชาญด้านการบำบัดความเครียด ภาวะซึมเศร้า และความวิตกกังวล",
        "education": "ปริญญาเอก จิตวิทยาคลินิก จุฬาลงกรณ์มหาวิทยาลัย",
        "specialties": ["ความเครียด", "ภาวะซึมเศร้า", "ความวิตกกังวล", "การปรับตัว"],
        "languages": ["ไทย", "English"],
        "experience": "10+ ปี",
        "rating": 4.8,
        "total_reviews": 124,
        "rate_per_session": 1500,
        "is_online": True,
    },
    {
        "name": "อ.มานะ ใจดี",
        "title": "นักจิตวิทยาการปรึกษา",
        "license_number": None,
        "bio": None,
        "education": None,
        "specialties": ["ความสัมพันธ์", "การทำงาน", "ครอบครัว"],
        "languages": ["ไทย"],
        "experience": "8 ปี",
        "rating": 4.9,
        "total_reviews": 89,
        "rate_per_session": 1200,
        "is_online": False,
    },
]

def seed_psychologists(db: Session) -> int:
    if db.query(Psychologist).count():
        return 0
    for p in DEMO_PSYCHOLOGISTS:
        data = dict(p)
        specialties = data.pop("specialties")
        languages = data.pop("languages")
        db.add(Psychologist(
            specialties_json=json.dumps(specialties, ensure_ascii=False),
            languages_json=json.dumps(languages, ensure_ascii=False),
            session_duration=DEFAULT_SESSION_MINUTES,
            **data,
        ))
    db.commit()
    log.info("seeded %d demo psychologists", len(DEMO_PSYCHOLOGISTS))
    return len(DEMO_PSYCHOLOGISTS)

def split_fee(amount: int) -> tuple[int, int]:
    """Return (platform_fee, psychologist_earning) for a session price."""
    fee = int(round(amount * PLATFORM_FEE_PERCENT / 100))
    return fee, amount - fee

def new_reference(prefix: str, now: datetime | None = None) -> str:
    now = now or datetime.utcnow()
    suffix = "".join(secrets.choice(_REF_ALPHABET) for _ in range(4))
    return f"{prefix}-{now.strftime('%Y%m%d')}-{suffix}"

def new_booking_ref(now: datetime | None = None) -> str:
    return new_reference("APT", now)

def new_application_ref(now: datetime | None = None) -> str:
    return new_reference("PSY", now)

def parse_slot(date_iso: str, time_hm: str) -> datetime:
    return datetime.strptime(f"{date_iso} {time_hm}", "%Y-%m-%d %H:%M")

def booked_times(db: Session, psychologist_id: str, date_iso: str) -> set[str]:
    rows = (
        db.query(Booking.scheduled_time)
        .filter(
            Booking.psychologist_id == psychologist_id,
            Booking.scheduled_date == date_iso,
            Booking.status.in_(ACTIVE_STATUSES),
        )
        .all()
    )
    return {r[0] for r in rows}

def slot_times() -> list[str]:
    # hourly starts, lunch hour skipped
    return [f"{hour:02d}:00" for hour in SLOT_HOURS if hour != 12]

def availability(db: Session, psychologist_id: str, date_iso: str) -> list[dict]:
    taken = booked_times(db, psychologist_id, date_iso)
    return [{"time": hm, "available": hm not in taken} for hm in slot_times()]

def can_cancel(booking: Booking, now: datetime | None = None) -> bool:
    now = now or datetime.utcnow()
    start = parse_slot(booking.scheduled_date, booking.scheduled_time)
    return start - now >= timedelta(hours=CANCELLATION_HOURS)
