import json
import logging
import re
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...core.db import get_db
from ...models import TherapistApplication
from ...services import consultation as svc
from ..schemas import TherapistApply

log = logging.getLogger("mindbot.therapists")

router = APIRouter(prefix="/api/therapists", tags=["therapists"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^0[0-9]{9}$")

def _text(value) -> str:
    return str(value).strip() if value is not None else ""

@router.post("/apply")
def apply(payload: TherapistApply, db: Session = Depends(get_db)):
    fullname = _text(payload.fullname)
    email = _text(payload.email).lower()
    phone = _text(payload.phone)
    required = [fullname, email, phone, _text(payload.position), _text(payload.education), _text(payload.experience_hours)]
    if not all(required):
        raise HTTPException(status_code=400, detail="กรุณากรอกข้อมูลที่จำเป็นให้ครบถ้วน")
    if not EMAIL_RE.match(email):
        raise HTTPException(status_code=400, detail="รูปแบบอีเมลไม่ถูกต้อง")
    if not PHONE_RE.match(phone):
        raise HTTPException(status_code=400, detail="รูปแบบเบอร์โทรศัพท์ไม่ถูกต้อง")
    if db.query(TherapistApplication).filter(TherapistApplication.email == email).first():
        raise HTTPException(status_code=409, detail="อีเมลนี้ถูกใช้สมัครแล้ว")
    if db.query(TherapistApplication).filter(TherapistApplication.phone == phone).first():
        raise HTTPException(status_code=409, detail="เบอร์โทรศัพท์นี้ถูกใช้สมัครแล้ว")

    ref = svc.new_application_ref()
    while db.query(TherapistApplication).filter(TherapistApplication.ref_number == ref).first():
        ref = svc.new_application_ref()

    position = _text(payload.position)
    app_row = TherapistApplication(
        ref_number=ref,
        fullname=f"{_text(payload.prefix)} {fullname}".strip(),
        nickname=_text(payload.nickname),
        email=email,
        phone=phone,
        line_id=_text(payload.line_id),
        position=svc.POSITIONS.get(position, position),
        work_type=_text(payload.work_type) or "parttime",
        education=_text(payload.education),
        license_number=_text(payload.license_number),
        experience_hours=_text(payload.experience_hours),
        experience_years=_text(payload.experience_years),
        specializations_json=json.dumps(payload.specializations or [], ensure_ascii=False),
        languages_json=json.dumps(payload.languages or ["thai"], ensure_ascii=False),
        work_history=_text(payload.work_history),
        motivation=_text(payload.motivation),
    )
    db.add(app_row)
    db.commit()
    log.info("therapist application received ref=%s position=%s", ref, app_row.position)
    return {
        "success": True,
        "applicationId": ref,
        "message": "ส่งใบสมัครเรียบร้อยแล้ว ทีมงานจะติดต่อกลับภายใน 5-7 วันทำการ",
    }
