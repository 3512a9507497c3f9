import json
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.db import get_db
from ...models import Lead
from ...llm import composer
from ..schemas import AssessmentScores, LeadCapture

log = logging.getLogger("mindbot.leads")

router = APIRouter(prefix="/api", tags=["leads"])

WEAK_DOMAIN_THRESHOLD = 50

def weak_domains(scores: AssessmentScores) -> list[dict]:
    return [
        {"id": d.id, "name": d.nameTH, "score": d.percentage}
        for d in scores.domainScores.values()
        if d.percentage < WEAK_DOMAIN_THRESHOLD
    ]

@router.post("/leads")
async def capture_lead(payload: LeadCapture, db: Session = Depends(get_db)):
    school = payload.schoolInfo
    level = payload.scores.overallLevel.level if payload.scores.overallLevel else "Unknown"
    weak = weak_domains(payload.scores)

    pitch = await composer.compose_lead_pitch({
        "school_name": school.schoolName,
        "province": school.province,
        "student_count": school.studentCount,
        "total_score": payload.scores.totalPercentage,
        "level": level,
        "weak_domains": weak,
    })

    lead = Lead(
        school_name=school.schoolName,
        province=school.province,
        affiliation=school.affiliation,
        student_count=school.studentCount,
        school_level=school.level,
        respondent=school.respondent,
        contact_json=json.dumps(payload.contactInfo, ensure_ascii=False) if payload.contactInfo else None,
        total_score=payload.scores.totalPercentage,
        assessment_level=level,
        weak_domains_json=json.dumps(weak, ensure_ascii=False),
        pitch_message=pitch,
    )
    db.add(lead)
    db.commit()
    db.refresh(lead)
    log.info("lead captured id=%s weak_domains=%d", lead.id, len(weak))
    return {
        "success": True,
        "leadId": lead.id,
        "assessment": {"totalScore": lead.total_score, "level": level, "weakDomains": weak},
        "pitchMessage": pitch,
    }
