import json
import logging
import time
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ...core.db import get_db
from ..deps import client_ip, get_pipeline, too_many_requests
from ..schemas import VentRequest
from ...models import VentPost
from ...conversation import language
from ...conversation.normalizer import Invalid, parse_json_reply, validate_risk_level
from ...conversation.pipeline import Crisis, DecisionPipeline
from ...conversation.ratelimit import Limited
from ...llm import composer
from ...llm.errors import LLMError

log = logging.getLogger("mindbot.vent")

router = APIRouter(prefix="/api", tags=["vent"])

@router.post("/vent")
async def vent(payload: VentRequest, request: Request, db: Session = Depends(get_db), pipeline: DecisionPipeline = Depends(get_pipeline)):
    decision = pipeline.evaluate_text(payload.text, caller_key=client_ip(request), language_hint=payload.lang)
    if isinstance(decision, Limited):
        raise too_many_requests(decision)
    if isinstance(decision, Invalid):
        raise HTTPException(status_code=400, detail=decision.error)
    if isinstance(decision, Crisis):
        body = decision.to_dict()
        return {
            "success": True,
            "crisis": True,
            "analysis": {"risk": "high", "tags": ["crisis"]},
            "reply": body["message"],
            "resources": body["resources"],
        }

    lang = decision.language
    text = decision.messages[0]["content"]
    try:
        raw = await composer.analyze_vent(text, lang)
    except LLMError as exc:
        log.error("vent analysis failed lang=%s: %s", lang, exc)
        return {"success": True, "analysis": {"risk": "unknown", "tags": []}, "reply": language.get_error_message("vent", lang)}

    parsed = parse_json_reply(raw, None)
    if not isinstance(parsed, dict) or not isinstance(parsed.get("analysis"), dict) or not parsed.get("reply"):
        return {"success": True, "analysis": {"risk": "unknown", "tags": []}, "reply": raw or language.get_error_message("vent", lang)}

    tags = parsed["analysis"].get("tags")
    analysis = {
        "risk": validate_risk_level(parsed["analysis"].get("risk")),
        "tags": tags if isinstance(tags, list) else [],
    }
    post = VentPost(
        session_id=payload.sessionId or f"anon_{int(time.time() * 1000)}",
        text=text,
        language=lang,
        risk=analysis["risk"],
        tags_json=json.dumps(analysis["tags"], ensure_ascii=False),
    )
    db.add(post)
    db.commit()
    return {"success": True, "analysis": analysis, "reply": parsed["reply"]}
