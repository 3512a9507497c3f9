import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from ..deps import client_ip, get_pipeline, too_many_requests
from ..schemas import ChatRequest
from ...conversation import language, modes
from ...conversation.normalizer import Invalid
from ...conversation.pipeline import Crisis, DecisionPipeline, Proceed
from ...conversation.ratelimit import Limited
from ...llm import composer
from ...llm.errors import LLMError

log = logging.getLogger("mindbot.chat")

router = APIRouter(prefix="/api", tags=["chat"])

def _conversation(payload: ChatRequest):
    if isinstance(payload.messages, list):
        return payload.messages
    return [{"role": "user", "content": payload.message if payload.message is not None else ""}]

def _failure(decision: Proceed, exc: LLMError, **flags) -> dict:
    log.error("llm call failed lang=%s case=%s: %s", decision.language, decision.case_type, exc)
    return {**flags, "reply": language.get_error_message("chat", decision.language), "error": str(exc)}

@router.post("/chat")
async def chat(payload: ChatRequest, request: Request, pipeline: DecisionPipeline = Depends(get_pipeline)):
    decision = pipeline.evaluate(
        _conversation(payload),
        caller_key=client_ip(request),
        is_premium=payload.isPremium,
        language_hint=payload.lang or payload.language,
        case_type=payload.caseType,
    )
    if isinstance(decision, Limited):
        raise too_many_requests(decision)
    if isinstance(decision, Invalid):
        raise HTTPException(status_code=400, detail=decision.error)
    if isinstance(decision, Crisis):
        return decision.to_dict()

    meta = {"language": decision.language, "caseType": decision.case_type}

    workshop = payload.isWorkshop
    if workshop is None:
        workshop = modes.is_workshop_request(decision.text)
    if workshop:
        try:
            reply = await composer.compose_workshop(
                decision.language, payload.targetGroup or "general", decision.case_type, decision.is_premium,
            )
        except LLMError as exc:
            return _failure(decision, exc, crisis=False)
        return {"crisis": False, "reply": reply, **meta}

    if payload.isToolkit:
        try:
            reply = await composer.compose_toolkit_mode(decision.language, decision.case_type, decision.messages)
        except LLMError as exc:
            return _failure(decision, exc, toolkit=True)
        return {"toolkit": True, "reply": reply, **meta}

    if payload.isVent:
        try:
            reply = await composer.compose_vent_mode(decision.language, decision.messages)
        except LLMError as exc:
            return _failure(decision, exc, vent=True)
        return {"vent": True, "reply": reply, **meta}

    try:
        reply = await composer.compose_chat_reply(decision)
    except LLMError as exc:
        return _failure(decision, exc, crisis=False)
    body = {"crisis": False, "reply": reply, "isPremium": decision.is_premium, **meta}
    upgrade = modes.upgrade_signal(decision.text, decision.is_premium)
    if upgrade:
        body["upgrade"] = upgrade
    return body
