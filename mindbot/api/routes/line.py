import asyncio
import json
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
import httpx

from ..deps import get_pipeline
from ...core.config import settings
from ...conversation import crisis, language
from ...conversation.normalizer import Invalid
from ...conversation.pipeline import Crisis, DecisionPipeline
from ...llm import composer
from ...llm.errors import LLMError
from ...services import line as line_service
from ...services.line import LineMessenger

log = logging.getLogger("mindbot.line")

router = APIRouter(prefix="/api", tags=["line"])

def get_messenger() -> LineMessenger:
    return LineMessenger()

async def _text_reply(text: str, pipeline: DecisionPipeline) -> dict:
    decision = pipeline.evaluate_text(text)
    if isinstance(decision, Invalid):
        return line_service.text_message(language.get_error_message("line", language.detect(text)))
    if isinstance(decision, Crisis):
        localized = crisis.create_localized_response(decision.language)
        return line_service.text_message(localized.message)
    try:
        reply = await composer.compose_line_reply(decision.messages[0]["content"], decision.language, decision.case_type)
    except LLMError as exc:
        log.error("line reply failed lang=%s: %s", decision.language, exc)
        reply = language.get_error_message("line", decision.language)
    return line_service.text_message(reply, line_service.quick_replies_for(decision.language))

async def _handle_event(event: dict, messenger: LineMessenger, pipeline: DecisionPipeline) -> str | None:
    kind = event.get("type")
    message = event.get("message") or {}
    token = event.get("replyToken")
    if kind == "message" and message.get("type") == "text":
        out = await _text_reply(message.get("text", ""), pipeline)
    elif kind == "message" and message.get("type") == "image":
        out = line_service.text_message(line_service.IMAGE_THANKS)
    elif kind == "follow":
        out = line_service.text_message(line_service.WELCOME_MESSAGE, line_service.WELCOME_QUICK_REPLIES)
    else:
        return None
    if not token:
        return None
    try:
        await messenger.reply(token, out)
    except httpx.HTTPError as exc:
        log.error("line reply delivery failed event=%s: %s", kind, exc)
        return "failed"
    return "replied"

@router.post("/line")
async def line_webhook(
    request: Request,
    messenger: LineMessenger = Depends(get_messenger),
    pipeline: DecisionPipeline = Depends(get_pipeline),
):
    try:
        line_service.validate_config()
    except line_service.LineConfigError as exc:
        log.error("line config error: %s", exc)
        raise HTTPException(status_code=503, detail="Service configuration error")

    body = await request.body()
    signature = request.headers.get("x-line-signature")
    if not line_service.validate_signature(body, signature, settings.LINE_CHANNEL_SECRET):
        log.warning("invalid line signature")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        data = json.loads(body or b"{}")
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    events = data.get("events") if isinstance(data, dict) else None
    if not isinstance(events, list):
        events = []
    events = [e for e in events if isinstance(e, dict)]
    results = await asyncio.gather(*(_handle_event(e, messenger, pipeline) for e in events))
    return {"status": "success", "results": list(results)}
