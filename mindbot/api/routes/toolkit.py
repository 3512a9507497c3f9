import logging
from fastapi import APIRouter, Depends

from ..deps import enforce_rate_limit
from ..schemas import ToolkitRequest
from ...conversation import language
from ...conversation.normalizer import parse_json_reply, sanitize_input
from ...llm import composer
from ...llm.errors import LLMError

log = logging.getLogger("mindbot.toolkit")

router = APIRouter(prefix="/api", tags=["toolkit"])

@router.post("/toolkit", dependencies=[Depends(enforce_rate_limit)])
async def toolkit(payload: ToolkitRequest):
    mood = sanitize_input(payload.mood)
    user_work = sanitize_input(payload.userWork)
    lang = language.resolve(f"{mood} {user_work}".strip(), payload.lang)
    try:
        raw = await composer.build_toolkits(mood, user_work, lang)
    except LLMError as exc:
        log.error("toolkit generation failed lang=%s: %s", lang, exc)
        return {"success": False, "error": language.get_error_message("toolkit", lang)}
    parsed = parse_json_reply(raw, None)
    if parsed is not None:
        return {"success": True, "data": parsed}
    return {"success": True, "raw": raw}
