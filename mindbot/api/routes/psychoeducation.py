import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from ..deps import enforce_rate_limit, get_pipeline
from ..schemas import PsychoeducationRequest
from ...conversation import language
from ...conversation.normalizer import Invalid, normalize_text
from ...conversation.pipeline import Crisis, DecisionPipeline
from ...llm import composer
from ...llm.errors import LLMError
from ...services import psychoeducation as content

log = logging.getLogger("mindbot.psychoeducation")

router = APIRouter(prefix="/api/psychoeducation", tags=["psychoeducation"])

@router.get("")
def list_comics(lang: str | None = Query(None)):
    code = language.normalize(lang)
    comics = content.list_comics(code)
    return {"success": True, "language": code, "totalVolumes": len(comics), "comics": comics}

@router.post("", dependencies=[Depends(enforce_rate_limit)])
async def psychoeducation_action(payload: PsychoeducationRequest, pipeline: DecisionPipeline = Depends(get_pipeline)):
    lang = language.normalize(payload.lang)

    if payload.action == "getVolume":
        if payload.volumeId not in content.COMICS:
            raise HTTPException(status_code=400, detail="Invalid volume ID")
        return {"success": True, "comic": content.comic_out(payload.volumeId, lang)}

    if payload.action == "translate":
        checked = normalize_text(payload.text)
        if isinstance(checked, Invalid):
            raise HTTPException(status_code=400, detail=checked.error)
        target = "en" if lang == "th" else "th"
        try:
            translated = await composer.translate_text(checked.text, target)
        except LLMError as exc:
            log.error("translation failed target=%s: %s", target, exc)
            return {"success": False, "error": language.get_error_message("psychoeducation", lang)}
        return {
            "success": True,
            "original": checked.text,
            "translated": translated,
            "sourceLang": lang,
            "targetLang": target,
        }

    if payload.action == "chat":
        # rate limit already applied by the route dependency
        decision = pipeline.evaluate_text(payload.message, language_hint=payload.lang)
        if isinstance(decision, Invalid):
            raise HTTPException(status_code=400, detail=decision.error)
        if isinstance(decision, Crisis):
            return {"success": True, **decision.to_dict(), "language": decision.language}
        try:
            reply = await composer.compose_psychoeducation_reply(
                decision.text, decision.language, content.volume_context(payload.volumeId),
            )
        except LLMError as exc:
            log.error("psychoeducation chat failed lang=%s: %s", decision.language, exc)
            return {"success": False, "error": language.get_error_message("psychoeducation", decision.language)}
        return {"success": True, "reply": reply, "language": decision.language}

    raise HTTPException(status_code=400, detail="Invalid action")
