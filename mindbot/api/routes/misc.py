from datetime import datetime, timezone
from fastapi import APIRouter
from ...core.config import settings
from ...core import db

router = APIRouter(tags=["misc"])

def _has_llm_key() -> bool:
    if settings.LLM_PROVIDER.lower() == "openai":
        return bool(settings.OPENAI_API_KEY)
    return bool(settings.ANTHROPIC_API_KEY)

@router.get("/health")
def health():
    db_error = db.ping()
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "api": "ok",
            "database": "error" if db_error else "ok",
            "databaseError": db_error,
        },
        "environment": {
            "hasLlmKey": _has_llm_key(),
            "llmProvider": settings.LLM_PROVIDER,
            "appEnv": settings.APP_ENV,
        },
    }

@router.get("/version")
def version():
    return {"version": settings.API_VERSION}
