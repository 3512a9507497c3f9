import httpx
from ..core.config import settings
from .errors import LLMError, error_for_status

async def messages_completion(
    system: str | None,
    messages,
    temperature: float = 0.7,
    max_tokens: int = 600,
) -> str:
    if not settings.ANTHROPIC_API_KEY:
        raise LLMError("ANTHROPIC_API_KEY is not configured")
    url = f"{settings.ANTHROPIC_BASE_URL.rstrip('/')}/messages"
    headers = {
        "x-api-key": settings.ANTHROPIC_API_KEY,
        "anthropic-version": settings.ANTHROPIC_VERSION,
    }
    # the Messages API only knows user/assistant turns
    payload = {
        "model": settings.CLAUDE_MODEL,
        "max_tokens": max_tokens,
        "messages": [
            {"role": "assistant" if m["role"] == "assistant" else "user", "content": m["content"]}
            for m in messages
        ],
        "temperature": temperature,
    }
    if system:
        payload["system"] = system
    try:
        async with httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS) as client:
            r = await client.post(url, headers=headers, json=payload)
    except httpx.HTTPError as exc:
        raise LLMError(f"Network error: {exc.__class__.__name__}") from exc
    if r.status_code >= 400:
        try:
            detail = r.json().get("error", {}).get("message")
        except (ValueError, AttributeError):
            detail = None
        raise error_for_status("Claude", r.status_code, detail)
    try:
        blocks = r.json()["content"]
        text = "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        raise LLMError("Invalid response from Claude") from exc
    if not text:
        raise LLMError("Invalid response from Claude")
    return text
