import httpx
from ..core.config import settings
from .errors import LLMError, error_for_status

async def chat_completion(
    messages,
    temperature: float = 0.7,
    max_tokens: int | None = None,
    response_format: dict | None = None,
) -> str:
    if not settings.OPENAI_API_KEY:
        raise LLMError("OPENAI_API_KEY is not configured")
    url = f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions"
    headers = {"Authorization": f"Bearer {settings.OPENAI_API_KEY}"}
    payload = {
        "model": settings.OPENAI_MODEL,
        "messages": messages,
        "temperature": temperature,
    }
    if max_tokens:
        payload["max_tokens"] = max_tokens
    if response_format:
        payload["response_format"] = response_format
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
        raise error_for_status("OpenAI", r.status_code, detail)
    try:
        return r.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise LLMError("Invalid response from OpenAI") from exc
