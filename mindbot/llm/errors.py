ERROR_CODES = {
    400: "Invalid request format",
    401: "Invalid API key",
    403: "Permission denied",
    429: "Rate limit exceeded. Please try again later.",
    500: "Provider server error. Please try again.",
    503: "Provider service unavailable. Please try again.",
}


class LLMError(Exception):
    """The completion provider could not produce a reply."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def error_for_status(provider: str, status_code: int, detail: str | None = None) -> LLMError:
    message = ERROR_CODES.get(status_code, f"{provider} API error: {status_code}")
    if detail:
        message = f"{message} - {detail}"
    return LLMError(message, status_code=status_code)
