from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Union
import json
import re

VALID_RISK_LEVELS = ("none", "low", "medium", "high", "unknown")

MAX_INPUT_CHARS = 2000


@dataclass(frozen=True)
class Valid:
    text: str = ""

    @property
    def valid(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    error: str

    @property
    def valid(self) -> bool:
        return False


NormalizedText = Union[Valid, Invalid]


def normalize_text(value: Any) -> NormalizedText:
    if value is None:
        return Invalid("Text is required")
    if not isinstance(value, str):
        return Invalid("Text must be a string")
    trimmed = value.strip()
    if not trimmed:
        return Invalid("Text cannot be empty")
    return Valid(trimmed)


def validate_messages(messages: Any) -> NormalizedText:
    """Check conversation structure and pick the last user message.

    The returned text is not trimmed; callers still run it through
    ``normalize_text``.
    """
    if not isinstance(messages, list):
        return Invalid("Messages must be an array")
    if not messages:
        return Invalid("Messages array cannot be empty")
    for i, msg in enumerate(messages):
        if not isinstance(msg, dict):
            return Invalid(f"Message at index {i} must be an object")
        role = msg.get("role")
        if not role or not isinstance(role, str):
            return Invalid(f"Message at index {i} must have a valid role")
        if msg.get("content") is None:
            return Invalid(f"Message at index {i} must have content")
    user_turns = [m for m in messages if m["role"] == "user"]
    if not user_turns:
        return Invalid("Messages must include a user message")
    content = user_turns[-1]["content"]
    if not isinstance(content, str):
        return Invalid("Text must be a string")
    return Valid(content)


_INJECTION_MARKERS = [
    (re.compile(r"\[SYSTEM\]", re.IGNORECASE), "[USER_INPUT]"),
    (re.compile(r"\[INSTRUCTION\]", re.IGNORECASE), "[USER_INPUT]"),
    (re.compile(r"\[ROLE:", re.IGNORECASE), "[USER_INPUT:"),
    (re.compile(r"</?system>", re.IGNORECASE), "[USER_INPUT]"),
    (re.compile(r"```[\s\S]*?```"), "[CODE_BLOCK_REMOVED]"),
]


def sanitize_input(value: Any) -> str:
    if not value or not isinstance(value, str):
        return ""
    out = value
    for pat, repl in _INJECTION_MARKERS:
        out = pat.sub(repl, out)
    return out[:MAX_INPUT_CHARS].strip()


def validate_risk_level(risk: Any) -> str:
    if not risk or not isinstance(risk, str):
        return "unknown"
    risk = risk.lower()
    return risk if risk in VALID_RISK_LEVELS else "unknown"


_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def parse_json_reply(content: Any, fallback: Any = None) -> Any:
    if not content or not isinstance(content, str):
        return fallback
    m = _FENCED_JSON.search(content)
    raw = m.group(1).strip() if m else content
    try:
        return json.loads(raw)
    except ValueError:
        return fallback
