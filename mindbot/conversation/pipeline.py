from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import hashlib
import logging

from . import crisis, language, modes
from .normalizer import Invalid, normalize_text, sanitize_input, validate_messages
from .ratelimit import Limited, RateLimiter

log = logging.getLogger("mindbot.pipeline")


@dataclass(frozen=True)
class Crisis:
    response: crisis.CrisisResponse
    language: str

    def to_dict(self) -> Dict[str, Any]:
        return self.response.to_dict()


@dataclass(frozen=True)
class Proceed:
    text: str
    language: str
    case_type: str
    mode: modes.ModeDecision
    instructions: str
    messages: List[Dict[str, str]] = field(default_factory=list)

    @property
    def max_tokens(self) -> int:
        return self.mode.max_tokens

    @property
    def is_premium(self) -> bool:
        return self.mode.is_premium


Decision = Union[Limited, Invalid, Crisis, Proceed]


def _key_digest(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]


def build_instructions(lang: str, case_type: str, mode: modes.ModeDecision) -> str:
    return "\n".join([
        language.get_instruction(lang),
        modes.get_case_instruction(case_type),
        mode.instruction_text,
    ])


def _sanitized(messages: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    out = []
    for m in messages:
        content = m["content"]
        if m["role"] == "user":
            content = sanitize_input(content)
        elif not isinstance(content, str):
            content = str(content)
        out.append({"role": m["role"], "content": content})
    return out


class DecisionPipeline:
    """Runs every inbound message through the safety/routing stages.

    Order: rate limiter, message validation and normalizer, crisis
    classifier (short-circuits), language resolver, case/mode selector.
    """

    def __init__(self, limiter: Optional[RateLimiter] = None):
        self.limiter = limiter

    def _throttled(self, caller_key: Optional[str]) -> Optional[Limited]:
        if self.limiter is None or not caller_key:
            return None
        rl = self.limiter.check(caller_key)
        if rl.limited:
            log.warning("rate limited caller=%s count=%d", _key_digest(caller_key), rl.count)
            return rl
        return None

    def evaluate(
        self,
        messages: Any,
        *,
        caller_key: Optional[str] = None,
        is_premium: bool = False,
        language_hint: Any = None,
        case_type: Any = None,
    ) -> Decision:
        throttled = self._throttled(caller_key)
        if throttled is not None:
            return throttled
        structure = validate_messages(messages)
        if not structure.valid:
            return structure
        return self._decide(structure.text, messages, caller_key, is_premium, language_hint, case_type)

    def evaluate_text(
        self,
        text: Any,
        *,
        caller_key: Optional[str] = None,
        is_premium: bool = False,
        language_hint: Any = None,
        case_type: Any = None,
    ) -> Decision:
        throttled = self._throttled(caller_key)
        if throttled is not None:
            return throttled
        messages = [{"role": "user", "content": text}]
        return self._decide(text, messages, caller_key, is_premium, language_hint, case_type)

    def _decide(self, raw, messages, caller_key, is_premium, language_hint, case_type) -> Decision:
        checked = normalize_text(raw)
        if not checked.valid:
            return checked
        text = checked.text

        found = crisis.handle_check(text)
        if found is not None:
            lang = language.resolve(text, language_hint)
            log.warning(
                "crisis detected caller=%s lang=%s vocab=%s",
                _key_digest(caller_key) if caller_key else "-",
                lang,
                ",".join(crisis.matched_languages(text)),
            )
            return Crisis(response=found, language=lang)

        lang = language.resolve(text, language_hint)
        case = modes.resolve_case_type(case_type, text)
        mode = modes.get_mode(is_premium)
        log.debug("decision lang=%s case=%s premium=%s", lang, case, mode.is_premium)
        return Proceed(
            text=text,
            language=lang,
            case_type=case,
            mode=mode,
            instructions=build_instructions(lang, case, mode),
            messages=_sanitized(messages),
        )
