"""Crisis (suicide / self-harm) detection.

Deterministic allow-list of regex patterns per language. Any match anywhere
in the message short-circuits the pipeline into a fixed safety response, so
a pattern may only be removed together with an equivalent replacement.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import re

from .language import DEFAULT_LANGUAGE, normalize as normalize_language
from .normalizer import normalize_text

CRISIS_DETECTED = "CRISIS_DETECTED"

# (language, pattern) in evaluation order
CRISIS_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = tuple(
    (lang, re.compile(pat, re.IGNORECASE))
    for lang, pat in [
        ("th", r"ฆ่าตัวตาย"),        # kill oneself
        ("th", r"อยากตาย"),          # want to die
        ("th", r"ไม่อยากอยู่"),        # don't want to be here
        ("th", r"ไม่อยากมีชีวิต"),      # don't want to live
        ("th", r"ทำร้ายตัวเอง"),       # hurt myself
        ("en", r"suicide"),
        ("en", r"suicidal"),
        ("en", r"kill myself"),
        ("en", r"end my life"),
        ("en", r"hurt myself"),
        ("en", r"want to die"),
        ("en", r"self[- ]?harm"),
        ("cn", r"自杀"),             # suicide
        ("cn", r"想死"),             # want to die
        ("cn", r"不想活"),           # don't want to live
        ("cn", r"自残"),             # self-harm
    ]
)


@dataclass(frozen=True)
class Resource:
    name: str
    info: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "info": self.info}


CRISIS_RESOURCES: Tuple[Resource, ...] = (
    Resource("Thailand Hotline", "1323"),
    Resource("Samaritans Thailand", "02-713-6793"),
)

CRISIS_MESSAGES: Dict[str, str] = {
    "th": (
        "เราเป็นห่วงคุณมากนะ 💙 ตอนนี้คุณไม่ได้อยู่คนเดียว\n"
        "กรุณาโทรสายด่วนสุขภาพจิต 1323 (ตลอด 24 ชม.) "
        "หรือสะมาริตันส์ 02-713-6793 ได้เลย"
    ),
    "en": (
        "We are really worried about you 💙 You are not alone right now.\n"
        "Please call the Thailand Mental Health Hotline 1323 (24 hours) "
        "or Samaritans Thailand 02-713-6793."
    ),
    "cn": (
        "我们非常担心你 💙 你并不孤单。\n"
        "请立即拨打泰国心理健康热线 1323（24小时）"
        "或撒玛利亚会 02-713-6793。"
    ),
}


@dataclass(frozen=True)
class CrisisResponse:
    message: str = CRISIS_DETECTED
    resources: Tuple[Resource, ...] = field(default=CRISIS_RESOURCES)
    crisis: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crisis": self.crisis,
            "message": self.message,
            "resources": [r.to_dict() for r in self.resources],
        }


def detect(text: Any) -> bool:
    if not isinstance(text, str) or not text.strip():
        return False
    return any(pat.search(text) for _, pat in CRISIS_PATTERNS)


def matched_languages(text: Any) -> List[str]:
    """Languages whose vocabulary matched; used for logging only."""
    if not isinstance(text, str):
        return []
    return sorted({lang for lang, pat in CRISIS_PATTERNS if pat.search(text)})


def create_response() -> CrisisResponse:
    return CrisisResponse()


def handle_check(text: Any) -> Optional[CrisisResponse]:
    checked = normalize_text(text)
    if checked.valid and detect(checked.text):
        return create_response()
    return None


def get_crisis_message(lang: Any) -> str:
    return CRISIS_MESSAGES.get(normalize_language(lang), CRISIS_MESSAGES[DEFAULT_LANGUAGE])


def create_localized_response(lang: Any) -> CrisisResponse:
    return CrisisResponse(message=get_crisis_message(lang))
