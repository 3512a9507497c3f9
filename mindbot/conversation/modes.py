from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple
import re

GENERAL = "general"

CASE_TYPES: Tuple[str, ...] = (
    "anxiety", "sadness", "anger", "loneliness", "stress",
    "grief", "shame", "burnout", "relationship", GENERAL,
)

CASE_INSTRUCTIONS: Dict[str, str] = {
    "anxiety": '[CASE: ANXIETY (Rank 1)] Focus: Restless, Overthinking. Stigma: "Crazy/Weak". Goal: Grounding.',
    "sadness": '[CASE: SADNESS (Rank 2)] Focus: Low energy, Anhedonia. Stigma: "Lazy". Goal: Acceptance.',
    "anger": '[CASE: ANGER] Focus: Frustration, Irritability. Stigma: "Aggressive". Goal: Regulation.',
    "loneliness": '[CASE: LONELINESS] Focus: Isolation, Disconnection. Stigma: "Unlikeable". Goal: Connection.',
    "stress": '[CASE: STRESS] Focus: Overwhelmed, Pressure. Stigma: "Can\'t handle it". Goal: Relief.',
    "grief": '[CASE: GRIEF] Focus: Loss, Mourning. Stigma: "Move on already". Goal: Processing.',
    "shame": '[CASE: SHAME] Focus: Self-blame, Unworthiness. Stigma: "Deserve it". Goal: Self-compassion.',
    "burnout": '[CASE: BURNOUT] Focus: Exhaustion, Cynicism. Stigma: "Weak worker". Goal: Recovery.',
    "relationship": '[CASE: RELATIONSHIP] Focus: Interpersonal conflict. Stigma: "Drama". Goal: Understanding.',
    GENERAL: "[CASE: GENERAL] Focus: Listening.",
}

PREMIUM_MODE_INSTRUCTION = (
    "[MODE: PREMIUM DEEP DIVE] Senior Analyst. Deconstruct Stigma using DSM-5 & Research. "
    "Length: 5-8 sentences."
)
FREE_MODE_INSTRUCTION = (
    "[MODE: FREE BASIC SUPPORT] Validate feeling -> Identify Stigma -> Ask 1 Reflective Question. "
    "Upsell Premium if needed. Length: 3-4 sentences."
)

PREMIUM_MAX_TOKENS = 1500
FREE_MAX_TOKENS = 600

# Evaluated top to bottom, first match wins. Thai has no word breaks so Thai
# and Chinese terms are plain substrings; English terms are word-anchored.
CASE_PATTERNS: Tuple[Tuple[str, re.Pattern], ...] = tuple(
    (case, re.compile(pat, re.IGNORECASE))
    for case, pat in [
        ("burnout", r"\bburn(?:ed|t)?[\s-]?out\b|\bexhausted\b|\bdrained\b|หมดไฟ|หมดแรง|倦怠|筋疲力尽|心累"),
        ("grief", r"\bpassed away\b|\bgriev(?:e|ing)\b|\bgrief\b|\bmourn(?:ing)?\b|\bfuneral\b|เสียชีวิต|สูญเสีย|จากไปแล้ว|去世|过世|失去了"),
        ("anxiety", r"\banxious\b|\banxiety\b|\bworr(?:y|ied|ying)\b|\bnervous\b|\bpanic\w*|\boverthink\w*|กังวล|วิตก|ตื่นตระหนก|焦虑|担心|紧张|恐慌"),
        ("stress", r"\bstress(?:ed|ful)?\b|\bpressure\b|\boverwhelm\w*|เครียด|กดดัน|压力"),
        ("sadness", r"\bsad(?:ness)?\b|\bunhappy\b|\bdepress\w*|\bcry(?:ing)?\b|\bhopeless\b|เศร้า|เสียใจ|ร้องไห้|หดหู่|难过|伤心|悲伤|沮丧"),
        ("anger", r"\bangry\b|\banger\b|\bfurious\b|\bmad at\b|\birritat\w*|\bfrustrat\w*|โกรธ|โมโห|หงุดหงิด|生气|愤怒|恼火"),
        ("loneliness", r"\blonely\b|\bloneliness\b|\balone\b|\bisolated\b|เหงา|โดดเดี่ยว|孤独|寂寞"),
        ("shame", r"\bashamed\b|\bshame\b|\bembarrass\w*|\bworthless\b|\bguilty\b|อับอาย|ละอายใจ|ไร้ค่า|羞耻|丢脸|没用"),
        ("relationship", r"\bboyfriend\b|\bgirlfriend\b|\bpartner\b|\bbreak ?up\b|\bbroke up\b|\bhusband\b|\bwife\b|\bdivorce\w*|\brelationship\b|แฟน|เลิกกัน|ทะเลาะ|分手|男朋友|女朋友|吵架|离婚"),
    ]
)

WORKSHOP_KEYWORDS = re.compile(r"(workshop|training|course|อบรม|หลักสูตร|培训|课程)", re.IGNORECASE)
PAYMENT_KEYWORDS = ("สมัคร", "premium", "จ่ายเงิน", "buy", "pay", "购买", "充值")
PREMIUM_KEYWORDS = ("โอนแล้ว", "paid", "已付", "เจาะลึก", "ออกแบบ")


@dataclass(frozen=True)
class ModeDecision:
    is_premium: bool
    max_tokens: int
    instruction_text: str


def _case_key(case_type: Any) -> str:
    if not isinstance(case_type, str) or not case_type.strip():
        return GENERAL
    key = case_type.strip().lower()
    return key if key in CASE_TYPES else GENERAL


def get_case_instruction(case_type: Any) -> str:
    return CASE_INSTRUCTIONS[_case_key(case_type)]


def get_mode_instruction(is_premium: Any) -> str:
    return PREMIUM_MODE_INSTRUCTION if is_premium else FREE_MODE_INSTRUCTION


def get_max_tokens(is_premium: Any) -> int:
    return PREMIUM_MAX_TOKENS if is_premium else FREE_MAX_TOKENS


def get_mode(is_premium: Any) -> ModeDecision:
    premium = bool(is_premium)
    return ModeDecision(premium, get_max_tokens(premium), get_mode_instruction(premium))


def detect_case_type(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        return GENERAL
    for case, pat in CASE_PATTERNS:
        if pat.search(text):
            return case
    return GENERAL


def resolve_case_type(requested: Any, text: Any) -> str:
    key = _case_key(requested)
    if key != GENERAL:
        return key
    return detect_case_type(text)


def is_workshop_request(message: Any) -> bool:
    if not isinstance(message, str) or not message:
        return False
    return WORKSHOP_KEYWORDS.search(message) is not None


def is_payment_request(message: Any) -> bool:
    if not isinstance(message, str) or not message:
        return False
    lowered = message.lower()
    return any(k in lowered for k in PAYMENT_KEYWORDS)


def has_premium_indicator(message: Any) -> bool:
    if not isinstance(message, str) or not message:
        return False
    return any(k in message for k in PREMIUM_KEYWORDS)


def upgrade_signal(message: Any, is_premium: Any) -> str | None:
    """Hint for the client's upsell UI. Never grants premium by itself."""
    if is_premium:
        return None
    if has_premium_indicator(message):
        return "claimed"
    if is_payment_request(message):
        return "payment"
    return None
