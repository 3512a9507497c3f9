from __future__ import annotations
from typing import Any, Callable, Dict, Optional, Tuple

SUPPORTED_LANGUAGES: Tuple[str, ...] = ("th", "en", "cn")
DEFAULT_LANGUAGE = "th"

LANGUAGE_INSTRUCTIONS: Dict[str, str] = {
    "th": "LANGUAGE: Thai. Tone: Warm, natural (ใช้ 'เรา/MindBot' แทน 'ผม').",
    "en": "LANGUAGE: English only. Tone: Professional yet empathetic.",
    "cn": "LANGUAGE: Chinese (Simplified). Tone: Warm, respectful, professional.",
}

AUTO_TRANSLATION_INSTRUCTIONS: Dict[str, str] = {
    "th": "[AUTO-LANGUAGE] The user writes in Thai. Every sentence of your answer must be in Thai.",
    "en": "[AUTO-LANGUAGE] The user writes in English. Every sentence of your answer must be in English.",
    "cn": "[AUTO-LANGUAGE] The user writes in Simplified Chinese. Every sentence of your answer must be in Simplified Chinese.",
}

ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "chat": {
        "th": "ขออภัยค่ะ ไม่สามารถประมวลผลได้ในขณะนี้",
        "en": "Sorry, we cannot process your request at this time",
        "cn": "抱歉，目前无法处理您的请求",
    },
    "vent": {
        "th": "รับฟังอยู่นะคะ",
        "en": "I'm here listening",
        "cn": "我在听",
    },
    "toolkit": {
        "th": "ไม่สามารถสร้าง Toolkit ได้ในขณะนี้",
        "en": "Unable to create toolkit at this time",
        "cn": "目前无法创建工具包",
    },
    "psychoeducation": {
        "th": "ไม่สามารถโหลดเนื้อหาได้ในขณะนี้",
        "en": "Unable to load content at this time",
        "cn": "目前无法加载内容",
    },
    "line": {
        "th": "ขอโทษนะคะ ระบบขัดข้องชั่วคราว ลองใหม่อีกครั้งนะ 💙",
        "en": "Sorry, the system is temporarily unavailable. Please try again 💙",
        "cn": "抱歉，系统暂时不可用，请稍后再试 💙",
    },
}


CJK_RANGES = (
    ("㐀", "䶿"),  # extension A
    ("一", "鿿"),  # unified ideographs
    ("豈", "﫿"),  # compatibility ideographs
)
THAI_RANGE = ("฀", "๿")


def _has_cjk(text: str) -> bool:
    return any(lo <= ch <= hi for ch in text for lo, hi in CJK_RANGES)


def _has_thai(text: str) -> bool:
    lo, hi = THAI_RANGE
    return any(lo <= ch <= hi for ch in text)


# first match wins; CJK is checked before Thai
SCRIPT_RULES: Tuple[Tuple[Callable[[str], bool], str], ...] = (
    (_has_cjk, "cn"),
    (_has_thai, "th"),
)


def normalize(code: Any) -> str:
    if not isinstance(code, str):
        return DEFAULT_LANGUAGE
    code = code.strip().lower()
    return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def is_valid(code: Any) -> bool:
    return isinstance(code, str) and code.strip().lower() in SUPPORTED_LANGUAGES


def _script_language(text: str) -> Optional[str]:
    for predicate, lang in SCRIPT_RULES:
        if predicate(text):
            return lang
    return None


def detect(text: Any) -> str:
    if not isinstance(text, str) or not text:
        return DEFAULT_LANGUAGE
    return _script_language(text) or "en"


def resolve(text: Any, hint: Any = None) -> str:
    """Pick the operating language for a message.

    Without a usable hint the text decides. A valid hint is kept unless the
    text is written in Thai or CJK script of a different language; Latin-only
    text carries no script evidence, so it does not override the hint.
    """
    if not is_valid(hint):
        return detect(text)
    hinted = normalize(hint)
    scripted = _script_language(text) if isinstance(text, str) else None
    if scripted and scripted != hinted:
        return scripted
    return hinted


def get_instruction(code: Any) -> str:
    return LANGUAGE_INSTRUCTIONS[normalize(code)]


def get_auto_translation_instruction(code: Any) -> str:
    return AUTO_TRANSLATION_INSTRUCTIONS[normalize(code)]


def get_error_message(kind: str, code: Any) -> str:
    messages = ERROR_MESSAGES.get(kind, ERROR_MESSAGES["chat"])
    return messages[normalize(code)]
