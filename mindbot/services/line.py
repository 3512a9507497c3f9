"""LINE Messaging API helpers.

The webhook only needs two things from LINE: checking the
``X-Line-Signature`` header and sending reply messages. Both are thin
enough that we talk to the REST API directly with httpx.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import settings

log = logging.getLogger("mindbot.line")

QUICK_REPLIES: Dict[str, List[Dict[str, str]]] = {
    "th": [
        {"label": "😔 เศร้า", "text": "รู้สึกเศร้า"},
        {"label": "😰 กังวล", "text": "รู้สึกกังวล"},
        {"label": "😤 เครียด", "text": "รู้สึกเครียด"},
        {"label": "😢 เหงา", "text": "รู้สึกเหงา"},
    ],
    "en": [
        {"label": "😔 Sad", "text": "I feel sad"},
        {"label": "😰 Anxious", "text": "I feel anxious"},
        {"label": "😤 Stressed", "text": "I feel stressed"},
        {"label": "😢 Lonely", "text": "I feel lonely"},
    ],
    "cn": [
        {"label": "😔 难过", "text": "我感到难过"},
        {"label": "😰 焦虑", "text": "我感到焦虑"},
        {"label": "😤 压力", "text": "我感到压力很大"},
        {"label": "😢 孤独", "text": "我感到孤独"},
    ],
}

WELCOME_QUICK_REPLIES = [
    {"label": "😔 เศร้า", "text": "รู้สึกเศร้า"},
    {"label": "😰 กังวล", "text": "รู้สึกกังวล"},
    {"label": "😤 เครียด", "text": "รู้สึกเครียด"},
    {"label": "🌐 English", "text": "I want to talk in English"},
]

WELCOME_MESSAGE = """สวัสดีค่ะ! 💙 เราคือน้องมายด์

ยินดีที่ได้รู้จักนะคะ เราพร้อมรับฟังทุกความรู้สึกของคุณ ไม่ว่าจะเครียด เศร้า กังวล หรืออะไรก็ตาม

พิมพ์มาคุยกับเราได้เลยค่ะ ทุกอย่างเป็นความลับ 🤫

---
Hello! 💙 I'm MindBot

I'm here to listen. Feel free to share anything with me.

---
你好！💙 我是MindBot

有什么想说的都可以告诉我"""

IMAGE_THANKS = "ขอบคุณสำหรับรูปภาพค่ะ 💙\n\nหากต้องการคุยเรื่องความรู้สึก พิมพ์มาได้เลยนะคะ"


class LineConfigError(RuntimeError):
    pass


def validate_config() -> None:
    if not settings.LINE_CHANNEL_ACCESS_TOKEN:
        raise LineConfigError("LINE_CHANNEL_ACCESS_TOKEN is not configured")
    if not settings.LINE_CHANNEL_SECRET:
        raise LineConfigError("LINE_CHANNEL_SECRET is not configured")


def compute_signature(body: bytes, channel_secret: str) -> str:
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def validate_signature(body: bytes, signature: Optional[str], channel_secret: str) -> bool:
    if not signature or not channel_secret:
        return False
    return hmac.compare_digest(compute_signature(body, channel_secret), signature)


def quick_reply(items: List[Dict[str, str]]) -> Dict[str, Any]:
    return {
        "items": [
            {"type": "action", "action": {"type": "message", "label": i["label"], "text": i.get("text") or i["label"]}}
            for i in items
        ]
    }


def quick_replies_for(lang: str) -> List[Dict[str, str]]:
    return QUICK_REPLIES.get(lang, QUICK_REPLIES["th"])


def text_message(text: str, quick: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    msg: Dict[str, Any] = {"type": "text", "text": text[:5000]}
    if quick:
        msg["quickReply"] = quick_reply(quick)
    return msg


class LineMessenger:
    """Reply sink for webhook events."""

    def __init__(self, access_token: str | None = None, base_url: str | None = None):
        self.access_token = access_token or settings.LINE_CHANNEL_ACCESS_TOKEN
        self.base_url = (base_url or settings.LINE_API_BASE_URL).rstrip("/")

    async def reply(self, reply_token: str, message: Dict[str, Any]) -> None:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        payload = {"replyToken": reply_token, "messages": [message]}
        async with httpx.AsyncClient(timeout=10) as client:
            r = await client.post(f"{self.base_url}/message/reply", headers=headers, json=payload)
            r.raise_for_status()
