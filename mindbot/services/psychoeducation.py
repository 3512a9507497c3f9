"""Psychoeducation comic catalogue.

Titles and descriptions exist in Thai and English; other languages fall
back to Thai.
"""
from typing import Any, Dict, List, Optional

COMICS: Dict[str, Dict[str, Any]] = {
    "vol1": {
        "file": "MindFitness-Comic-Vol1-v26.html",
        "title": {"th": "ทำไมฟ้าไม่เหมือนเดิม?", "en": "Why Isn't the Sky the Same?"},
        "description": {
            "th": "เรียนรู้เกี่ยวกับภาวะซึมเศร้าในเด็กและวัยรุ่น",
            "en": "Learn about depression in children and teenagers",
        },
        "topics": ["depression", "children", "awareness"],
    },
    "vol2": {
        "file": "MindFitness-Comic-Vol2-v2.html",
        "title": {"th": "สัญญาณที่ควรสังเกต", "en": "Signs to Watch For"},
        "description": {"th": "เรียนรู้สัญญาณเตือนของภาวะซึมเศร้า", "en": "Learn warning signs of depression"},
        "topics": ["symptoms", "warning-signs", "observation"],
    },
    "vol3": {
        "file": "MindFitness-Comic-Vol3.html",
        "title": {"th": "การรับมือและการช่วยเหลือ", "en": "Coping and Support"},
        "description": {
            "th": "วิธีรับมือและช่วยเหลือผู้ที่มีภาวะซึมเศร้า",
            "en": "How to cope and help those with depression",
        },
        "topics": ["coping", "support", "help"],
    },
    "vol4": {
        "file": "MindFitness-Comic-Vol4.html",
        "title": {"th": "การพูดคุยอย่างเข้าใจ", "en": "Understanding Conversations"},
        "description": {
            "th": "เทคนิคการพูดคุยกับผู้ที่มีภาวะซึมเศร้า",
            "en": "Techniques for talking with those who have depression",
        },
        "topics": ["communication", "empathy", "listening"],
    },
    "vol5": {
        "file": "MindFitness-Comic-Vol5.html",
        "title": {"th": "การดูแลตัวเอง", "en": "Self-Care"},
        "description": {"th": "วิธีดูแลสุขภาพจิตของตัวเอง", "en": "How to take care of your own mental health"},
        "topics": ["self-care", "wellness", "prevention"],
    },
    "vol6": {
        "file": "MindFitness-Comic-Vol6-FINALE.html",
        "title": {"th": "ก้าวต่อไปด้วยกัน", "en": "Moving Forward Together"},
        "description": {"th": "การฟื้นฟูและก้าวต่อไปอย่างมีความหวัง", "en": "Recovery and moving forward with hope"},
        "topics": ["recovery", "hope", "future"],
    },
}

COMICS_URL = "/public/comics/{file}"


def comic_out(volume_id: str, lang: str) -> Dict[str, Any]:
    comic = COMICS[volume_id]
    return {
        "id": volume_id,
        "title": comic["title"].get(lang) or comic["title"]["th"],
        "description": comic["description"].get(lang) or comic["description"]["th"],
        "topics": list(comic["topics"]),
        "url": COMICS_URL.format(file=comic["file"]),
    }


def list_comics(lang: str) -> List[Dict[str, Any]]:
    return [comic_out(vid, lang) for vid in COMICS]


def volume_context(volume_id: Optional[str]) -> str:
    comic = COMICS.get(volume_id or "")
    if comic is None:
        return ""
    return f'The user is reading: "{comic["title"]["th"]}" - {comic["description"]["th"]}'
