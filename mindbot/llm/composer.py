from __future__ import annotations
from typing import Any, Dict, List
import logging

from ..core.config import settings
from ..conversation import language, modes
from ..conversation.normalizer import sanitize_input
from ..conversation.pipeline import Proceed
from . import claude_client, openai_client
from .errors import LLMError
from .prompts import (
    IDENTITY, RESEARCH_KNOWLEDGE, METHODOLOGY,
    WORKSHOP_PREMIUM, WORKSHOP_FREE, TOOLKIT_MODE, VENT_MODE,
    VENT_ANALYSIS_SYSTEM, VENT_ANALYSIS, TOOLKIT_SYSTEM, TOOLKIT_REQUEST,
    LINE_KNOWLEDGE, LINE_SYSTEM, LEAD_PITCH, LEAD_PITCH_FALLBACK,
    TRANSLATE_SYSTEM, PSYCHOEDUCATION_SYSTEM,
)

log = logging.getLogger("mindbot.llm")


async def complete(
    system: str,
    messages: List[Dict[str, str]],
    temperature: float = 0.7,
    max_tokens: int = 600,
    json_mode: bool = False,
) -> str:
    turns = [m for m in messages if m.get("content")]
    if not turns:
        raise LLMError("No message content to send")
    if settings.LLM_PROVIDER.lower() == "openai":
        text = await openai_client.chat_completion(
            [{"role": "system", "content": system}, *turns],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"} if json_mode else None,
        )
    else:
        text = await claude_client.messages_completion(
            system, turns, temperature=temperature, max_tokens=max_tokens,
        )
    return text.strip()


def chat_system_prompt(decision: Proceed) -> str:
    return "\n".join([IDENTITY, decision.instructions, RESEARCH_KNOWLEDGE, METHODOLOGY])


async def compose_chat_reply(decision: Proceed) -> str:
    return await complete(
        chat_system_prompt(decision),
        decision.messages,
        temperature=0.8,
        max_tokens=decision.max_tokens,
    )


async def compose_workshop(lang: str, target_group: str, case_type: str, is_premium: bool) -> str:
    template = WORKSHOP_PREMIUM if is_premium else WORKSHOP_FREE
    system = template.format(
        lang_instruction=language.get_instruction(lang),
        target_group=sanitize_input(target_group) or "general",
        case_type=case_type,
    )
    return await complete(
        system,
        [{"role": "user", "content": "Please design the workshop."}],
        temperature=0.7,
        max_tokens=modes.get_max_tokens(is_premium),
    )


async def compose_toolkit_mode(lang: str, case_type: str, messages: List[Dict[str, str]]) -> str:
    system = TOOLKIT_MODE.format(lang_instruction=language.get_instruction(lang), case_type=case_type)
    return await complete(system, messages, temperature=0.7, max_tokens=500)


async def compose_vent_mode(lang: str, messages: List[Dict[str, str]]) -> str:
    system = VENT_MODE.format(lang_instruction=language.get_instruction(lang))
    return await complete(system, messages, temperature=0.6, max_tokens=120)


async def analyze_vent(text: str, lang: str) -> str:
    auto = language.get_auto_translation_instruction(lang)
    prompt = VENT_ANALYSIS.format(
        auto_translation=auto,
        lang_instruction=language.get_instruction(lang),
        text=text,
    )
    return await complete(
        VENT_ANALYSIS_SYSTEM.format(auto_translation=auto),
        [{"role": "user", "content": prompt}],
        temperature=0.2,
        max_tokens=400,
        json_mode=True,
    )


async def build_toolkits(mood: str, user_work: str, lang: str) -> str:
    auto = language.get_auto_translation_instruction(lang)
    prompt = TOOLKIT_REQUEST.format(
        auto_translation=auto,
        lang_instruction=language.get_instruction(lang),
        mood=mood,
        user_work=user_work,
    )
    return await complete(
        TOOLKIT_SYSTEM.format(auto_translation=auto),
        [{"role": "user", "content": prompt}],
        temperature=0.85,
        max_tokens=800,
        json_mode=True,
    )


async def compose_line_reply(text: str, lang: str, case_type: str) -> str:
    system = LINE_SYSTEM.format(
        lang_instruction=language.get_instruction(lang),
        knowledge=LINE_KNOWLEDGE,
        case_instruction=modes.get_case_instruction(case_type),
    )
    return await complete(system, [{"role": "user", "content": text}], temperature=0.8, max_tokens=500)


async def translate_text(text: str, target_lang: str) -> str:
    system = TRANSLATE_SYSTEM.format(auto_translation=language.get_auto_translation_instruction(target_lang))
    return await complete(
        system,
        [{"role": "user", "content": f"Translate the following text:\n\n{sanitize_input(text)}"}],
        temperature=0.3,
        max_tokens=1000,
    )


async def compose_psychoeducation_reply(text: str, lang: str, volume_context: str = "") -> str:
    system = PSYCHOEDUCATION_SYSTEM.format(
        auto_translation=language.get_auto_translation_instruction(lang),
        volume_context=volume_context,
    )
    return await complete(system, [{"role": "user", "content": sanitize_input(text)}], temperature=0.7, max_tokens=500)


async def compose_lead_pitch(lead: Dict[str, Any]) -> str:
    weak = ", ".join(f"{d['name']} ({d['score']}%)" for d in lead.get("weak_domains", [])) or "-"
    fields = {
        "school_name": lead.get("school_name", ""),
        "province": lead.get("province", ""),
        "student_count": lead.get("student_count", 0),
        "total_score": lead.get("total_score", 0),
        "level": lead.get("level", "Unknown"),
        "weak_domains": weak,
    }
    try:
        return await complete(
            "You write short, warm B2B outreach messages for a school mental-health service.",
            [{"role": "user", "content": LEAD_PITCH.format(**fields)}],
            temperature=0.7,
            max_tokens=1000,
        )
    except LLMError as exc:
        log.warning("lead pitch fell back to template: %s", exc)
        return LEAD_PITCH_FALLBACK.format(**fields)
