import pytest
from mindbot.conversation import crisis

def _langs():
    return [lang for lang, _ in crisis.CRISIS_PATTERNS]

def test_each_language_has_at_least_two_patterns():
    for lang in ("th", "en", "cn"):
        assert _langs().count(lang) >= 2

def test_resources_include_hotline_and_samaritans():
    infos = {r.info: r.name for r in crisis.CRISIS_RESOURCES}
    assert infos["1323"] == "Thailand Hotline"
    assert infos["02-713-6793"] == "Samaritans Thailand"

@pytest.mark.parametrize("text", [
    "ฉันอยากฆ่าตัวตาย",
    "ฉันอยากตาย",
    "ไม่อยากอยู่แล้ว",
    "ไม่อยากมีชีวิตอยู่",
    "อยากทำร้ายตัวเอง",
    "I'm thinking about suicide",
    "I feel suicidal tonight",
    "I want to KILL MYSELF",
    "I want to end my life",
    "sometimes I hurt myself",
    "I just want to die",
    "self-harm again",
    "selfharm",
    "我想自杀",
    "真的想死",
    "我不想活了",
    "我又自残了",
])
def test_detects_crisis_vocabulary(text):
    assert crisis.detect(text) is True

def test_detects_inside_mixed_language_sentence():
    assert crisis.detect("today work was bad และอยากตาย จริงๆ") is True
    assert crisis.detect("老板很烦 and honestly I want to die") is True

@pytest.mark.parametrize("text", [
    "I feel a bit sad today",
    "วันนี้เครียดเรื่องงาน",
    "我很难过",
    "the movie had a great ending",
])
def test_no_crisis_for_ordinary_text(text):
    assert crisis.detect(text) is False

@pytest.mark.parametrize("value", [None, 42, 3.5, {"text": "suicide"}, ["suicide"], "", "   "])
def test_detect_is_total(value):
    assert crisis.detect(value) is False

def test_create_response_is_fixed_payload():
    body = crisis.create_response().to_dict()
    assert body["crisis"] is True
    assert body["message"] == "CRISIS_DETECTED"
    assert body["resources"]
    assert all(r["info"] for r in body["resources"])

def test_handle_check():
    assert crisis.handle_check("  I want to die  ").message == crisis.CRISIS_DETECTED
    assert crisis.handle_check("hello") is None
    assert crisis.handle_check(None) is None
    assert crisis.handle_check(123) is None

def test_matched_languages():
    assert crisis.matched_languages("suicide 自杀") == ["cn", "en"]
    assert crisis.matched_languages(None) == []

def test_localized_messages():
    assert "1323" in crisis.get_crisis_message("th")
    assert "worried about you" in crisis.get_crisis_message("EN")
    assert "担心" in crisis.get_crisis_message("cn")
    # unknown codes fall back to Thai
    assert crisis.get_crisis_message("fr") == crisis.CRISIS_MESSAGES["th"]

def test_localized_response_keeps_resources():
    resp = crisis.create_localized_response("en")
    assert resp.crisis is True
    assert resp.message == crisis.CRISIS_MESSAGES["en"]
    assert resp.resources == crisis.CRISIS_RESOURCES
