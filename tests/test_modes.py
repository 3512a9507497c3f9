import pytest
from mindbot.conversation import modes

def test_max_tokens_premium_exceeds_free():
    assert modes.get_max_tokens(True) > modes.get_max_tokens(False)
    assert modes.get_max_tokens(False) == 600

@pytest.mark.parametrize("value", [None, "", "unknown", 7, {"x": 1}, "GENERAL"])
def test_case_instruction_never_empty(value):
    assert modes.get_case_instruction(value) == modes.CASE_INSTRUCTIONS["general"]

def test_case_instruction_case_insensitive():
    assert modes.get_case_instruction("Anxiety") == modes.CASE_INSTRUCTIONS["anxiety"]

def test_mode_instructions():
    assert "PREMIUM" in modes.get_mode_instruction(True)
    assert "FREE" in modes.get_mode_instruction(False)
    mode = modes.get_mode(1)
    assert mode.is_premium is True
    assert mode.max_tokens == modes.PREMIUM_MAX_TOKENS

@pytest.mark.parametrize("text,expected", [
    ("I feel anxious about my exam", "anxiety"),
    ("ช่วงนี้กังวลมาก", "anxiety"),
    ("work is so stressful", "stress"),
    ("我很难过", "sadness"),
    ("I'm so angry at my boss", "anger"),
    ("รู้สึกเหงา", "loneliness"),
    ("my grandma passed away", "grief"),
    ("I feel worthless", "shame"),
    ("my girlfriend and I broke up", "relationship"),
    ("totally burned out", "burnout"),
    ("what a nice day", "general"),
    ("", "general"),
    (None, "general"),
])
def test_detect_case_type(text, expected):
    assert modes.detect_case_type(text) == expected

def test_detect_case_type_first_match_wins():
    # burnout is evaluated before stress
    assert modes.detect_case_type("stressed and burnt out") == "burnout"
    # anxiety is evaluated before sadness
    assert modes.detect_case_type("sad and anxious") == "anxiety"

def test_english_terms_are_word_anchored():
    assert modes.detect_case_type("the sadhu visited") == "general"

def test_resolve_case_type():
    assert modes.resolve_case_type("grief", "I feel anxious") == "grief"
    assert modes.resolve_case_type("general", "I feel anxious") == "anxiety"
    assert modes.resolve_case_type("bogus", "hello") == "general"

def test_keyword_helpers():
    assert modes.is_workshop_request("Can you design a training for teachers?")
    assert not modes.is_workshop_request(None)
    assert modes.is_payment_request("I want to BUY premium")
    assert not modes.is_payment_request("hello")
    assert modes.has_premium_indicator("โอนแล้วค่ะ")
    assert not modes.has_premium_indicator(123)

def test_upgrade_signal():
    assert modes.upgrade_signal("how do I pay for premium?", False) == "payment"
    assert modes.upgrade_signal("โอนแล้วนะคะ", False) == "claimed"
    assert modes.upgrade_signal("how do I pay for premium?", True) is None
    assert modes.upgrade_signal("hello", False) is None
    assert "general" in modes.CASE_TYPES
