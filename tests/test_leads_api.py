import json
from mindbot.core.db import SessionLocal
from mindbot.models import Lead
from mindbot.llm.errors import LLMError

SCORES = {
    "totalPercentage": 55,
    "overallLevel": {"level": "Developing"},
    "domainScores": {
        "policy": {"id": "policy", "nameTH": "นโยบาย", "percentage": 80},
        "screening": {"id": "screening", "nameTH": "การคัดกรอง", "percentage": 30},
        "referral": {"id": "referral", "nameTH": "การส่งต่อ", "percentage": 49.5},
    },
}

def test_capture_lead_with_ai_pitch(client, monkeypatch):
    seen = {}

    async def fake_pitch(lead):
        seen.update(lead)
        return "pitch!"

    monkeypatch.setattr("mindbot.llm.composer.compose_lead_pitch", fake_pitch)
    r = client.post("/api/leads", json={
        "schoolInfo": {"schoolName": "โรงเรียนสาธิต", "province": "เชียงใหม่", "studentCount": 800},
        "scores": SCORES,
        "contactInfo": {"email": "head@school.ac.th"},
    })
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["pitchMessage"] == "pitch!"
    weak = body["assessment"]["weakDomains"]
    assert [d["id"] for d in weak] == ["screening", "referral"]
    assert seen["level"] == "Developing"

    with SessionLocal() as db:
        lead = db.query(Lead).filter(Lead.id == body["leadId"]).one()
        assert lead.school_name == "โรงเรียนสาธิต"
        assert len(json.loads(lead.weak_domains_json)) == 2
        assert json.loads(lead.contact_json)["email"] == "head@school.ac.th"

def test_capture_lead_falls_back_to_template(client, monkeypatch):
    async def down(*args, **kwargs):
        raise LLMError("down")

    monkeypatch.setattr("mindbot.llm.composer.complete", down)
    r = client.post("/api/leads", json={"schoolInfo": {"schoolName": "รร.ทดสอบ"}, "scores": SCORES})
    assert r.status_code == 200
    assert "รร.ทดสอบ" in r.json()["pitchMessage"]
    assert "การคัดกรอง (30.0%)" in r.json()["pitchMessage"]

def test_capture_lead_requires_school_and_scores(client):
    assert client.post("/api/leads", json={"scores": SCORES}).status_code == 422
    assert client.post("/api/leads", json={"schoolInfo": {"schoolName": ""}, "scores": SCORES}).status_code == 422
