"""Tests für den KI-Assistenten: Modell-Auswahl, Antwort-Parsing, Fallback auf None.

Alle HTTP-Aufrufe laufen über httpx.MockTransport, es wird nichts ins Netz geschickt.
"""

import json
from datetime import datetime

import httpx
import pytest

from assist.client import GeminiClient, extract_json
from assist.intents import IntentService
from config.schema import AssistConfig
from models.weekday import Weekday
from scheduling.errors import IntentUnavailable

_GENERATE = ["generateContent"]


def _model(name: str, methods=None) -> dict:
    return {"name": f"models/{name}", "supportedGenerationMethods": methods or _GENERATE}


def _reply(payload) -> dict:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGemini:
    """Minimaler Ersatz der API: liefert Modell-Liste und eine feste Antwort."""

    def __init__(self, models=None, reply=None, list_status: int = 200) -> None:
        self.models = models if models is not None else [_model("gemini-2.5-flash")]
        self.reply = reply if reply is not None else _reply({})
        self.list_status = list_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            return httpx.Response(self.list_status, json={"models": self.models})
        return httpx.Response(200, json=self.reply)

    @property
    def list_calls(self) -> int:
        return sum(1 for r in self.requests if r.method == "GET")

    def prompt(self, index: int = -1) -> str:
        posts = [r for r in self.requests if r.method == "POST"]
        body = json.loads(posts[index].content)
        return body["contents"][0]["parts"][0]["text"]


def _client(fake, api_key: str = "test-key") -> GeminiClient:
    http = httpx.Client(transport=httpx.MockTransport(fake))
    return GeminiClient(api_key, AssistConfig(), http=http)


# ─── JSON AUS TEXT ────────────────────────────────────────────────────────────

class TestExtractJson:
    def test_plain(self):
        assert extract_json('{"day": "Monday"}') == {"day": "Monday"}

    def test_fenced_block(self):
        text = 'Hier ist das Ergebnis:\n```json\n{"day": "Friday", "timeStart": 13}\n```'
        assert extract_json(text) == {"day": "Friday", "timeStart": 13}

    def test_no_object(self):
        assert extract_json("keine Ahnung") is None
        assert extract_json("[1, 2, 3]") is None
        assert extract_json("") is None


# ─── MODELL-AUSWAHL ───────────────────────────────────────────────────────────

class TestModelSelection:
    def test_preferred_order_wins(self):
        fake = FakeGemini(models=[
            _model("gemini-1.5-flash"),
            _model("gemini-pro"),
            _model("gemini-2.5-flash"),
        ])
        assert _client(fake).resolve_model() == "gemini-2.5-flash"

    def test_any_flash_model(self):
        fake = FakeGemini(models=[_model("gemini-pro"), _model("experimental-flash-x")])
        assert _client(fake).resolve_model() == "experimental-flash-x"

    def test_first_available(self):
        fake = FakeGemini(models=[
            _model("embedding-001", methods=["embedContent"]),
            _model("gemini-pro"),
        ])
        assert _client(fake).resolve_model() == "gemini-pro"

    def test_fallback_without_usable_models(self):
        fake = FakeGemini(models=[_model("embedding-001", methods=["embedContent"])])
        client = _client(fake)
        assert client.resolve_model() == "gemini-2.0-flash"
        assert client.active_model is None

    def test_fallback_when_list_fails(self):
        client = _client(FakeGemini(list_status=500))
        assert client.resolve_model() == "gemini-2.0-flash"

    def test_selection_cached_per_client(self):
        fake = FakeGemini(reply=_reply({"day": "Monday"}))
        client = _client(fake)
        client.generate_json("eins")
        client.generate_json("zwei")
        assert fake.list_calls == 1
        assert client.active_model == "gemini-2.5-flash"
        assert fake.requests[-1].url.path.endswith("/models/gemini-2.5-flash:generateContent")

    def test_clients_do_not_share_selection(self):
        first = _client(FakeGemini(models=[_model("gemini-2.5-flash")]))
        second = _client(FakeGemini(models=[_model("gemini-2.0-flash")]))
        assert first.resolve_model() == "gemini-2.5-flash"
        assert second.resolve_model() == "gemini-2.0-flash"
        assert first.active_model != second.active_model


# ─── ANFRAGEN ─────────────────────────────────────────────────────────────────

class TestGenerateJson:
    def test_key_sent_as_query_param(self):
        fake = FakeGemini(reply=_reply({"ok": True}))
        assert _client(fake).generate_json("hallo") == {"ok": True}
        assert all(r.url.params["key"] == "test-key" for r in fake.requests)
        assert fake.prompt() == "hallo"

    def test_missing_key(self):
        fake = FakeGemini()
        with pytest.raises(IntentUnavailable):
            _client(fake, api_key=None).generate_json("hallo")
        assert fake.requests == []

    def test_api_error_payload(self):
        fake = FakeGemini(reply={"error": {"message": "quota exceeded"}})
        with pytest.raises(IntentUnavailable, match="quota exceeded"):
            _client(fake).generate_json("hallo")

    def test_no_candidates(self):
        with pytest.raises(IntentUnavailable):
            _client(FakeGemini(reply={"candidates": []})).generate_json("hallo")

    def test_text_without_json(self):
        with pytest.raises(IntentUnavailable):
            _client(FakeGemini(reply=_reply("Das weiß ich nicht."))).generate_json("hallo")

    def test_network_error(self):
        def broken(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("keine Verbindung", request=request)

        with pytest.raises(IntentUnavailable):
            _client(broken).generate_json("hallo")


# ─── INTENT-SERVICE ───────────────────────────────────────────────────────────

def _service(fake) -> IntentService:
    return IntentService(_client(fake), clock=lambda: datetime(2024, 1, 1, 9, 0))


class TestIntentService:
    def test_translate_search(self):
        fake = FakeGemini(reply=_reply({
            "day": "Tuesday", "filterType": "Computer Lab", "searchKeyword": None,
            "timeStart": 13, "timeEnd": 14, "targetStatus": "Available",
            "minCapacity": 30, "equipment": ["Projector"],
        }))
        intent = _service(fake).translate_search("freies Computer-Labor morgen um 1")
        assert intent.day == Weekday.TUESDAY
        assert intent.filter_type == "Computer Lab"
        assert intent.search_keyword is None
        assert (intent.time_start, intent.time_end) == (13, 14)
        assert intent.min_capacity == 30
        assert intent.equipment == ["Projector"]
        assert "Today is Monday" in fake.prompt()

    def test_search_unknown_day_dropped(self):
        fake = FakeGemini(reply=_reply({"day": "next week", "searchKeyword": "CL5"}))
        intent = _service(fake).translate_search("CL5 next week")
        assert intent.day is None
        assert intent.search_keyword == "CL5"

    def test_blank_text_makes_no_request(self):
        fake = FakeGemini()
        service = _service(fake)
        assert service.translate_search("   ") is None
        assert service.translate_booking("") is None
        assert service.analyze_issue("") is None
        assert fake.requests == []

    def test_failure_becomes_none(self):
        fake = FakeGemini(reply={"error": {"message": "boom"}})
        assert _service(fake).translate_search("irgendwas") is None

    def test_translate_booking(self):
        fake = FakeGemini(reply=_reply({
            "subject": "Math 101", "roomName": "CL5", "day": "Monday",
            "startTime": "9:00 AM", "endTime": "10:00 AM", "professor": "Dr. Smith",
        }))
        intent = _service(fake).translate_booking("Math 101 in CL5 Montag 9-10")
        assert intent.room_name == "CL5"
        assert intent.start_time == "9:00 AM"
        assert intent.capacity is None

    def test_analyze_issue(self):
        fake = FakeGemini(reply=_reply({
            "category": "electrical", "urgency": "High",
            "summary": "Steckdosen ohne Strom", "suggestedAction": "Haustechnik rufen",
        }))
        analysis = _service(fake).analyze_issue("Im CL5 gehen die Steckdosen nicht")
        assert analysis.category == "Electrical"
        assert analysis.urgency == "High"
        assert analysis.suggested_action == "Haustechnik rufen"

    def test_issue_unknown_category_is_other(self):
        fake = FakeGemini(reply=_reply({
            "category": "Pest Control", "urgency": "Low",
            "summary": "Maus gesehen", "suggestedAction": "Beobachten",
        }))
        assert _service(fake).analyze_issue("Maus im Hörsaal").category == "Other"

    def test_issue_invalid_urgency_is_none(self):
        fake = FakeGemini(reply=_reply({
            "category": "HVAC", "urgency": "Whenever",
            "summary": "Zu warm", "suggestedAction": "Lüften",
        }))
        assert _service(fake).analyze_issue("Zu warm") is None
