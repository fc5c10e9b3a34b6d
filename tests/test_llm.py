import json

import pytest
import requests

from stylepass.generator import GenerationError, Requirements
from stylepass.llm import OpenAIGenerator, build_prompt, parse_candidates

REPLY = [
    {"password": "Tid3&Sh0re#Mist", "explanation": "Sea words, digits swapped"},
    {"password": "C0ral!Reef2Wave", "explanation": "Reef imagery"},
    {"password": "Gull$Drift9Salt", "explanation": "Coastal mix"},
]

class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response

def _completion(content):
    return FakeResponse(200, {"choices": [{"message": {"content": content}}]})

REQS = Requirements(uppercase=True, lowercase=True, numbers=True, special=True)

def test_build_prompt_mentions_constraints():
    prompt = build_prompt("beach holiday", 15, Requirements(lowercase=True, numbers=True))
    assert '"beach holiday"' in prompt
    assert "exactly 15 characters" in prompt
    assert "must include lowercase letters, must include digits" in prompt

def test_parse_fenced_reply():
    content = "Here you go:\n```json\n" + json.dumps(REPLY) + "\n```"
    candidates = parse_candidates(content)
    assert [c.password for c in candidates] == [r["password"] for r in REPLY]
    assert candidates[1].explanation == "Reef imagery"

def test_parse_rejects_wrong_count():
    with pytest.raises(GenerationError):
        parse_candidates(json.dumps(REPLY[:2]))

def test_parse_rejects_garbage():
    with pytest.raises(GenerationError):
        parse_candidates("sorry, I cannot help with that")
    with pytest.raises(GenerationError):
        parse_candidates(json.dumps([{"pw": "x"}, {"pw": "y"}, {"pw": "z"}]))

def test_generate_success():
    session = FakeSession(_completion(json.dumps(REPLY)))
    gen = OpenAIGenerator(api_key="sk-test", model="gpt-4o-mini", session=session)
    candidates = gen.generate("seaside", 15, REQS)
    assert len(candidates) == 3
    call = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test"
    assert call["json"]["model"] == "gpt-4o-mini"
    assert call["json"]["messages"][0]["role"] == "system"
    assert "seaside" in call["json"]["messages"][1]["content"]
    assert call["timeout"] == 30

def test_missing_key():
    session = FakeSession(_completion(json.dumps(REPLY)))
    with pytest.raises(GenerationError, match="API key"):
        OpenAIGenerator(api_key=None, session=session).generate("seaside", 15, REQS)
    assert session.calls == []

def test_api_error_message_is_surfaced():
    session = FakeSession(FakeResponse(401, {"error": {"message": "Incorrect API key provided"}}))
    with pytest.raises(GenerationError, match="Incorrect API key provided"):
        OpenAIGenerator(api_key="sk-bad", session=session).generate("seaside", 15, REQS)

def test_api_error_without_body():
    session = FakeSession(FakeResponse(502, ValueError("no json")))
    with pytest.raises(GenerationError, match="OpenAI API call failed"):
        OpenAIGenerator(api_key="sk-test", session=session).generate("seaside", 15, REQS)

def test_transport_failure():
    session = FakeSession(error=requests.ConnectionError("boom"))
    with pytest.raises(GenerationError):
        OpenAIGenerator(api_key="sk-test", session=session).generate("seaside", 15, REQS)

def test_from_settings():
    gen = OpenAIGenerator.from_settings({
        "openai_api_key": "sk-x",
        "openai_model": "gpt-4o",
        "openai_base_url": "http://localhost:8080/v1/",
        "request_timeout": 5,
    })
    assert gen.model == "gpt-4o"
    assert gen.base_url == "http://localhost:8080/v1"
    assert gen.timeout == 5.0
