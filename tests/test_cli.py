import json

import pytest

from stylepass.cli import main

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv("STYLEPASS_CONFIG", str(path))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return path

def test_score_command(capsys):
    assert main(["score", "correcthorsebatterystaple"]) == 0
    out = capsys.readouterr().out
    assert "Score: 55 / 100" in out
    assert "moderate" in out
    assert "Excellent password!" in out

def test_generate_offline(capsys):
    assert main(["generate", "mountain sunrise", "--length", "12", "--offline"]) == 0
    out = capsys.readouterr().out
    assert "Password #3" in out

def test_generate_without_key_fails(capsys):
    assert main(["generate", "mountain sunrise"]) == 1
    assert "API key" in capsys.readouterr().out

def test_config_set(isolated_config, capsys):
    assert main(["config", "set", "default_length", "20"]) == 0
    assert json.loads(isolated_config.read_text(encoding="utf-8"))["default_length"] == 20
    assert main(["config", "set", "bogus", "1"]) == 1

def test_generate_rejects_invalid_request(capsys):
    assert main(["generate", "ab", "--length", "4", "--offline"]) == 1
    out = capsys.readouterr().out
    assert "Password #1" not in out
    assert "pattern must be at least 3" in out
    assert "8-32" in out

def test_generate_needs_a_character_class(capsys):
    args = ["generate", "mountain sunrise", "--offline", "--no-upper", "--no-lower", "--no-digits", "--no-special"]
    assert main(args) == 1
    assert "at least one character class" in capsys.readouterr().out
