import json

import pytest

from stylepass.config import DEFAULTS, coerce_value, config_path, load_config, save_config

@pytest.fixture
def cfg_file(tmp_path, monkeypatch):
    path = tmp_path / "settings" / "config.json"
    monkeypatch.setenv("STYLEPASS_CONFIG", str(path))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("RATE_LIMIT_PER_HOUR", raising=False)
    return path

def test_defaults_when_missing(cfg_file):
    cfg = load_config()
    assert config_path() == str(cfg_file)
    for key, value in DEFAULTS.items():
        assert cfg[key] == value
    assert cfg["openai_api_key"] is None

def test_save_and_load(cfg_file, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-secret")
    cfg = load_config()
    cfg["openai_model"] = "gpt-4o"
    save_config(cfg)
    on_disk = json.loads(cfg_file.read_text(encoding="utf-8"))
    assert on_disk["openai_model"] == "gpt-4o"
    assert "openai_api_key" not in on_disk
    assert load_config()["openai_model"] == "gpt-4o"

def test_malformed_file_falls_back(cfg_file):
    cfg_file.parent.mkdir(parents=True)
    cfg_file.write_text("{not json", encoding="utf-8")
    assert load_config()["rate_limit_per_hour"] == 20

def test_env_overrides(cfg_file, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_PER_HOUR", "5")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    cfg = load_config()
    assert cfg["rate_limit_per_hour"] == 5
    assert cfg["openai_api_key"] == "sk-env"
    monkeypatch.setenv("RATE_LIMIT_PER_HOUR", "lots")
    assert load_config()["rate_limit_per_hour"] == 20

def test_coerce_value():
    assert coerce_value("rate_limit_per_hour", "7") == 7
    assert coerce_value("temperature", "0.5") == 0.5
    assert coerce_value("openai_model", "gpt-4o") == "gpt-4o"
    with pytest.raises(KeyError):
        coerce_value("nope", "1")
    with pytest.raises(ValueError):
        coerce_value("max_tokens", "many")
