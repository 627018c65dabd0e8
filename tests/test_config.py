"""
Test configuration management
"""
from ticketdesk.config import Settings, get_settings


def test_settings_singleton():
    """Test settings returns same instance"""
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2


def test_settings_defaults():
    """Test default values"""
    settings = Settings(_env_file=None)
    assert settings.fastapi_port == 8000
    assert settings.agent_temperature == 0.0
    assert settings.summary_temperature == 0.7
    assert settings.summary_max_tokens == 250
    assert settings.match_threshold == 0.7
    assert settings.match_count == 5
    assert settings.embedding_model == "text-embedding-ada-002"


def test_env_override(monkeypatch):
    monkeypatch.setenv("MATCH_COUNT", "3")
    monkeypatch.setenv("CHAT_MODEL", "gpt-4o")
    settings = Settings(_env_file=None)
    assert settings.match_count == 3
    assert settings.chat_model == "gpt-4o"


def test_service_role_key_preferred():
    settings = Settings(_env_file=None, supabase_key="anon", supabase_service_role_key="service")
    assert settings.SUPABASE_KEY == "service"


def test_anon_key_fallback():
    settings = Settings(_env_file=None, supabase_key="anon", supabase_service_role_key="")
    assert settings.SUPABASE_KEY == "anon"
