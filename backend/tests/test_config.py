import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_defaults():
    settings = Settings(database_url="sqlite://")

    assert settings.preference_like_weight == 1.0
    assert settings.preference_dislike_weight == -1.0
    assert settings.preference_vector_weight == 0.7
    assert settings.default_user_id == "default"


def test_supabase_urls_require_ssl():
    settings = Settings(database_url="postgresql://u:p@db.abc.supabase.co:5432/postgres")

    assert settings.database_url.endswith("?sslmode=require")


def test_weights_read_from_env(monkeypatch):
    monkeypatch.setenv("PREFERENCE_VECTOR_WEIGHT", "0.25")
    monkeypatch.setenv("PREFERENCE_DISLIKE_WEIGHT", "-2")

    settings = Settings(database_url="sqlite://")

    assert settings.preference_vector_weight == 0.25
    assert settings.preference_dislike_weight == -2.0


def test_vector_weight_out_of_range_rejected():
    with pytest.raises(ValidationError):
        Settings(database_url="sqlite://", preference_vector_weight=1.2)


def test_cors_origins_list():
    assert Settings(database_url="sqlite://", cors_origins="*").cors_origins_list() == ["*"]
    assert Settings(database_url="sqlite://", cors_origins="https://a.com, https://b.com").cors_origins_list() == [
        "https://a.com",
        "https://b.com",
    ]
