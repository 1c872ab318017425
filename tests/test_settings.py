# tests/test_settings.py

from astrobio_navigator.config.settings import Settings, get_settings


def test_get_settings_is_a_singleton():
    assert get_settings() is get_settings()


def test_analysis_limit_defaults():
    settings = Settings()

    assert settings.RELATED_PAPERS_LIMIT == 10
    assert settings.CITATION_CANDIDATE_LIMIT == 5
    assert settings.MAX_UPLOAD_BYTES == 50 * 1024 * 1024
    assert settings.CATALOG_CSV_PATH is None


def test_env_prefix_override(monkeypatch, tmp_path):
    monkeypatch.setenv("ASTROBIO_CITATION_CANDIDATE_LIMIT", "3")
    monkeypatch.setenv("ASTROBIO_CATALOG_CSV_PATH", str(tmp_path / "papers.csv"))

    settings = Settings()
    assert settings.CITATION_CANDIDATE_LIMIT == 3
    assert settings.CATALOG_CSV_PATH == tmp_path / "papers.csv"


def test_gemini_key_prefers_prefixed_setting(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "plain-key")
    monkeypatch.delenv("ASTROBIO_GEMINI_API_KEY", raising=False)
    assert Settings().gemini_api_key == "plain-key"

    monkeypatch.setenv("ASTROBIO_GEMINI_API_KEY", "prefixed-key")
    assert Settings().gemini_api_key == "prefixed-key"
