from config import Settings


def test_defaults(monkeypatch) -> None:
    for var in ("TIMEZONE", "RANKING_CACHE_TTL_SECONDS", "SINGLE_FLIGHT", "STRICT_UPSTREAM_SCHEMA"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings()

    assert settings.timezone == "Asia/Shanghai"
    assert settings.ranking_cache_ttl_seconds == 3600
    assert settings.single_flight is True
    assert settings.strict_upstream_schema is False
    assert settings.validate() == []


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("STRICT_UPSTREAM_SCHEMA", "true")
    monkeypatch.setenv("SINGLE_FLIGHT", "0")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = Settings()

    assert settings.strict_upstream_schema is True
    assert settings.single_flight is False
    assert settings.is_production


def test_validate_reports_problems(monkeypatch) -> None:
    monkeypatch.setenv("TIMEZONE", "Mars/Olympus_Mons")
    monkeypatch.setenv("RANKING_CACHE_TTL_SECONDS", "0")

    problems = Settings().validate()

    assert len(problems) == 2
    assert "TIMEZONE" in problems[0]
