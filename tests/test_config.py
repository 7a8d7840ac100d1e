from healthsync.core.config import Settings


def test_settings_read_documented_environment_names(monkeypatch):
    monkeypatch.setenv('SQL_DATABASE_URL', 'sqlite:///./other.db')
    monkeypatch.setenv('DATABASE_URL', 'postgresql://ignored/db')
    monkeypatch.setenv('DASHBOARD_HISTORY_LIMIT', '3')
    monkeypatch.setenv('REQUIRE_PAIRING_FOR_MESSAGES', 'true')

    settings = Settings()
    assert settings.DATABASE_URL == 'sqlite:///./other.db'
    assert settings.DASHBOARD_HISTORY_LIMIT == 3
    assert settings.REQUIRE_PAIRING_FOR_MESSAGES is True


def test_prefixed_names_are_not_read(monkeypatch):
    monkeypatch.delenv('CHECKUP_TERMINAL_TRANSITION', raising=False)
    monkeypatch.setenv('HEALTHSYNC_CHECKUP_TERMINAL_TRANSITION', 'ignore')
    assert Settings().CHECKUP_TERMINAL_TRANSITION == 'reject'
