import pytest

from config import DEFAULT_SCORE_FORMULA, EnvironmentConfig

REPORT_VARS = [
    "REPORT_OUTPUT_DIR",
    "REPORT_SETTLE_DELAY",
    "REPORT_RATE_LIMIT_DELAY",
    "DASHBOARD_SCORE_FORMULA",
    "EXPORT_TIMEOUT",
    "SETTINGS_FILE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in REPORT_VARS + ["GOOGLE_CLIENT_SECRETS_FILE", "GOOGLE_TOKEN_FILE"]:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvironmentConfig:
    def test_report_defaults(self, clean_env):
        report = EnvironmentConfig.load_report_settings()
        assert report.output_dir == "reports"
        assert report.settle_delay == 1.0
        assert report.rate_limit_delay == 2.0
        assert report.score_formula == DEFAULT_SCORE_FORMULA
        assert report.settings_file == "settings.json"

    def test_invalid_numbers_fall_back(self, clean_env):
        clean_env.setenv("REPORT_SETTLE_DELAY", "soon")
        clean_env.setenv("REPORT_RATE_LIMIT_DELAY", "-4")
        report = EnvironmentConfig.load_report_settings()
        assert report.settle_delay == 1.0
        assert report.rate_limit_delay == 0.0

    def test_credentials_required(self, clean_env):
        with pytest.raises(ValueError, match="GOOGLE_CLIENT_SECRETS_FILE"):
            EnvironmentConfig.load_credentials()

    def test_credentials(self, clean_env):
        clean_env.setenv("GOOGLE_CLIENT_SECRETS_FILE", "secret.json")
        creds = EnvironmentConfig.load_credentials()
        assert creds.client_secrets_file == "secret.json"
        assert creds.token_file == "token.json"
