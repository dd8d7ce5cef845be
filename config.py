from dataclasses import dataclass
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SCORE_FORMULA = "=AVERAGE(C2:C10)"


@dataclass(frozen=True)
class GoogleCredentials:
    client_secrets_file: str
    token_file: str


@dataclass(frozen=True)
class ReportSettings:
    output_dir: str
    settle_delay: float
    rate_limit_delay: float
    score_formula: str
    export_timeout: float
    settings_file: str


def _read_float_env(name: str, default: float, *, min_value: Optional[float] = None) -> float:
    try:
        v = float(os.getenv(name, str(default)))
    except ValueError:
        v = default
    if min_value is not None:
        v = max(min_value, v)
    return v


class EnvironmentConfig:
    """Loads and validates required environment configuration."""
    @staticmethod
    def load_credentials() -> GoogleCredentials:
        client_secrets = os.getenv("GOOGLE_CLIENT_SECRETS_FILE")
        if not client_secrets:
            raise ValueError("GOOGLE_CLIENT_SECRETS_FILE must be set in the environment variables.")

        return GoogleCredentials(
            client_secrets_file=client_secrets,
            token_file=os.getenv("GOOGLE_TOKEN_FILE", "token.json"),
        )

    @staticmethod
    def load_report_settings() -> ReportSettings:
        return ReportSettings(
            output_dir=os.getenv("REPORT_OUTPUT_DIR", "reports"),
            settle_delay=_read_float_env("REPORT_SETTLE_DELAY", 1.0, min_value=0.0),
            rate_limit_delay=_read_float_env("REPORT_RATE_LIMIT_DELAY", 2.0, min_value=0.0),
            score_formula=os.getenv("DASHBOARD_SCORE_FORMULA") or DEFAULT_SCORE_FORMULA,
            export_timeout=_read_float_env("EXPORT_TIMEOUT", 60.0, min_value=1.0),
            settings_file=os.getenv("SETTINGS_FILE", "settings.json"),
        )
