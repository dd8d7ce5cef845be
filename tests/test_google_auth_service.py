import pytest
from google.auth.exceptions import RefreshError

from config import GoogleCredentials
from errors import AuthError
from service import google_auth_service
from service.google_auth_service import DemoAuthService, GoogleAuthService


class FakeCreds:
    valid = True
    token = "tok"

    def to_json(self):
        return '{"token": "tok"}'


class ExpiredCreds:
    """Cached credentials whose access token has expired but can be refreshed."""
    def __init__(self, refresh_error=None):
        self.valid = False
        self.expired = True
        self.refresh_token = "refresh-tok"
        self.token = "stale"
        self.refresh_error = refresh_error
        self.refreshed = 0

    def refresh(self, request):
        self.refreshed += 1
        if self.refresh_error is not None:
            raise self.refresh_error
        self.valid = True
        self.expired = False
        self.token = "fresh"

    def to_json(self):
        return '{"token": "%s"}' % self.token


class FakeFlow:
    def run_local_server(self, port=0):
        return FakeCreds()


@pytest.fixture
def creds(tmp_path):
    return GoogleCredentials(
        client_secrets_file=str(tmp_path / "client_secret.json"),
        token_file=str(tmp_path / "token.json"),
    )


class TestGoogleAuthService:
    def test_no_cached_token(self, creds):
        auth = GoogleAuthService(creds)
        auth.initialize()
        assert auth.is_signed_in() is False

    def test_corrupt_token(self, creds, tmp_path):
        (tmp_path / "token.json").write_text("not json", encoding="utf-8")
        with pytest.raises(AuthError):
            GoogleAuthService(creds).initialize()

    def test_sign_in_without_client_secrets(self, creds):
        with pytest.raises(AuthError, match="client secrets"):
            GoogleAuthService(creds).sign_in()

    def test_sign_in_caches_token(self, creds, tmp_path, monkeypatch):
        (tmp_path / "client_secret.json").write_text("{}", encoding="utf-8")
        monkeypatch.setattr(
            google_auth_service.InstalledAppFlow,
            "from_client_secrets_file",
            classmethod(lambda cls, path, scopes: FakeFlow()),
        )
        auth = GoogleAuthService(creds)
        auth.sign_in()

        assert auth.is_signed_in() is True
        assert auth.access_token() == "tok"
        assert (tmp_path / "token.json").read_text(encoding="utf-8") == '{"token": "tok"}'

    def _cached(self, monkeypatch, tmp_path, cached):
        (tmp_path / "token.json").write_text('{"token": "stale"}', encoding="utf-8")
        monkeypatch.setattr(
            google_auth_service.Credentials,
            "from_authorized_user_file",
            classmethod(lambda cls, path, scopes: cached),
        )

    def test_expired_token_is_refreshed_and_saved(self, creds, tmp_path, monkeypatch):
        cached = ExpiredCreds()
        self._cached(monkeypatch, tmp_path, cached)
        auth = GoogleAuthService(creds)
        auth.initialize()

        assert cached.refreshed == 1
        assert auth.is_signed_in() is True
        assert auth.access_token() == "fresh"
        assert (tmp_path / "token.json").read_text(encoding="utf-8") == '{"token": "fresh"}'

    def test_refresh_failure_raises_auth_error(self, creds, tmp_path, monkeypatch):
        cached = ExpiredCreds(refresh_error=RefreshError("invalid_grant: Token has been revoked."))
        self._cached(monkeypatch, tmp_path, cached)
        auth = GoogleAuthService(creds)

        with pytest.raises(AuthError, match="invalid_grant"):
            auth.initialize()
        assert auth.is_signed_in() is False
        assert (tmp_path / "token.json").read_text(encoding="utf-8") == '{"token": "stale"}'

    def test_sign_out_removes_token(self, creds, tmp_path):
        token = tmp_path / "token.json"
        token.write_text("{}", encoding="utf-8")
        auth = GoogleAuthService(creds)
        auth.sign_out()
        assert not token.exists()
        assert auth.is_signed_in() is False

    def test_access_token_requires_session(self, creds):
        with pytest.raises(AuthError):
            GoogleAuthService(creds).access_token()


class TestDemoAuthService:
    def test_sign_in_and_out(self):
        auth = DemoAuthService()
        auth.initialize()
        assert auth.is_signed_in() is False
        auth.sign_in()
        assert auth.is_signed_in() is True
        assert auth.access_token() == "demo-token"
        auth.sign_out()
        with pytest.raises(AuthError):
            auth.access_token()
