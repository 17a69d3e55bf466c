"""Unit tests for settings."""

import pytest

from user_accounts.config import Settings
from user_accounts.kernel.identity.errors import ConfigurationError


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
        settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.access_token_expire_minutes == 60
        assert settings.bcrypt_rounds == 10
        assert settings.uniform_login_errors is False
        assert settings.trust_proxy_headers is False
        assert settings.api_prefix == "/api/users"

    @pytest.mark.parametrize("secret", [None, "", "   "])
    def test_missing_secret_fails(self, secret):
        settings = Settings(_env_file=None, jwt_secret=secret)

        with pytest.raises(ConfigurationError):
            settings.require_jwt_secret()

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "from-env")

        assert Settings(_env_file=None).require_jwt_secret() == "from-env"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("UNIFORM_LOGIN_ERRORS", "true")
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")
        monkeypatch.setenv("CORS_ORIGINS", '["https://app.example.com"]')

        settings = Settings(_env_file=None)

        assert settings.uniform_login_errors is True
        assert settings.access_token_expire_minutes == 15
        assert settings.cors_origins == ["https://app.example.com"]
