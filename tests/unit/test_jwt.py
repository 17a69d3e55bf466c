"""Unit tests for token issuance and verification."""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from user_accounts.kernel.identity.errors import ConfigurationError, InvalidToken
from user_accounts.kernel.identity.jwt import DEFAULT_TOKEN_TTL, TokenIssuer


class TestTokenIssuer:
    """Tests for TokenIssuer."""

    @pytest.mark.parametrize("secret", [None, "", "   "])
    def test_missing_secret_is_configuration_error(self, secret):
        with pytest.raises(ConfigurationError):
            TokenIssuer(secret)

    def test_default_ttl_is_one_hour(self):
        assert DEFAULT_TOKEN_TTL == timedelta(hours=1)

    def test_issue_and_verify(self, issuer):
        user_id = uuid.uuid4()
        token = issuer.issue(user_id)

        claims = issuer.verify(token)
        assert claims.subject_id == str(user_id)
        assert claims.expires_at - claims.issued_at == timedelta(hours=1)
        assert claims.token_id

    def test_custom_ttl(self, issuer):
        claims = issuer.verify(issuer.issue("abc", ttl=timedelta(minutes=5)))

        assert claims.expires_at - claims.issued_at == timedelta(minutes=5)

    def test_token_is_compact_jws(self, issuer):
        token = issuer.issue(uuid.uuid4())

        assert token.count(".") == 2
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_tampered_token_rejected(self, issuer):
        token = issuer.issue(uuid.uuid4())
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(InvalidToken):
            issuer.verify(tampered)

    def test_other_secret_rejected(self, issuer):
        token = TokenIssuer("some-other-secret").issue(uuid.uuid4())

        with pytest.raises(InvalidToken):
            issuer.verify(token)

    def test_expired_token_rejected(self, issuer):
        token = issuer.issue(uuid.uuid4(), ttl=timedelta(seconds=-30))

        with pytest.raises(InvalidToken):
            issuer.verify(token)

    def test_garbage_rejected(self, issuer):
        with pytest.raises(InvalidToken):
            issuer.verify("not.a.token")

    def test_non_access_token_rejected(self, issuer):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "iat": 0, "exp": 4102444800, "type": "refresh"},
            issuer.secret_key,
            algorithm="HS256",
        )

        with pytest.raises(InvalidToken):
            issuer.verify(token)
