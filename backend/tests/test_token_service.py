"""
Bearer token tests.

Verifies:
- A freshly issued token validates for its own subject only
- Expired, tampered and foreign-key tokens are rejected without raising
- The signer refuses an empty key and cannot be mutated
"""

import dataclasses
from datetime import timedelta

import pytest

from stockledger.services.token_service import TokenSigner
from stockledger.time_utils import utcnow


@pytest.fixture
def signer():
    return TokenSigner(secret="unit-test-secret-0123456789abcdef", ttl=timedelta(days=180))


class TestIssueAndValidate:

    def test_round_trip(self, signer):
        token = signer.issue("alice@example.com")

        assert signer.extract_subject(token) == "alice@example.com"
        assert signer.validate(token, "alice@example.com") is True

    def test_wrong_subject(self, signer):
        token = signer.issue("alice@example.com")
        assert signer.validate(token, "bob@example.com") is False

    def test_expired_token(self, signer):
        issued = utcnow() - timedelta(days=181)
        token = signer.issue("alice@example.com", now=issued)

        assert signer.validate(token, "alice@example.com") is False
        # Subject is still readable: the gate uses it to find the user first
        assert signer.extract_subject(token) == "alice@example.com"

    def test_validity_boundary(self, signer):
        issued = utcnow()
        token = signer.issue("alice@example.com", now=issued)

        assert signer.validate(token, "alice@example.com", now=issued + timedelta(days=179)) is True
        assert signer.validate(token, "alice@example.com", now=issued + timedelta(days=180)) is False

    def test_expires_at(self, signer):
        issued = utcnow()
        assert signer.expires_at(now=issued) == issued + timedelta(days=180)


class TestRejection:

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer x"])
    def test_malformed(self, signer, token):
        assert signer.extract_subject(token) is None
        assert signer.validate(token, "alice@example.com") is False

    def test_tampered_signature(self, signer):
        head, _, sig = signer.issue("alice@example.com").split(".")
        _, forged_payload, _ = signer.issue("mallory@example.com").split(".")
        tampered = ".".join([head, forged_payload, sig])

        assert signer.extract_subject(tampered) is None
        assert signer.validate(tampered, "alice@example.com") is False

    def test_other_key(self, signer):
        other = TokenSigner(secret="a-completely-different-secret-xyz", ttl=timedelta(days=1))
        token = other.issue("alice@example.com")

        assert signer.extract_subject(token) is None
        assert signer.validate(token, "alice@example.com") is False


class TestSignerConstruction:

    def test_empty_secret(self):
        with pytest.raises(ValueError):
            TokenSigner(secret="", ttl=timedelta(days=1))

    def test_non_positive_ttl(self):
        with pytest.raises(ValueError):
            TokenSigner(secret="s3cret", ttl=timedelta(0))

    def test_immutable(self, signer):
        with pytest.raises(dataclasses.FrozenInstanceError):
            signer.secret = "swapped"

    def test_app_signer_is_built_from_config(self, app):
        built = app.extensions["token_signer"]
        assert built.secret == app.config["JWT_SECRET"]
        assert built.ttl == app.config["TOKEN_TTL"]
