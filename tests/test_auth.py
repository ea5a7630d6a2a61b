"""
Tests for bearer token verification.
"""

from datetime import timedelta

import pytest
from jose import jwt

from flashstudy.auth.schemas import AuthenticatedUser, PlanFeature
from flashstudy.auth.service import AuthService
from flashstudy.core.exceptions import InvalidTokenError


@pytest.fixture
def auth_service():
    return AuthService(secret_key="unit-secret", algorithm="HS256")


class TestAuthService:

    def test_round_trip(self, auth_service):
        token = auth_service.create_access_token("user-42", features=["unlimited_decks"])
        user = auth_service.authenticate(token)

        assert user.id == "user-42"
        assert user.features == ["unlimited_decks"]

    def test_expired_token(self, auth_service):
        token = auth_service.create_access_token("user-42", expires_delta=timedelta(seconds=-5))
        with pytest.raises(InvalidTokenError):
            auth_service.verify_token(token)

    def test_wrong_secret(self, auth_service):
        token = AuthService(secret_key="other", algorithm="HS256").create_access_token("user-42")
        with pytest.raises(InvalidTokenError):
            auth_service.verify_token(token)

    def test_missing_subject(self, auth_service):
        token = jwt.encode({"features": []}, "unit-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError) as exc:
            auth_service.verify_token(token)
        assert exc.value.message == "Token has no subject"

    def test_malformed_features_claim(self, auth_service):
        token = jwt.encode({"sub": "u", "features": "unlimited_decks"}, "unit-secret", algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            auth_service.verify_token(token)

    def test_garbage_token(self, auth_service):
        with pytest.raises(InvalidTokenError):
            auth_service.verify_token("not.a.jwt")


class TestAuthenticatedUser:

    def test_has_feature(self):
        user = AuthenticatedUser(id="u", features=["ai_flashcard_generation"])
        assert user.has(PlanFeature.AI_FLASHCARD_GENERATION)
        assert not user.has(PlanFeature.UNLIMITED_DECKS)
