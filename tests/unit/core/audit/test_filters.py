"""Tests for SecretRedactor."""

from __future__ import annotations

from secrets_bootstrap.core.audit.filters import SecretRedactor


class TestSecretRedactor:
    def test_masks_sensitive_keys(self) -> None:
        data = {"ApiKey": "sk-1234567890", "JwtSecret": "jwt-value", "DatabaseUrl": "postgres://db"}
        result = SecretRedactor().redact(data)
        assert result["ApiKey"] == "sk*********90"
        assert result["JwtSecret"] == "jw*****ue"
        assert result["DatabaseUrl"] == "postgres://db"

    def test_case_insensitive(self) -> None:
        redactor = SecretRedactor()
        assert redactor.is_sensitive("DB_PASSWORD")
        assert redactor.is_sensitive("github_token")
        assert not redactor.is_sensitive("REDIS_URL")

    def test_always_mask(self) -> None:
        redactor = SecretRedactor(always_mask={"redis_url"})
        assert redactor.redact({"REDIS_URL": "redis://cache:6379"}) == {"REDIS_URL": "re**************79"}

    def test_short_values_fully_masked(self) -> None:
        assert SecretRedactor().redact({"TOKEN": "abc"}) == {"TOKEN": "****"}

    def test_does_not_modify_input(self) -> None:
        data = {"SECRET": "value"}
        SecretRedactor().redact(data)
        assert data == {"SECRET": "value"}
