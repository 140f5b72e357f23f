"""Tests for burrow.core.settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from burrow.core.settings import BurrowSettings, get_settings


class TestBurrowSettings:
    def test_defaults(self, monkeypatch):
        for name in ["BURROW_DEFAULT_PAGE_SIZE", "BURROW_MAX_PAGE_SIZE", "BURROW_STORAGE_URL", "BURROW_MODELS"]:
            monkeypatch.delenv(name, raising=False)
        settings = BurrowSettings(_env_file=None)
        assert settings.default_page_size == 20
        assert settings.max_page_size == 100
        assert settings.check_ancestors is True
        assert settings.request_timeout is None
        assert settings.storage_url == "memory://"
        assert settings.models == []

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("BURROW_MAX_PAGE_SIZE", "50")
        monkeypatch.setenv("BURROW_CHECK_ANCESTORS", "false")
        monkeypatch.setenv("BURROW_MODELS", '["app.models", "app.more_models"]')
        settings = BurrowSettings(_env_file=None)
        assert settings.max_page_size == 50
        assert settings.check_ancestors is False
        assert settings.models == ["app.models", "app.more_models"]

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("BURROW_STORAGE_URL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("BURROW_STORAGE_URL=sqlite:///burrow.db\n")
        assert BurrowSettings(_env_file=env_file).storage_url == "sqlite:///burrow.db"

    def test_default_cannot_exceed_max(self):
        with pytest.raises(ValidationError, match="default_page_size"):
            BurrowSettings(_env_file=None, default_page_size=50, max_page_size=10)

    @pytest.mark.parametrize("field", ["default_page_size", "max_page_size"])
    def test_page_sizes_positive(self, field):
        with pytest.raises(ValidationError):
            BurrowSettings(_env_file=None, **{field: 0})

    def test_timeout_positive(self):
        with pytest.raises(ValidationError):
            BurrowSettings(_env_file=None, request_timeout=0)

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
